from fastapi import Request, status
from fastapi.responses import JSONResponse
from app.core.maintenance_mode import MalformedAddressError
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)


def get_client_address(request: Request):
    """Resolve the address the request came from"""
    if settings.TRUST_FORWARDED_FOR:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def maintenance_mode_middleware(request: Request, call_next):
    """Check if maintenance mode is enabled"""

    #allow health check even in maintenance mode
    if request.url.path == "/health":
        return await call_next(request)

    #allow admin endpoints to control maintenance mode
    maintenance_prefix = f"{settings.API_V1_STR}/admin/maintenance"
    if request.url.path == maintenance_prefix or request.url.path.startswith(f"{maintenance_prefix}/"):
        return await call_next(request)

    maintenance_mode = request.app.state.maintenance_mode
    client_address = get_client_address(request)

    try:
        is_on = maintenance_mode.is_on(client_address)
    except MalformedAddressError:
        logger.warning(f"Unparsable client address {client_address!r}, allow-list not applied")
        is_on = maintenance_mode.is_on()

    if is_on:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "detail": settings.MAINTENANCE_MESSAGE,
                "status": "maintenance",
                "retry_after": settings.MAINTENANCE_RETRY_AFTER
            },
            headers={"Retry-After": str(settings.MAINTENANCE_RETRY_AFTER)}
        )

    return await call_next(request)
