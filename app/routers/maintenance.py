from fastapi import APIRouter, Depends, HTTPException, Request, Security, status
from app import schemas
from app.core.maintenance_mode import MaintenanceMode, InvalidFormatError
from app.core.security import get_current_admin, audit_log
from app.dependencies import get_maintenance_mode
from slowapi import Limiter
from slowapi.util import get_remote_address

router = APIRouter(prefix="/admin/maintenance", tags=["admin-maintenance"])

limiter = Limiter(key_func=get_remote_address)

PERSIST_FAILED = "Failed to persist maintenance state"


def _status(maintenance_mode: MaintenanceMode) -> schemas.MaintenanceStatus:
    return schemas.MaintenanceStatus(enabled=maintenance_mode.is_on())


def _switch(maintenance_mode: MaintenanceMode, enabled: bool, admin: schemas.TokenData) -> schemas.MaintenanceStatus:
    if not maintenance_mode.set(enabled):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=PERSIST_FAILED)
    audit_log(f"Admin {admin.username} {'enabled' if enabled else 'disabled'} maintenance mode")
    return _status(maintenance_mode)


@router.get("/status", response_model=schemas.MaintenanceStatus)
def get_maintenance_status(maintenance_mode: MaintenanceMode = Depends(get_maintenance_mode)):
    """Get current maintenance mode status (public endpoint)"""
    return _status(maintenance_mode)


@router.post("/toggle", response_model=schemas.MaintenanceStatus)
@limiter.limit("30/minute")
def toggle_maintenance(
    request: Request,
    toggle: schemas.MaintenanceToggle,
    current_admin: schemas.TokenData = Security(get_current_admin),
    maintenance_mode: MaintenanceMode = Depends(get_maintenance_mode)
):
    """Enable or disable maintenance mode (admin only)"""
    return _switch(maintenance_mode, toggle.enabled, current_admin)


@router.post("/enable", response_model=schemas.MaintenanceStatus)
@limiter.limit("30/minute")
def enable_maintenance(
    request: Request,
    current_admin: schemas.TokenData = Security(get_current_admin),
    maintenance_mode: MaintenanceMode = Depends(get_maintenance_mode)
):
    """Enable maintenance mode (admin only)"""
    return _switch(maintenance_mode, True, current_admin)


@router.post("/disable", response_model=schemas.MaintenanceStatus)
@limiter.limit("30/minute")
def disable_maintenance(
    request: Request,
    current_admin: schemas.TokenData = Security(get_current_admin),
    maintenance_mode: MaintenanceMode = Depends(get_maintenance_mode)
):
    """Disable maintenance mode (admin only)"""
    return _switch(maintenance_mode, False, current_admin)


@router.get("/addresses", response_model=schemas.AllowListInfo)
def get_allowed_addresses(
    current_admin: schemas.TokenData = Security(get_current_admin),
    maintenance_mode: MaintenanceMode = Depends(get_maintenance_mode)
):
    """List addresses exempt from maintenance mode (admin only)"""
    return schemas.AllowListInfo(addresses=maintenance_mode.get_address_info())


@router.put("/addresses", response_model=schemas.AllowListInfo)
@limiter.limit("30/minute")
def set_allowed_addresses(
    request: Request,
    allow_list: schemas.AllowListUpdate,
    current_admin: schemas.TokenData = Security(get_current_admin),
    maintenance_mode: MaintenanceMode = Depends(get_maintenance_mode)
):
    """Replace the maintenance allow-list (admin only)"""
    try:
        stored = maintenance_mode.set_addresses(allow_list.addresses)
    except InvalidFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not stored:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=PERSIST_FAILED)

    audit_log(f"Admin {current_admin.username} set maintenance allow-list to '{allow_list.addresses}'")
    return schemas.AllowListInfo(addresses=maintenance_mode.get_address_info())


@router.delete("/addresses", response_model=schemas.AllowListInfo)
@limiter.limit("30/minute")
def clear_allowed_addresses(
    request: Request,
    current_admin: schemas.TokenData = Security(get_current_admin),
    maintenance_mode: MaintenanceMode = Depends(get_maintenance_mode)
):
    """Clear the maintenance allow-list (admin only)"""
    if not maintenance_mode.set_addresses(""):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=PERSIST_FAILED)

    audit_log(f"Admin {current_admin.username} cleared maintenance allow-list")
    return schemas.AllowListInfo(addresses=[])
