from fastapi import Request

from .core.config import Settings, settings
from .core.events import MAINTENANCE_MODE_CHANGED, EventNotifier
from .core.flag_store import FlagStore
from .core.ip_normalizer import IPAddressNormalizer
from .core.maintenance_mode import MaintenanceMode
import logging

logger = logging.getLogger(__name__)


def log_maintenance_mode_change(event_name: str, payload: dict):
    state = "on" if payload.get("isOn") else "off"
    logger.info(f"Maintenance mode switched {state}")


def build_maintenance_mode(config: Settings = settings, event_notifier: EventNotifier = None) -> MaintenanceMode:
    """Wire a MaintenanceMode against the configured runtime directory"""
    if event_notifier is None:
        event_notifier = EventNotifier()
        event_notifier.subscribe(MAINTENANCE_MODE_CHANGED, log_maintenance_mode_change)

    return MaintenanceMode(
        store=FlagStore(config.VAR_DIR),
        event_notifier=event_notifier,
        address_normalizer=IPAddressNormalizer(),
        flag_filename=config.MAINTENANCE_FLAG_FILENAME,
        ip_filename=config.MAINTENANCE_IP_FILENAME,
    )


def get_maintenance_mode(request: Request) -> MaintenanceMode:
    return request.app.state.maintenance_mode
