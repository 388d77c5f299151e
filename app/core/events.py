"""In-process event notification"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Observer = Callable[[str, Dict[str, Any]], None]

MAINTENANCE_MODE_CHANGED = "maintenance_mode_changed"


class EventNotifier:
    """Fire-and-forget dispatch of named events to subscribed observers"""

    def __init__(self):
        self._observers: Dict[str, List[Observer]] = defaultdict(list)

    def subscribe(self, event_name: str, observer: Observer):
        if observer not in self._observers[event_name]:
            self._observers[event_name].append(observer)

    def unsubscribe(self, event_name: str, observer: Observer):
        if observer in self._observers[event_name]:
            self._observers[event_name].remove(observer)

    def dispatch(self, event_name: str, payload: Dict[str, Any]) -> None:
        for observer in list(self._observers[event_name]):
            try:
                observer(event_name, dict(payload))
            except Exception as e:
                logger.error(f"Observer {observer!r} failed handling {event_name}: {e}")
