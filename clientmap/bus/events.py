"""
Event Bus
The controller publishes state changes here; views (the map) subscribe to redraw.
One bus per controller, never shared across sessions.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]


def _name(handler: Handler) -> str:
    return getattr(handler, '__name__', repr(handler))


class EventBus:

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = defaultdict(list)

    def on(self, event_name: str, handler: Handler) -> Callable[[], None]:
        """
        Subscribe handler to event_name.
        Returns: a callable that removes this subscription again
        """
        self._subscribers[event_name].append(handler)
        logger.debug(f"Subscribed {_name(handler)} to '{event_name}'")
        return lambda: self.off(event_name, handler)

    def off(self, event_name: str, handler: Handler):
        """Drop one subscription; unknown handlers are ignored."""
        handlers = self._subscribers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def handler_count(self, event_name: str) -> int:
        return len(self._subscribers.get(event_name, []))

    def emit(self, event_name: str, event_data: Optional[Dict[str, Any]] = None):
        """Call every subscriber in registration order. A raising subscriber is logged and skipped."""
        payload = event_data if event_data is not None else {}
        # Copy: a handler may unsubscribe while we iterate
        for handler in list(self._subscribers.get(event_name, [])):
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Subscriber {_name(handler)} failed on '{event_name}': {e}", exc_info=True)

    def clear(self):
        self._subscribers.clear()


# =============================================================================
# EVENTS
# =============================================================================

# Collection replaced or a record removed: {'clients': [...]}
EVENT_CLIENTS_CHANGED = 'clients_changed'
# Form opened on / closed: {'location': (lat, lng) | None}
EVENT_EDIT_LOCATION_CHANGED = 'edit_location_changed'
