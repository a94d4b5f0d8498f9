"""
Lightweight Event System for Extensibility

Provides a simple event emitter for notifying interested listeners when a
physical profile or a metric changes. The bus is an ordinary object owned
by the composition root (main.py keeps one on app.state) and handed to the
services that publish through it; there is no module-level registry.
"""
import logging
from typing import Callable, Dict, List, Optional

from fastapi import Request

logger = logging.getLogger(__name__)


class EventBus:
    """Synchronous publish/subscribe channel keyed by event name."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_name: str, handler: Callable):
        """
        Subscribe a handler function to an event.

        Args:
            event_name: Name of the event (e.g., 'physical_profile.created')
            handler: Function called with the event data as keyword arguments

        Example:
            def on_profile_created(user_id: str, profile_id: str, **_):
                ...

            bus.subscribe(EVENT_PROFILE_CREATED, on_profile_created)
        """
        self._handlers.setdefault(event_name, []).append(handler)
        logger.debug(f"Subscribed handler to event: {event_name}")

    def emit(self, event_name: str, **kwargs):
        """
        Emit an event, calling all subscribed handlers in registration order.

        A failing handler is logged and does not stop the remaining handlers
        or propagate to the publisher.
        """
        for handler in self._handlers.get(event_name, []):
            try:
                handler(**kwargs)
            except Exception as e:
                logger.error(f"Error in event handler for {event_name}: {e}", exc_info=True)

    def clear(self):
        """Drop every registered handler."""
        self._handlers.clear()

    def handler_count(self, event_name: str) -> int:
        return len(self._handlers.get(event_name, []))


# Event names
EVENT_PROFILE_CREATED = 'physical_profile.created'
EVENT_HEART_RATE_ZONES_CALCULATED = 'heart_rate_zones.calculated'


def get_event_bus(request: Request) -> Optional[EventBus]:
    """FastAPI dependency: the application's event bus, if one was configured at startup."""
    return getattr(request.app.state, "event_bus", None)
