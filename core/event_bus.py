"""
Event bus for booking lifecycle events.

Synchronous in-process pub/sub. Handlers run in the publisher's thread right
after the transition is persisted. Handler errors are logged and never
propagate: the transition has already committed and the caller must see its
result, not a notification failure. Handlers that do slow work (email,
push) hand it off to their own executor.
"""

import logging
from typing import Callable, Dict, List

from core.events import BookingEvent, EVENT_KINDS

logger = logging.getLogger(__name__)

WILDCARD = "*"


class EventBus:
    """
    In-process event bus for booking events.

    Subscribe by event kind (class name) or to every kind with
    subscribe_all(). Handlers are called in subscription order, kind-specific
    subscribers before wildcard ones.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable):
        """
        Subscribe to events of a specific kind.

        Args:
            event_type: Event kind (e.g. 'WorkerAssigned')
            callback: Function to call with the event

        Raises:
            ValueError: If event_type is not a known booking event kind
        """
        if event_type != WILDCARD and event_type not in EVENT_KINDS:
            raise ValueError(
                f"Unknown event kind '{event_type}'. Valid kinds: {', '.join(EVENT_KINDS)}"
            )
        self._subscribers.setdefault(event_type, []).append(callback)

    def subscribe_all(self, callback: Callable):
        """Subscribe to every booking event kind."""
        self.subscribe(WILDCARD, callback)

    def unsubscribe(self, event_type: str, callback: Callable) -> bool:
        """Remove a subscription. Returns False if it wasn't registered."""
        callbacks = self._subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    def publish(self, event: BookingEvent):
        """
        Deliver an event to its subscribers.

        Args:
            event: BookingEvent instance to publish
        """
        callbacks = self._subscribers.get(event.kind, []) + self._subscribers.get(WILDCARD, [])

        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s (event_id=%s, booking_id=%s)",
                    getattr(callback, "__name__", repr(callback)),
                    event.kind,
                    event.event_id,
                    event.booking_id,
                )
