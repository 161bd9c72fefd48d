"""In-process publish/subscribe for app-wide notifications.

Delivery is broadcast: every subscriber of an event receives every publish.
A failing subscriber is logged and does not stop delivery to the others, so
subscribers should be idempotent and cheap.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from todolist.utils.logger import get_logger

# The store has never been populated on this install
SHOULD_LOAD_INITIAL_DATA = "should_load_initial_data"
# Stored tasks changed; list views should refresh
DATA_DID_LOAD = "data_did_load"

logger = get_logger("events")

Callback = Callable[..., Any]


class EventBus:
    """Routes named events to registered callbacks."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Callback]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, callback: Callback) -> Callable[[], None]:
        """Register a callback for an event type.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers.setdefault(event_type, []).append(callback)
        return lambda: self.unsubscribe(event_type, callback)

    def unsubscribe(self, event_type: str, callback: Callback) -> None:
        with self._lock:
            callbacks = self._subscribers.get(event_type, [])
            if callback in callbacks:
                callbacks.remove(callback)

    def publish(self, event_type: str, **payload: Any) -> int:
        """Deliver an event to all subscribers.

        Returns:
            Number of subscribers that handled the event without raising
        """
        with self._lock:
            callbacks = list(self._subscribers.get(event_type, []))

        delivered = 0
        for callback in callbacks:
            try:
                callback(**payload)
                delivered += 1
            except Exception:
                logger.exception("subscriber of %s failed", event_type)
        logger.debug("published %s to %d subscribers", event_type, len(callbacks))
        return delivered
