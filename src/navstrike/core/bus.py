"""In-process launch-event feed.

The host reports each weapon leaving a unit with :meth:`EventBus.publish_launch`;
the strike session attaches one handler per session with
:meth:`EventBus.subscribe_launches`.  Generic topics remain available for
host-specific events.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable
from dataclasses import asdict
from typing import Any

from navstrike.core.types import LaunchEvent

logger = logging.getLogger(__name__)

WEAPON_LAUNCHED = "weapon_launched"


class EventBus:
    """Synchronous pub/sub.

    Callbacks run outside the lock on a snapshot of the subscriber list, so
    a handler may unsubscribe itself.  A raising callback is logged and
    never reaches the publisher.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[str, list[Callable]] = defaultdict(list)

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        with self._lock:
            self._subscribers[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable[..., Any]) -> None:
        with self._lock:
            if callback in self._subscribers[event]:
                self._subscribers[event].remove(callback)

    def subscriber_count(self, event: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event, []))

    def publish(self, event: str, **kwargs: Any) -> int:
        """Deliver to every subscriber; returns how many handled it cleanly."""
        with self._lock:
            callbacks = list(self._subscribers.get(event, []))
        delivered = 0
        for callback in callbacks:
            try:
                callback(**kwargs)
                delivered += 1
            except Exception:
                logger.exception("EventBus callback error on '%s'", event)
        return delivered

    # ------------------------------------------------------------------
    # Launch feed
    # ------------------------------------------------------------------

    def subscribe_launches(self, callback: Callable[..., Any]) -> None:
        self.subscribe(WEAPON_LAUNCHED, callback)

    def unsubscribe_launches(self, callback: Callable[..., Any]) -> None:
        self.unsubscribe(WEAPON_LAUNCHED, callback)

    def publish_launch(self, event: LaunchEvent) -> int:
        """Publish a launch with its fields (and any extras) as keywords."""
        fields = asdict(event)
        extra = fields.pop("extra")
        if not self.subscriber_count(WEAPON_LAUNCHED):
            logger.debug("Launch of %r from %s has no listener", event.weapon, event.unit_name)
        return self.publish(WEAPON_LAUNCHED, **fields, **extra)
