"""Binds observed launches back to the targets that authorized them.

Launch events arrive asynchronously and, within one ship's salvo, not
necessarily in the order the fire commands were issued.  The next launch
from a ship is matched to the most recently queued target (LIFO).  True
launch order is not observable from the event feed, so this is kept as a
compatibility contract rather than switched to FIFO.
"""

from __future__ import annotations

import logging
from typing import Any, Hashable

from navstrike.core.types import Faction, LaunchEvent
from navstrike.strike.notifications import Notifier
from navstrike.strike.registry import AssetRegistry
from navstrike.strike.tracking import TrackedMunition, TTITracker

logger = logging.getLogger(__name__)


class LaunchAssigner:
    def __init__(self, registry: AssetRegistry, tracker: TTITracker, notifier: Notifier):
        self._registry = registry
        self._tracker = tracker
        self._notifier = notifier

    def on_launch(self, event: LaunchEvent) -> TrackedMunition | None:
        """Handle one launch event.  Events from unregistered units are ignored."""
        if not event.unit_name:
            return None
        asset = self._registry.lookup(event.faction, event.unit_name)
        if asset is None:
            logger.debug("Ignoring launch from untracked unit %r", event.unit_name)
            return None

        existing = self._tracker.get(event.weapon)
        if existing is not None:
            logger.warning(
                "Duplicate launch event for %r from %s; already tracked as missile %d",
                event.weapon, asset.name, existing.munition_id,
            )
            return existing

        target_position = asset.pop_target()
        if target_position is None:
            self._notifier.notify(
                asset.faction,
                f"Ship {asset.name}: No target position found for tracking.",
            )
            return None

        entry = self._tracker.enroll(event.weapon, target_position, asset.faction)
        self._notifier.notify(
            asset.faction,
            f"Ship {asset.name} fired Missile {entry.munition_id}.",
        )
        return entry

    def handle_bus_event(
        self,
        unit_name: str | None = None,
        weapon: Hashable = None,
        faction: Faction | None = None,
        timestamp: float = 0.0,
        **extra: Any,
    ) -> None:
        """EventBus adapter for the ``weapon_launched`` topic."""
        if weapon is None:
            logger.debug("Launch event from %r carried no weapon handle", unit_name)
            return
        self.on_launch(
            LaunchEvent(
                unit_name=unit_name,
                weapon=weapon,
                faction=faction,
                timestamp=timestamp,
                extra=extra,
            )
        )
