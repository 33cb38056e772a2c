"""Asset registry: launch-capable ships per faction.

Each asset carries its remaining missile inventory and the queue of targets
already authorized but not yet matched to an observed launch.  Inventory
and queue are only touched under the asset's own lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

import numpy as np

from navstrike.core.types import Faction
from navstrike.strike.config import StrikeConfig
from navstrike.strike.interfaces import CapabilityDiscovery

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Asset:
    """One launch-capable unit."""

    name: str
    faction: Faction
    remaining_inventory: int
    pending_targets: list[np.ndarray] = field(default_factory=list)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def charge(self, count: int) -> None:
        """Deduct *count* missiles.  Caller holds ``lock``."""
        if count < 0 or count > self.remaining_inventory:
            raise ValueError(
                f"Cannot charge {count} from inventory {self.remaining_inventory}"
            )
        self.remaining_inventory -= count

    def push_target(self, position: np.ndarray) -> None:
        """Queue an authorized aim point.  Caller holds ``lock``."""
        self.pending_targets.append(np.array(position, dtype=float))

    def pop_target(self) -> np.ndarray | None:
        """Take the most recently queued aim point (LIFO), or None if empty."""
        with self.lock:
            if not self.pending_targets:
                return None
            return self.pending_targets.pop()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "faction": self.faction.value,
            "remaining_inventory": self.remaining_inventory,
            "pending_targets": len(self.pending_targets),
        }


def matches_weapon_type(tag: str, allowed: tuple[str, ...]) -> bool:
    """True if *tag* equals or starts with one of the *allowed* identifiers."""
    return any(tag == a or tag.startswith(a) for a in allowed)


class AssetRegistry:
    """Holds every known asset, keyed by faction then name.

    Entries are never removed during a session; an asset whose backing
    unit no longer exists is simply reported unavailable.
    """

    def __init__(self, discovery: CapabilityDiscovery):
        self._discovery = discovery
        self._assets: dict[Faction, dict[str, Asset]] = {f: {} for f in Faction}

    def discover(self, config: StrikeConfig) -> int:
        """Populate the registry from the host's capability query.

        A unit qualifies when any reported weapon tag matches its faction's
        allow-list.  Returns the number of assets registered.
        """
        count = 0
        for faction in Faction:
            allowed = config.weapon_types_for(faction)
            if not allowed:
                continue
            try:
                eligible = list(self._discovery.list_eligible_units(faction))
            except Exception:
                logger.exception("Capability query for %s failed", faction.value)
                continue
            for name, tag in eligible:
                if name in self._assets[faction]:
                    continue
                if matches_weapon_type(tag, allowed):
                    self.register(
                        Asset(
                            name=name,
                            faction=faction,
                            remaining_inventory=config.max_missiles_per_ship,
                        )
                    )
                    count += 1
        logger.info("Discovered %d strike-capable assets", count)
        return count

    def register(self, asset: Asset) -> None:
        self._assets[asset.faction][asset.name] = asset

    def list_assets(self, faction: Faction) -> list[Asset]:
        return list(self._assets[faction].values())

    def lookup(self, faction: Faction | None, name: str) -> Asset | None:
        """Find an asset by name.  ``faction=None`` searches every faction."""
        if faction is not None:
            return self._assets[faction].get(name)
        for by_name in self._assets.values():
            if name in by_name:
                return by_name[name]
        return None

    def is_available(self, asset: Asset) -> bool:
        """Ask the host whether the unit still exists; a failing query counts as no."""
        try:
            return bool(self._discovery.unit_exists(asset.name))
        except Exception:
            logger.exception("Existence query for %s failed", asset.name)
            return False

    def __len__(self) -> int:
        return sum(len(v) for v in self._assets.values())
