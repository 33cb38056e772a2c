"""Launch authorization: inventory-gated, capped salvo tasking."""

from __future__ import annotations

import logging

from navstrike.core.types import Target
from navstrike.strike.config import StrikeConfig
from navstrike.strike.interfaces import WeaponTasking
from navstrike.strike.markers import TargetResolver
from navstrike.strike.notifications import Notifier
from navstrike.strike.registry import Asset, AssetRegistry

logger = logging.getLogger(__name__)


class LaunchAuthorizer:
    """Decides how many missiles an asset may fire and tasks the launches.

    A salvo is ``min(targets offered, inventory left, simultaneous cap)``.
    Inventory is charged before the first fire command goes out; a fire
    command that fails is logged as a missed launch and never retried.
    """

    def __init__(
        self,
        config: StrikeConfig,
        registry: AssetRegistry,
        resolver: TargetResolver,
        tasking: WeaponTasking,
        notifier: Notifier,
    ):
        self._config = config
        self._registry = registry
        self._resolver = resolver
        self._tasking = tasking
        self._notifier = notifier

    def authorize(self, asset: Asset, targets: list[Target]) -> int:
        """Task up to the permitted number of launches at *targets*.

        Targets are used in the order given.  Returns the number of launches
        tasked; 0 when the asset is unavailable, empty, or nothing is offered.
        """
        audience = asset.faction
        if not self._registry.is_available(asset):
            self._notifier.notify(audience, f"Ship {asset.name} is not available for tasking.")
            return 0

        with asset.lock:
            if asset.remaining_inventory <= 0:
                self._notifier.notify(audience, f"No missiles remaining on {asset.name}.")
                return 0

            if not targets:
                self._notifier.notify(
                    audience,
                    f"No valid {self._resolver.prefix} markers found for {asset.name}.",
                )
                return 0

            count = min(
                len(targets),
                asset.remaining_inventory,
                self._config.max_simultaneous_launches,
            )
            asset.charge(count)
            used = targets[:count]

            for target in used:
                asset.push_target(target.position)
                self._issue(asset, target)

            self._notifier.notify(
                audience,
                f"Ship {asset.name} launched {count} missiles. "
                f"{asset.remaining_inventory} remaining.",
            )

        self._resolver.consume(used)
        logger.debug(
            "Authorized %d launches from %s at %s",
            count, asset.name, [t.label for t in used],
        )
        return count

    def _issue(self, asset: Asset, target: Target) -> None:
        try:
            self._tasking.issue_fire_command(
                asset.name,
                target.position,
                radius=self._config.fire_radius_m,
                expend=self._config.expend_qty,
            )
        except Exception:
            logger.exception(
                "Fire command from %s at %s failed; launch counted as missed",
                asset.name, target.label,
            )
