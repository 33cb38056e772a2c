"""Strike session: the session-scoped context tying the engine together.

Owns the asset registry, the TTI tracker and the munition id sequence,
wires the launch-event subscription on :meth:`StrikeSession.start`, and
exposes the operator commands (fire, check status) the host menu binds to.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any

from navstrike.core.bus import EventBus
from navstrike.core.scheduler import Scheduler
from navstrike.core.types import Faction, parse_faction
from navstrike.strike.assignment import LaunchAssigner
from navstrike.strike.authorization import LaunchAuthorizer
from navstrike.strike.config import StrikeConfig
from navstrike.strike.interfaces import (
    CapabilityDiscovery,
    MarkerSource,
    NotificationSink,
    Telemetry,
    WeaponTasking,
)
from navstrike.strike.markers import TargetResolver
from navstrike.strike.notifications import Notifier
from navstrike.strike.registry import Asset, AssetRegistry
from navstrike.strike.tracking import TTITracker
from navstrike.utils.logging import strike_context

logger = logging.getLogger(__name__)

MENU_TITLE = "Navy Strike Group"
CMD_STATUS = "Check Status"
CMD_FIRE = "Fire Cruise Missiles"

_session_ids = itertools.count(1)


class StrikeSession:
    """One strike-management session over a single set of assets.

    All state lives here and is discarded with the session.  Registry
    contents are derived from capability discovery in :meth:`start`.
    """

    def __init__(
        self,
        config: StrikeConfig,
        *,
        discovery: CapabilityDiscovery,
        markers: MarkerSource,
        tasking: WeaponTasking,
        telemetry: Telemetry,
        sink: NotificationSink,
        scheduler: Scheduler,
        bus: EventBus | None = None,
    ):
        self._config = config
        self._scheduler = scheduler
        self._bus = bus if bus is not None else EventBus()
        self._started = False
        self._session_id = next(_session_ids)
        # Serializes marker resolution with authorization across fire commands
        self._command_lock = threading.RLock()

        self._notifier = Notifier(
            sink,
            duration_s=config.message_duration_s,
            broadcast=config.broadcast_notifications,
        )
        self._registry = AssetRegistry(discovery)
        self._resolver = TargetResolver(markers, prefix=config.marker_prefix)
        self._tracker = TTITracker(
            telemetry,
            scheduler,
            self._notifier,
            update_interval_s=config.tti_update_interval_s,
        )
        self._authorizer = LaunchAuthorizer(
            config, self._registry, self._resolver, tasking, self._notifier,
        )
        self._assigner = LaunchAssigner(self._registry, self._tracker, self._notifier)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> StrikeConfig:
        return self._config

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def registry(self) -> AssetRegistry:
        return self._registry

    @property
    def tracker(self) -> TTITracker:
        return self._tracker

    @property
    def authorizer(self) -> LaunchAuthorizer:
        return self._authorizer

    @property
    def assigner(self) -> LaunchAssigner:
        return self._assigner

    @property
    def resolver(self) -> TargetResolver:
        return self._resolver

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def started(self) -> bool:
        return self._started

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> int:
        """Discover assets and subscribe to launch events.

        Returns the number of assets discovered.  Calling twice is a no-op.
        """
        if self._started:
            return len(self._registry)
        count = self._registry.discover(self._config)
        self._bus.subscribe_launches(self._on_launch)
        self._started = True
        logger.info(
            "Strike session started: %d assets, cap %d, prefix %s",
            count, self._config.max_simultaneous_launches, self._config.marker_prefix,
        )
        return count

    def stop(self) -> None:
        if not self._started:
            return
        self._bus.unsubscribe_launches(self._on_launch)
        self._started = False
        logger.info("Strike session stopped with %d munitions in flight", len(self._tracker))

    def _on_launch(self, **fields: Any) -> None:
        with strike_context(
            session=self._session_id,
            faction=fields.get("faction"),
            ship=fields.get("unit_name"),
        ):
            self._assigner.handle_bus_event(**fields)

    # ------------------------------------------------------------------
    # Operator commands
    # ------------------------------------------------------------------

    def fire(self, faction: Faction | str, ship_name: str) -> int:
        """Fire at every currently designated marker the ship can cover."""
        faction = parse_faction(faction)
        with strike_context(session=self._session_id, faction=faction, ship=ship_name):
            asset = self._registry.lookup(faction, ship_name)
            if asset is None:
                self._notifier.notify(faction, f"Ship {ship_name} is not available for tasking.")
                return 0
            with self._command_lock:
                return self._authorizer.authorize(asset, self._resolver.resolve())

    def check_status(self, faction: Faction | str, ship_name: str) -> Asset | None:
        """Report a ship's inventory, or that it is unavailable."""
        faction = parse_faction(faction)
        with strike_context(session=self._session_id, faction=faction, ship=ship_name):
            return self._report_status(faction, ship_name)

    def _report_status(self, faction: Faction, ship_name: str) -> Asset | None:
        asset = self._registry.lookup(faction, ship_name)
        if asset is None or not self._registry.is_available(asset):
            self._notifier.notify(faction, f"Ship {ship_name} is not available for tasking.")
            return None
        self._notifier.notify(
            faction,
            f"Ship {asset.name} is online. "
            f"Missile Inventory: {asset.remaining_inventory} remaining.",
        )
        return asset

    def command_menu(self) -> dict[Faction, list[tuple[str, list[str]]]]:
        """Per-faction ``(ship, [command labels])`` entries for the host menu."""
        return {
            faction: [
                (asset.name, [CMD_STATUS, CMD_FIRE])
                for asset in self._registry.list_assets(faction)
            ]
            for faction in Faction
        }

    def status(self) -> dict[str, Any]:
        return {
            "session": self._session_id,
            "started": self._started,
            "assets": {
                faction.value: [a.to_dict() for a in self._registry.list_assets(faction)]
                for faction in Faction
            },
            "in_flight": [m.to_dict() for m in self._tracker.active],
            "resolved": {k.value: v for k, v in self._tracker.outcomes.items()},
        }

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def from_config(
        cls,
        cfg: Any,
        host: Any,
        scheduler: Scheduler,
        bus: EventBus | None = None,
    ) -> StrikeSession:
        """Build from the ``navstrike.strike`` section and a single host
        object implementing every collaborator protocol."""
        return cls(
            StrikeConfig.from_omegaconf(cfg),
            discovery=host,
            markers=host,
            tasking=host,
            telemetry=host,
            sink=host,
            scheduler=scheduler,
            bus=bus,
        )
