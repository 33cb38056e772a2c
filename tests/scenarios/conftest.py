"""Scenario harness: a strike session running against the simulated host."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import numpy as np
import pytest

from navstrike.core.bus import EventBus
from navstrike.core.clock import SimClock
from navstrike.core.scheduler import Scheduler
from navstrike.core.types import Faction
from navstrike.host.simulated import SimHostConfig, SimulatedHost, SimUnit
from navstrike.strike.config import StrikeConfig
from navstrike.strike.session import StrikeSession
from navstrike.utils.vectors import as_vec3


# ---------------------------------------------------------------------------
# Standard order of battle
# ---------------------------------------------------------------------------


def standard_units() -> list[SimUnit]:
    return [
        SimUnit("Bunker Hill", Faction.BLUE, np.zeros(3), ["BGM_109B", "RIM_66"]),
        SimUnit("Arleigh Burke", Faction.BLUE, np.array([500.0, 0.0, 0.0]), ["RIM_66"]),
        SimUnit("Nakhimov", Faction.RED, np.array([90000.0, 0.0, 0.0]), ["3M-54T"]),
    ]


# ---------------------------------------------------------------------------
# StrikeScenario
# ---------------------------------------------------------------------------


class StrikeScenario:
    """Clock, scheduler, bus, simulated host and a started session.

    Munitions fly at 250 m/s and leave the rail 1 s after the fire command,
    so a target 5 km out is reached 21 s after the order.
    """

    def __init__(
        self,
        units: list[SimUnit] | None = None,
        markers: list[tuple[str, Any]] | None = None,
        strike: StrikeConfig | None = None,
        munition_speed_mps: float = 250.0,
        launch_delay_s: float = 1.0,
    ):
        self.clock = SimClock(start_epoch=1_000_000.0)
        self.scheduler = Scheduler(self.clock)
        self.bus = EventBus()
        self.host = SimulatedHost(
            SimHostConfig(
                munition_speed_mps=munition_speed_mps,
                launch_delay_s=launch_delay_s,
                units=units if units is not None else standard_units(),
                markers=[(label, as_vec3(pos)) for label, pos in markers or []],
            ),
            self.scheduler,
            self.bus,
        )
        self.session = StrikeSession(
            strike or StrikeConfig(),
            discovery=self.host,
            markers=self.host,
            tasking=self.host,
            telemetry=self.host,
            sink=self.host,
            scheduler=self.scheduler,
            bus=self.bus,
        )
        self.session.start()

    def at(self, t: float, action: Callable[..., Any], *args: Any) -> None:
        self.scheduler.call_at(t, action, *args)

    def run(self, duration: float, dt: float = 1.0) -> None:
        self.host.run(duration, dt)

    def messages(self, faction: Faction) -> list[str]:
        return self.host.messages_for(faction)

    def asset(self, faction: Faction, name: str):
        return self.session.registry.lookup(faction, name)


@pytest.fixture
def scenario_factory() -> Callable[..., StrikeScenario]:
    return StrikeScenario
