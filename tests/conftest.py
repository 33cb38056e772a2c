"""Shared pytest fixtures for NAVSTRIKE tests."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest
from omegaconf import OmegaConf

from navstrike.core.bus import EventBus
from navstrike.core.clock import SimClock
from navstrike.core.scheduler import Scheduler
from navstrike.core.types import Faction
from navstrike.host.simulated import SimHostConfig, SimulatedHost, SimUnit
from navstrike.strike.config import StrikeConfig


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent


@pytest.fixture
def config_path(project_root: Path) -> Path:
    return project_root / "config" / "default.yaml"


@pytest.fixture
def default_config(config_path: Path):
    return OmegaConf.load(config_path)


@pytest.fixture
def sim_clock() -> SimClock:
    return SimClock(start_epoch=1000.0)


@pytest.fixture
def scheduler(sim_clock: SimClock) -> Scheduler:
    return Scheduler(sim_clock)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def strike_config() -> StrikeConfig:
    return StrikeConfig()


@pytest.fixture
def host(scheduler: Scheduler, bus: EventBus) -> SimulatedHost:
    """Simulated host with one armed ship per faction and one unarmed escort."""
    config = SimHostConfig(
        munition_speed_mps=250.0,
        launch_delay_s=1.0,
        units=[
            SimUnit("Bunker Hill", Faction.BLUE, np.zeros(3), ["BGM_109B", "RIM_66"]),
            SimUnit("Arleigh Burke", Faction.BLUE, np.array([500.0, 0.0, 0.0]), ["RIM_66"]),
            SimUnit("Nakhimov", Faction.RED, np.array([90000.0, 0.0, 0.0]), ["3M-54T"]),
        ],
    )
    return SimulatedHost(config, scheduler, bus)


@pytest.fixture(autouse=True)
def _reset_navstrike_logging():
    """Drop handlers installed by setup_logging so they don't outlive capture."""
    yield
    root = logging.getLogger("navstrike")
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    root.propagate = True
    root.setLevel(logging.NOTSET)
