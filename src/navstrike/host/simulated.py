"""In-memory simulation host.

Implements every collaborator protocol the strike engine consumes:
capability discovery, map markers, weapon tasking, telemetry, the launch
event feed (published on the :class:`EventBus`) and a recording
notification sink.  Munitions fly straight at their aim point at constant
speed; this is scenario scaffolding, not a flight model.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Hashable

import numpy as np

from navstrike.core.bus import EventBus
from navstrike.core.scheduler import Scheduler
from navstrike.core.types import Audience, Faction, LaunchEvent, parse_faction
from navstrike.utils.vectors import as_vec3, distance

logger = logging.getLogger(__name__)


@dataclass
class SimUnit:
    name: str
    faction: Faction
    position: np.ndarray
    weapons: list[str] = field(default_factory=list)
    alive: bool = True


@dataclass
class SimMarker:
    handle: int
    label: str
    position: np.ndarray


@dataclass
class SimMunition:
    """A constant-velocity munition flying at a fixed aim point."""

    handle: str
    shooter: str
    position: np.ndarray
    velocity: np.ndarray
    aim_point: np.ndarray
    arrived: bool = False
    velocity_available: bool = True


@dataclass(frozen=True)
class FireCommand:
    unit_name: str
    coordinate: tuple[float, float, float]
    radius: float
    expend: int
    time: float


@dataclass(frozen=True)
class SimNotification:
    time: float
    audience: Audience
    text: str
    duration_s: float


@dataclass
class SimHostConfig:
    """Scenario for the simulated host (``navstrike.scenario`` section)."""

    munition_speed_mps: float = 250.0
    launch_delay_s: float = 2.0
    units: list[SimUnit] = field(default_factory=list)
    markers: list[tuple[str, np.ndarray]] = field(default_factory=list)

    @classmethod
    def from_omegaconf(cls, cfg: Any) -> SimHostConfig:
        """Build from OmegaConf dict or plain dict."""
        if cfg is None:
            return cls()

        try:
            from omegaconf import OmegaConf

            if hasattr(cfg, "_metadata"):
                cfg = OmegaConf.to_container(cfg, resolve=True)
        except ImportError:
            pass

        units = [
            SimUnit(
                name=str(u["name"]),
                faction=parse_faction(u["faction"]),
                position=as_vec3(u.get("position", [0.0, 0.0, 0.0])),
                weapons=[str(w) for w in u.get("weapons", []) or []],
                alive=bool(u.get("alive", True)),
            )
            for u in cfg.get("units", []) or []
        ]
        markers = [
            (str(m["label"]), as_vec3(m["position"]))
            for m in cfg.get("markers", []) or []
        ]
        return cls(
            munition_speed_mps=float(cfg.get("munition_speed_mps", 250.0)),
            launch_delay_s=float(cfg.get("launch_delay_s", 2.0)),
            units=units,
            markers=markers,
        )


class SimulatedHost:
    """Scenario host driving units, markers and munitions on a sim clock."""

    def __init__(
        self,
        config: SimHostConfig,
        scheduler: Scheduler,
        bus: EventBus,
    ):
        self._config = config
        self._scheduler = scheduler
        self._bus = bus
        self._units: dict[str, SimUnit] = {}
        self._markers: dict[int, SimMarker] = {}
        self._munitions: dict[str, SimMunition] = {}
        self._marker_ids = itertools.count(1)
        self._munition_ids = itertools.count(1)
        self.fire_commands: list[FireCommand] = []
        self.notifications: list[SimNotification] = []

        for unit in config.units:
            self.add_unit(unit)
        for label, position in config.markers:
            self.add_marker(label, position)

    # ------------------------------------------------------------------
    # Scenario control
    # ------------------------------------------------------------------

    def add_unit(self, unit: SimUnit) -> None:
        self._units[unit.name] = unit

    def destroy_unit(self, name: str) -> None:
        if name in self._units:
            self._units[name].alive = False

    def add_marker(self, label: str, position: Any) -> int:
        handle = next(self._marker_ids)
        self._markers[handle] = SimMarker(handle=handle, label=label, position=as_vec3(position))
        return handle

    @property
    def markers(self) -> list[SimMarker]:
        return list(self._markers.values())

    @property
    def munitions(self) -> list[SimMunition]:
        return list(self._munitions.values())

    def munition(self, handle: Hashable) -> SimMunition | None:
        return self._munitions.get(handle)

    def destroy_munition(self, handle: Hashable) -> None:
        self._munitions.pop(handle, None)

    def messages_for(self, audience: Audience) -> list[str]:
        """Texts delivered to *audience* directly or by broadcast."""
        return [
            n.text for n in self.notifications
            if n.audience is None or n.audience == audience
        ]

    # ------------------------------------------------------------------
    # CapabilityDiscovery
    # ------------------------------------------------------------------

    def list_eligible_units(self, faction: Faction):
        for unit in self._units.values():
            if unit.faction != faction or not unit.alive:
                continue
            for tag in unit.weapons:
                yield unit.name, tag

    def unit_exists(self, name: str) -> bool:
        unit = self._units.get(name)
        return unit is not None and unit.alive

    # ------------------------------------------------------------------
    # MarkerSource
    # ------------------------------------------------------------------

    def list_pending_markers(self):
        for marker in self._markers.values():
            yield marker.handle, marker.label, marker.position.copy()

    def consume_marker(self, handle: Hashable) -> None:
        if self._markers.pop(handle, None) is None:
            logger.warning("Marker %r already removed", handle)

    # ------------------------------------------------------------------
    # WeaponTasking
    # ------------------------------------------------------------------

    def issue_fire_command(
        self,
        unit_name: str,
        coordinate: np.ndarray,
        radius: float = 100.0,
        expend: int = 1,
    ) -> None:
        aim = as_vec3(coordinate)
        self.fire_commands.append(
            FireCommand(
                unit_name=unit_name,
                coordinate=tuple(aim.tolist()),
                radius=radius,
                expend=expend,
                time=self._scheduler.clock.elapsed(),
            )
        )
        for _ in range(expend):
            self._scheduler.call_later(self._config.launch_delay_s, self._launch, unit_name, aim)

    def _launch(self, unit_name: str, aim: np.ndarray) -> None:
        unit = self._units.get(unit_name)
        if unit is None or not unit.alive:
            logger.debug("Launch from %s dropped: unit gone", unit_name)
            return
        los = aim - unit.position
        rng = distance(unit.position, aim)
        velocity = los / rng * self._config.munition_speed_mps if rng > 0 else np.zeros(3)
        handle = f"WPN-{next(self._munition_ids):04d}"
        self._munitions[handle] = SimMunition(
            handle=handle,
            shooter=unit_name,
            position=unit.position.copy(),
            velocity=velocity,
            aim_point=aim.copy(),
        )
        self._bus.publish_launch(
            LaunchEvent(
                unit_name=unit_name,
                weapon=handle,
                faction=unit.faction,
                timestamp=self._scheduler.clock.now(),
            )
        )

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def object_exists(self, handle: Hashable) -> bool:
        return handle in self._munitions

    def get_position(self, handle: Hashable) -> np.ndarray:
        return self._munitions[handle].position.copy()

    def get_velocity(self, handle: Hashable) -> np.ndarray | None:
        m = self._munitions[handle]
        return m.velocity.copy() if m.velocity_available else None

    # ------------------------------------------------------------------
    # NotificationSink
    # ------------------------------------------------------------------

    def notify(self, audience: Audience, text: str, *, duration_s: float = 10.0) -> None:
        self.notifications.append(
            SimNotification(
                time=self._scheduler.clock.elapsed(),
                audience=audience,
                text=text,
                duration_s=duration_s,
            )
        )

    # ------------------------------------------------------------------
    # Kinematics
    # ------------------------------------------------------------------

    def step(self, dt: float) -> None:
        """Move every munition by *dt* seconds.

        A munition that would pass its aim point stops on it for one step
        and is removed on the next (detonation).
        """
        for handle, m in list(self._munitions.items()):
            if m.arrived:
                del self._munitions[handle]
                continue
            remaining = distance(m.position, m.aim_point)
            travel = float(np.linalg.norm(m.velocity)) * dt
            if travel >= remaining:
                m.position = m.aim_point.copy()
                m.arrived = True
            else:
                m.position = m.position + m.velocity * dt

    def run(self, duration: float, dt: float) -> None:
        """Alternate kinematics and timer dispatch for *duration* seconds."""
        steps = int(round(duration / dt))
        for _ in range(steps):
            self.step(dt)
            self._scheduler.advance(dt)
