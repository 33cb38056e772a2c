"""Host collaborator contracts consumed by the strike engine.

The engine never talks to a simulation host directly; it is handed objects
satisfying these protocols.  ``navstrike.host.simulated.SimulatedHost``
implements all of them in memory.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Hashable, Protocol, runtime_checkable

import numpy as np

from navstrike.core.types import Audience, Faction


@runtime_checkable
class CapabilityDiscovery(Protocol):
    def list_eligible_units(self, faction: Faction) -> Iterable[tuple[str, str]]:
        """Yield ``(unit name, weapon type tag)`` for every live, armed unit."""
        ...

    def unit_exists(self, name: str) -> bool:
        ...


@runtime_checkable
class MarkerSource(Protocol):
    def list_pending_markers(self) -> Iterable[tuple[Hashable, str, Any]]:
        """Yield ``(handle, label, coordinate)`` for every map marker."""
        ...

    def consume_marker(self, handle: Hashable) -> None:
        ...


@runtime_checkable
class WeaponTasking(Protocol):
    def issue_fire_command(
        self,
        unit_name: str,
        coordinate: np.ndarray,
        radius: float = 100.0,
        expend: int = 1,
    ) -> None:
        """Fire-and-forget; no acknowledgement is expected."""
        ...


@runtime_checkable
class Telemetry(Protocol):
    def object_exists(self, handle: Hashable) -> bool:
        ...

    def get_position(self, handle: Hashable) -> Any:
        ...

    def get_velocity(self, handle: Hashable) -> Any | None:
        """Velocity vector, or None when the host cannot provide one."""
        ...


@runtime_checkable
class NotificationSink(Protocol):
    def notify(self, audience: Audience, text: str, *, duration_s: float = 10.0) -> None:
        """Deliver *text* to one faction, or to everyone when *audience* is None."""
        ...
