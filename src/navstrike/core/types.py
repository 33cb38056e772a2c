"""Core data types for the NAVSTRIKE strike management engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Hashable

import numpy as np


class Faction(enum.Enum):
    BLUE = "blue"
    RED = "red"


class TrackOutcome(enum.Enum):
    """Lifecycle state of a tracked munition."""

    ACTIVE = "active"
    IMPACTED = "impacted"  # reached its aim point
    LOST = "lost"  # object gone or velocity unreadable
    UNRESOLVABLE = "unresolvable"  # not closing on the target

    @property
    def is_terminal(self) -> bool:
        return self is not TrackOutcome.ACTIVE


# ``None`` addresses every participant of the session.
Audience = Faction | None


@dataclass(frozen=True)
class Target:
    """An operator-designated aim point backed by an external map marker."""

    handle: Hashable
    label: str
    position: np.ndarray  # [x, y, z] world frame

    def to_dict(self) -> dict[str, Any]:
        return {
            "handle": self.handle,
            "label": self.label,
            "position": self.position.tolist(),
        }


@dataclass(frozen=True)
class LaunchEvent:
    """A weapon leaving any unit in the session, as reported by the host."""

    unit_name: str | None
    weapon: Hashable
    faction: Faction | None = None
    timestamp: float = 0.0
    extra: dict[str, Any] = field(default_factory=dict)


def parse_faction(value: Any) -> Faction:
    """Coerce a config string (``"blue"``, ``"RED"``) or Faction to a Faction.

    Raises:
        ValueError: If the value names no known faction.
    """
    if isinstance(value, Faction):
        return value
    try:
        return Faction(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown faction: {value!r}") from None
