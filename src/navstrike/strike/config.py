"""Strike engine configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from navstrike.core.types import Faction, parse_faction

logger = logging.getLogger(__name__)


def _default_weapon_types() -> dict[Faction, tuple[str, ...]]:
    return {Faction.BLUE: ("BGM_109",), Faction.RED: ("3M-54",)}


@dataclass
class StrikeConfig:
    """Strike engine configuration, fixed for the lifetime of a session."""

    max_missiles_per_ship: int = 22
    max_simultaneous_launches: int = 10
    marker_prefix: str = "NSGT"
    tti_update_interval_s: float = 10.0

    # Fire task parameters
    fire_radius_m: float = 100.0
    expend_qty: int = 1

    # Notifications
    message_duration_s: float = 10.0
    broadcast_notifications: bool = False

    # Recognised weapon-type tags per faction (exact or prefix match)
    weapon_types: dict[Faction, tuple[str, ...]] = field(
        default_factory=_default_weapon_types,
    )

    def __post_init__(self) -> None:
        if self.max_missiles_per_ship < 0:
            raise ValueError(
                f"max_missiles_per_ship must be >= 0, got {self.max_missiles_per_ship}"
            )
        if self.max_simultaneous_launches <= 0:
            raise ValueError(
                f"max_simultaneous_launches must be > 0, got {self.max_simultaneous_launches}"
            )
        if self.tti_update_interval_s <= 0:
            raise ValueError(
                f"tti_update_interval_s must be > 0, got {self.tti_update_interval_s}"
            )
        if not self.marker_prefix:
            raise ValueError("marker_prefix must not be empty")

    def weapon_types_for(self, faction: Faction) -> tuple[str, ...]:
        return self.weapon_types.get(faction, ())

    @classmethod
    def from_omegaconf(cls, cfg: Any) -> StrikeConfig:
        """Build from OmegaConf dict or plain dict."""
        if cfg is None:
            return cls()

        # Handle OmegaConf containers
        try:
            from omegaconf import OmegaConf

            if hasattr(cfg, "_metadata"):
                cfg = OmegaConf.to_container(cfg, resolve=True)
        except ImportError:
            pass

        if not isinstance(cfg, dict):
            cfg = dict(cfg)

        raw_types = cfg.get("weapon_types")
        if raw_types is None:
            weapon_types = _default_weapon_types()
        else:
            weapon_types = {
                parse_faction(name): tuple(str(t) for t in (tags or []))
                for name, tags in raw_types.items()
            }

        return cls(
            max_missiles_per_ship=int(cfg.get("max_missiles_per_ship", 22)),
            max_simultaneous_launches=int(cfg.get("max_simultaneous_launches", 10)),
            marker_prefix=str(cfg.get("marker_prefix", "NSGT")),
            tti_update_interval_s=float(cfg.get("tti_update_interval_s", 10.0)),
            fire_radius_m=float(cfg.get("fire_radius_m", 100.0)),
            expend_qty=int(cfg.get("expend_qty", 1)),
            message_duration_s=float(cfg.get("message_duration_s", 10.0)),
            broadcast_notifications=bool(cfg.get("broadcast_notifications", False)),
            weapon_types=weapon_types,
        )
