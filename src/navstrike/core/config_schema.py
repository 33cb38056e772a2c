"""Pydantic schema for NAVSTRIKE configuration validation.

Mirrors the YAML structure in config/default.yaml. Used when
``validate=True`` is passed to ``NavStrikeConfig.load()``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# System / time
# ---------------------------------------------------------------------------


class SystemConfig(BaseModel):
    name: str = "NAVSTRIKE"
    version: str = "0.1.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    validate_config: bool = False
    log_file: str | None = None
    log_json: bool = False


class TimeConfig(BaseModel):
    mode: Literal["realtime", "simulated"] = "simulated"
    start_epoch: float = 1_000_000.0


# ---------------------------------------------------------------------------
# Strike engine
# ---------------------------------------------------------------------------


class StrikeSchema(BaseModel):
    max_missiles_per_ship: int = Field(default=22, ge=0)
    max_simultaneous_launches: int = Field(default=10, gt=0)
    marker_prefix: str = Field(default="NSGT", min_length=1)
    tti_update_interval_s: float = Field(default=10.0, gt=0)
    fire_radius_m: float = Field(default=100.0, ge=0)
    expend_qty: int = Field(default=1, gt=0)
    message_duration_s: float = Field(default=10.0, gt=0)
    broadcast_notifications: bool = False
    weapon_types: dict[Literal["blue", "red"], list[str]] = Field(
        default_factory=lambda: {"blue": ["BGM_109"], "red": ["3M-54"]}
    )


# ---------------------------------------------------------------------------
# Scenario (simulated host)
# ---------------------------------------------------------------------------


class ScenarioUnit(BaseModel):
    name: str
    faction: Literal["blue", "red"]
    position: list[float] = Field(min_length=3, max_length=3)
    weapons: list[str] = Field(default_factory=list)
    alive: bool = True


class ScenarioMarker(BaseModel):
    label: str
    position: list[float] = Field(min_length=3, max_length=3)


class ScenarioOrder(BaseModel):
    at_s: float = Field(default=0.0, ge=0)
    faction: Literal["blue", "red"]
    ship: str
    command: Literal["fire", "status"] = "fire"


class ScenarioConfig(BaseModel):
    duration_s: float = Field(default=600.0, gt=0)
    step_s: float = Field(default=1.0, gt=0)
    munition_speed_mps: float = Field(default=250.0, gt=0)
    launch_delay_s: float = Field(default=2.0, ge=0)
    units: list[ScenarioUnit] = Field(default_factory=list)
    markers: list[ScenarioMarker] = Field(default_factory=list)
    orders: list[ScenarioOrder] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


class NavStrikeRootConfig(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    time: TimeConfig = Field(default_factory=TimeConfig)
    strike: StrikeSchema = Field(default_factory=StrikeSchema)
    scenario: ScenarioConfig = Field(default_factory=ScenarioConfig)

    model_config = {"extra": "allow"}


class NavStrikeConfigSchema(BaseModel):
    """Top-level wrapper matching YAML root key ``navstrike:``."""

    navstrike: NavStrikeRootConfig

    model_config = {"extra": "allow"}


def validate_config(cfg_dict: dict) -> NavStrikeConfigSchema:
    """Validate a raw config dict (e.g. from OmegaConf) against the schema.

    Raises ``pydantic.ValidationError`` on invalid config.
    """
    return NavStrikeConfigSchema.model_validate(cfg_dict)
