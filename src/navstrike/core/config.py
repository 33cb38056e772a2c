"""Layered YAML configuration using OmegaConf.

Layers, lowest first:

1. the base file (``config/default.yaml``);
2. every ``strike/*.yaml`` next to it, for site-wide engine tuning;
3. at most one named scenario, ``scenarios/<name>.yaml``, whose keys are
   merged under ``navstrike.scenario`` (so scenario files hold units,
   markers and orders without the two-level prefix);
4. dot-path overrides from the command line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from omegaconf import DictConfig, OmegaConf

SECTIONS = ("system", "time", "strike", "scenario")


class NavStrikeConfig:
    def __init__(self, config_path: str | Path = "config/default.yaml"):
        self._config_path = Path(config_path)
        self._config: DictConfig | None = None

    @property
    def config_dir(self) -> Path:
        return self._config_path.parent

    def available_scenarios(self) -> list[str]:
        """Names accepted by ``load(scenario=...)``."""
        scenario_dir = self.config_dir / "scenarios"
        if not scenario_dir.is_dir():
            return []
        return sorted(p.stem for p in scenario_dir.glob("*.yaml"))

    def load(self, validate: bool = False, scenario: str | None = None) -> DictConfig:
        """Load the base config and merge strike overrides and a scenario.

        Args:
            validate: If True, validate the merged config against the
                Pydantic schema and raise ``pydantic.ValidationError``
                on invalid values.
            scenario: Name of a file under ``scenarios/`` to merge into
                ``navstrike.scenario``.

        Raises:
            FileNotFoundError: If the base file or the named scenario is missing.
        """
        if not self._config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self._config_path}")

        base = OmegaConf.load(self._config_path)
        assert isinstance(base, DictConfig)

        strike_dir = self.config_dir / "strike"
        if strike_dir.is_dir():
            for yaml_file in sorted(strike_dir.glob("*.yaml")):
                base = OmegaConf.merge(base, OmegaConf.load(yaml_file))

        if scenario is not None:
            scenario_path = self.config_dir / "scenarios" / f"{scenario}.yaml"
            if not scenario_path.exists():
                raise FileNotFoundError(
                    f"Scenario {scenario!r} not found; available: {self.available_scenarios()}"
                )
            overlay = OmegaConf.create({"navstrike": {"scenario": OmegaConf.load(scenario_path)}})
            base = OmegaConf.merge(base, overlay)

        if validate or OmegaConf.select(base, "navstrike.system.validate_config", default=False):
            from navstrike.core.config_schema import validate_config

            validate_config(OmegaConf.to_container(base, resolve=True))

        self._config = base
        return self._config

    def override(self, dotpath: str, value: Any) -> None:
        """Override a config value using dot notation.

        Example: config.override("navstrike.strike.marker_prefix", "TGT")
        """
        OmegaConf.update(self.cfg, dotpath, value)

    def section(self, name: str) -> dict[str, Any]:
        """One ``navstrike.<name>`` section as a plain dict (empty if absent).

        Raises:
            KeyError: If *name* is not a known section.
        """
        if name not in SECTIONS:
            raise KeyError(f"Unknown config section {name!r}; expected one of {SECTIONS}")
        node = OmegaConf.select(self.cfg, f"navstrike.{name}", default=None)
        if node is None:
            return {}
        return OmegaConf.to_container(node, resolve=True)

    @property
    def cfg(self) -> DictConfig:
        if self._config is None:
            raise RuntimeError("Config not loaded yet. Call load() first.")
        return self._config
