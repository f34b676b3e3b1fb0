"""Configuration dataclasses and YAML loader for Living Cells simulation."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import yaml

from .model.plane import DEFAULT_HALF_HEIGHT, DEFAULT_HALF_WIDTH, Plane


@dataclass
class PlaneConfig:
    half_width: float = DEFAULT_HALF_WIDTH    # W, x in [-W, W]
    half_height: float = DEFAULT_HALF_HEIGHT  # H, y in [-H, H]

    def to_plane(self) -> Plane:
        return Plane(self.half_width, self.half_height)


@dataclass
class SimulationConfig:
    plane: PlaneConfig = field(default_factory=PlaneConfig)
    max_steps: int = 1000
    cell_count: int = 100

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    frame_interval: int = 5
    quiet: bool = False
    seed: Optional[int] = None
    out_dir: Path = field(default_factory=lambda: Path("./output"))

    def validate(self) -> None:
        """Raise ValueError on values the simulation cannot run with."""
        self.plane.to_plane()
        if self.cell_count < 0:
            raise ValueError(f"cell_count must be >= 0, got {self.cell_count}")
        if self.max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {self.max_steps}")
        if self.frame_interval < 1:
            raise ValueError(f"frame_interval must be >= 1, got {self.frame_interval}")
        if self.seed is not None and (
                isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0):
            raise ValueError(f"seed must be a non-negative integer, got {self.seed!r}")


def default_config() -> SimulationConfig:
    """Built-in setup: 100 cells on a 360x180 plane."""
    return SimulationConfig()


def _whole(name: str, value: Any) -> int:
    """Accept whole numbers only; 1.7, .inf, true and "3" are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    if not math.isfinite(value) or value != int(value):
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    return int(value)


def _parse_plane(plane_raw: Dict[str, Any]) -> PlaneConfig:
    """Parse plane extents from raw YAML data."""
    return PlaneConfig(
        half_width=float(_whole('half_width', plane_raw.get('half_width', DEFAULT_HALF_WIDTH))),
        half_height=float(_whole('half_height', plane_raw.get('half_height', DEFAULT_HALF_HEIGHT)))
    )


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Expected a mapping at the top of {config_path}")

    defaults = default_config()

    plane = _parse_plane(raw.get('plane') or {})

    # Parse simulation config
    sim_raw = raw.get('simulation') or {}

    # Parse export config (optional)
    export_raw = raw.get('export') or {}

    config = SimulationConfig(
        plane=plane,
        max_steps=_whole('max_steps', sim_raw.get('max_steps', defaults.max_steps)),
        cell_count=_whole('cell_count', sim_raw.get('cell_count', defaults.cell_count)),
        seed=sim_raw.get('seed', defaults.seed),
        csv_enabled=export_raw.get('csv', defaults.csv_enabled),
        snapshot_enabled=export_raw.get('snapshot', defaults.snapshot_enabled),
        gif_enabled=export_raw.get('gif', defaults.gif_enabled),
        frame_interval=_whole('frame_interval', export_raw.get('frame_interval', defaults.frame_interval))
    )
    config.validate()
    return config
