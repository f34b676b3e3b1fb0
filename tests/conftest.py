from __future__ import annotations

from typing import Iterable

import pytest

from living_cells.config import PlaneConfig, SimulationConfig
from living_cells.model.direction import Direction
from living_cells.model.plane import Plane


class ScriptedDirections:
    """Hands out a fixed sequence of directions, then IDLE forever."""

    def __init__(self, directions: Iterable[Direction] = ()):
        self._queue = list(directions)
        self.drawn = 0

    def next_direction(self) -> Direction:
        self.drawn += 1
        if self._queue:
            return self._queue.pop(0)
        return Direction.IDLE


@pytest.fixture
def plane() -> Plane:
    return Plane()


@pytest.fixture
def small_plane() -> Plane:
    return Plane(half_width=10, half_height=5)


@pytest.fixture
def small_config() -> SimulationConfig:
    return SimulationConfig(
        plane=PlaneConfig(half_width=10, half_height=5),
        max_steps=20,
        cell_count=10,
        seed=11,
        csv_enabled=False,
        snapshot_enabled=False,
        quiet=True,
    )


@pytest.fixture
def scripted():
    """Factory for scripted direction sources."""
    return ScriptedDirections
