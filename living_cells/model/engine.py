"""Simulation engine for Living Cells."""

import numpy as np
from typing import List, Dict, Iterable, Optional, Tuple, TYPE_CHECKING
from collections import Counter
from scipy.ndimage import convolve

from .cell import LivingCell, TickOutcome
from .direction import DirectionSource, UniformDirectionSource
from .grid import OccupancyGrid
from .plane import Plane, WorldPosition
from .state import SimulationState, CellSnapshot

if TYPE_CHECKING:
    from ..config import SimulationConfig

# 3x3 neighbourhood, centre excluded
NEIGHBOUR_KERNEL = np.array([
    [1, 1, 1],
    [1, 0, 1],
    [1, 1, 1]
], dtype=np.int32)


def step_cells(cells: List[LivingCell], plane: Plane,
               directions: DirectionSource) -> Tuple[OccupancyGrid, Counter]:
    """
    Advance every cell by one tick.

    One snapshot is built from all cells before any of them moves, and
    every cell is ticked against that same snapshot in list order. Two
    cells may therefore step into the same free slot during one tick.

    Returns the snapshot and a count of tick outcomes.
    """
    grid = OccupancyGrid.build(cells, plane)
    outcomes: Counter = Counter()
    for cell in cells:
        outcomes[cell.tick(grid, directions)] += 1
    return grid, outcomes


def positions(cells: Iterable[LivingCell]) -> List[WorldPosition]:
    """Current world position of each cell, in id order."""
    return [cell.position for cell in cells]


def kill_all(cells: Iterable[LivingCell]) -> None:
    for cell in cells:
        cell.kill()


def spawn_cells(count: int, plane: Plane,
                rng: np.random.Generator) -> List[LivingCell]:
    """Create cells at uniformly random whole-number positions."""
    xs = rng.integers(0, plane.width, size=count)
    ys = rng.integers(0, plane.height, size=count)
    return [
        LivingCell(i, WorldPosition(float(x) - plane.half_width,
                                    float(y) - plane.half_height))
        for i, (x, y) in enumerate(zip(xs, ys))
    ]


class SimulationEngine:
    """
    Orchestrates the discrete-time simulation loop.

    Implements:
    1. Plane setup and cell spawning
    2. Snapshot-then-tick stepping
    3. State snapshot generation with per-step metrics
    """

    def __init__(self, config: "SimulationConfig",
                 directions: Optional[DirectionSource] = None,
                 cells: Optional[List[LivingCell]] = None):
        self.config = config
        self.current_step = 0
        self.rng = np.random.default_rng(config.seed)
        self.plane = config.plane.to_plane()

        if directions is None:
            directions = UniformDirectionSource(self.rng)
        self.directions = directions

        if cells is None:
            cells = spawn_cells(config.cell_count, self.plane, self.rng)
        self.cells: List[LivingCell] = cells

        # Metrics tracking
        self.total_moves = 0
        self.total_blocked = 0

    @property
    def alive_cells(self) -> List[LivingCell]:
        return [c for c in self.cells if c.alive]

    def step(self) -> SimulationState:
        """
        Execute one discrete time step.

        1. Snapshot occupancy from all cells (dead ones still block)
        2. Tick every cell against that snapshot
        3. Return current state snapshot
        """
        self.current_step += 1
        grid, outcomes = step_cells(self.cells, self.plane, self.directions)

        self.total_moves += outcomes[TickOutcome.MOVED]
        self.total_blocked += outcomes[TickOutcome.BLOCKED]

        return self._create_state_snapshot(grid, outcomes)

    def positions(self) -> List[WorldPosition]:
        return positions(self.cells)

    def kill_all(self) -> None:
        """Exit path: freeze every cell before teardown."""
        kill_all(self.cells)

    def _count_overlaps(self) -> int:
        """Cells sharing a grid slot with at least one other cell."""
        slots = Counter(self.plane.to_grid(c.position) for c in self.cells)
        slots.pop(None, None)
        return sum(n for n in slots.values() if n > 1)

    def _count_crowded(self) -> int:
        """Alive cells with at least one occupied neighbouring slot."""
        mask = OccupancyGrid.build(self.cells, self.plane).occupied_mask()
        neighbours = convolve(mask.astype(np.int32), NEIGHBOUR_KERNEL,
                              mode='constant', cval=0)
        crowded = 0
        for cell in self.alive_cells:
            index = self.plane.to_grid(cell.position)
            if index is not None and neighbours[index.gy, index.gx] > 0:
                crowded += 1
        return crowded

    def _create_state_snapshot(self, grid: OccupancyGrid,
                               outcomes: Counter) -> SimulationState:
        """Create immutable snapshot of current simulation state."""
        cell_snapshots = [
            CellSnapshot(
                cell_id=c.id,
                x=c.position.x,
                y=c.position.y,
                state=c.state.value,
                action=c.pending_action.label()
            )
            for c in self.cells
        ]

        alive_count = len(self.alive_cells)
        total_slots = self.plane.width * self.plane.height

        metrics = {
            'alive_cells': alive_count,
            'total_cells': len(self.cells),
            'moved': outcomes[TickOutcome.MOVED],
            'blocked': outcomes[TickOutcome.BLOCKED],
            'cancelled': outcomes[TickOutcome.CANCELLED],
            'overlaps': self._count_overlaps(),
            'crowded': self._count_crowded(),
            'density': len(self.cells) / total_slots if total_slots > 0 else 0,
        }

        return SimulationState(
            step=self.current_step,
            cells=cell_snapshots,
            grid_occupancy=grid.occupancy.copy(),
            metrics=metrics
        )

    def is_finished(self) -> bool:
        """Check if simulation should terminate."""
        return (self.current_step >= self.config.max_steps or
                len(self.alive_cells) == 0)

    def get_summary(self) -> Dict:
        """Get summary statistics for the simulation."""
        return {
            'total_steps': self.current_step,
            'cells_alive': len(self.alive_cells),
            'cells_total': len(self.cells),
            'total_moves': self.total_moves,
            'total_blocked': self.total_blocked,
        }
