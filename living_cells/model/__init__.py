"""Model package for Living Cells simulation."""

from .plane import Plane, WorldPosition, GridIndex
from .grid import OccupancyGrid, Cell, EMPTY, GridIndexError
from .direction import Direction, Action, ActionKind, IDLE, UniformDirectionSource
from .cell import LivingCell, CellState, TickOutcome
from .state import CellSnapshot, SimulationState
from .engine import SimulationEngine, step_cells, positions, kill_all

__all__ = [
    'Plane',
    'WorldPosition',
    'GridIndex',
    'OccupancyGrid',
    'Cell',
    'EMPTY',
    'GridIndexError',
    'Direction',
    'Action',
    'ActionKind',
    'IDLE',
    'UniformDirectionSource',
    'LivingCell',
    'CellState',
    'TickOutcome',
    'CellSnapshot',
    'SimulationState',
    'SimulationEngine',
    'step_cells',
    'positions',
    'kill_all',
]
