"""Occupancy grid (vector map) for the Living Cells simulation."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Union
import numpy as np

from .plane import GridIndex, Plane, WorldPosition

if TYPE_CHECKING:
    from .cell import LivingCell

EMPTY_SLOT = -1


class GridIndexError(IndexError):
    """A grid index escaped the allocated storage."""


@dataclass(frozen=True)
class Cell:
    """One grid slot. An empty slot has no agent id and no position."""
    agent_id: Optional[int] = None
    position: Optional[WorldPosition] = None

    @property
    def is_empty(self) -> bool:
        return self.agent_id is None


EMPTY = Cell()


class OccupancyGrid:
    """
    Read-only snapshot of who is where, rebuilt once per tick.

    Two layers share the [gy, gx] layout:
    - occupancy: agent id per slot, EMPTY_SLOT when free
    - positions: the occupant's exact world position
    Both arrays are flagged read-only once built.
    """

    def __init__(self, plane: Plane):
        self.plane = plane
        self.width = plane.width
        self.height = plane.height

        self.occupancy = np.full((self.height, self.width), EMPTY_SLOT, dtype=np.int32)
        self.positions = np.zeros((self.height, self.width, 2), dtype=np.float64)

    @classmethod
    def build(cls, cells: Iterable["LivingCell"], plane: Plane) -> "OccupancyGrid":
        """
        Snapshot the positions of all cells, dead ones included.

        Later cells overwrite earlier ones sharing a slot. A cell whose
        position has no slot on the grid is left out.
        """
        grid = cls(plane)
        for cell in cells:
            index = plane.to_grid(cell.position)
            if index is None:
                continue
            gy, gx = grid._checked(index)
            grid.occupancy[gy, gx] = cell.id
            grid.positions[gy, gx] = cell.position

        grid.occupancy.flags.writeable = False
        grid.positions.flags.writeable = False
        return grid

    def _checked(self, index: GridIndex):
        """Array coordinates for an index, failing fast outside storage."""
        flat = index.gy * self.width + index.gx
        if not (0 <= index.gx < self.width and 0 <= flat < self.occupancy.size):
            raise GridIndexError(f"Grid index {tuple(index)} outside "
                                 f"{self.width}x{self.height} storage")
        return index.gy, index.gx

    def lookup(self, key: Union[GridIndex, WorldPosition]) -> Optional[Cell]:
        """
        Return the slot at a grid index or world position.

        Returns None when the coordinate falls outside the grid.
        """
        if isinstance(key, GridIndex):
            index = key if self.plane.in_grid(key) else None
        else:
            index = self.plane.to_grid(WorldPosition(*key))
        if index is None:
            return None

        gy, gx = self._checked(index)
        agent_id = int(self.occupancy[gy, gx])
        if agent_id == EMPTY_SLOT:
            return EMPTY
        x, y = self.positions[gy, gx]
        return Cell(agent_id=agent_id, position=WorldPosition(float(x), float(y)))

    def occupied_mask(self) -> np.ndarray:
        """Boolean [gy, gx] mask, True where a slot holds a cell."""
        return self.occupancy != EMPTY_SLOT

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.occupied_mask()))

    def occupants(self) -> List[int]:
        """Ids of all recorded occupants, in row-major slot order."""
        return [int(i) for i in self.occupancy[self.occupied_mask()]]
