"""World plane and the world <-> grid coordinate transform."""

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional

DEFAULT_HALF_WIDTH = 180.0
DEFAULT_HALF_HEIGHT = 90.0


class WorldPosition(NamedTuple):
    """Signed world coordinates, origin at the centre of the plane."""
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "WorldPosition":
        return WorldPosition(self.x + dx, self.y + dy)


class GridIndex(NamedTuple):
    """Unsigned grid coordinates, origin at the lower-left corner."""
    gx: int
    gy: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Plane:
    """
    Bounded 2D plane of half-extents (W, H).

    World space covers [-W, W] x [-H, H]; grid space covers
    [0, 2W) x [0, 2H). Coordinate convention: (x, y) for API,
    [gy, gx] for array indexing.
    """
    half_width: float = DEFAULT_HALF_WIDTH
    half_height: float = DEFAULT_HALF_HEIGHT

    def __post_init__(self):
        for name in ('half_width', 'half_height'):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0 or value != int(value):
                raise ValueError(f"{name} must be a positive whole number, got {value}")

    @property
    def width(self) -> int:
        """Number of grid columns."""
        return int(2 * self.half_width)

    @property
    def height(self) -> int:
        """Number of grid rows."""
        return int(2 * self.half_height)

    def contains(self, position: WorldPosition) -> bool:
        """Check if a world position lies on the closed plane."""
        return (-self.half_width <= position.x <= self.half_width and
                -self.half_height <= position.y <= self.half_height)

    def in_grid(self, index: GridIndex) -> bool:
        return 0 <= index.gx < self.width and 0 <= index.gy < self.height

    def to_grid(self, position: WorldPosition) -> Optional[GridIndex]:
        """
        Translate a world position into its grid slot.

        Returns None when the slot falls outside the grid.
        """
        index = GridIndex(
            _round_half_up(position.x + self.half_width),
            _round_half_up(position.y + self.half_height)
        )
        if not self.in_grid(index):
            return None
        return index

    def to_world(self, index: GridIndex) -> WorldPosition:
        """Centre of a grid slot in world space."""
        return WorldPosition(index.gx - self.half_width,
                             index.gy - self.half_height)
