"""Move directions, pending actions and the random direction source."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence, Tuple
import numpy as np


class Direction(Enum):
    """Eight compass steps plus staying put. Values are (dx, dy)."""
    FORWARD = (0, 1)
    BACKWARD = (0, -1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    LEFT_FORWARD = (-1, 1)
    LEFT_BACKWARD = (-1, -1)
    RIGHT_FORWARD = (1, 1)
    RIGHT_BACKWARD = (1, -1)
    IDLE = (0, 0)

    @property
    def vector(self) -> Tuple[int, int]:
        # Diagonals are not normalized
        return self.value

    @classmethod
    def from_index(cls, value: int) -> "Direction":
        """Map 0-7 to the compass steps; anything else means IDLE."""
        if 0 <= value < len(COMPASS):
            return COMPASS[value]
        return cls.IDLE


COMPASS = (
    Direction.FORWARD,
    Direction.BACKWARD,
    Direction.LEFT,
    Direction.RIGHT,
    Direction.LEFT_FORWARD,
    Direction.LEFT_BACKWARD,
    Direction.RIGHT_FORWARD,
    Direction.RIGHT_BACKWARD,
)


class ActionKind(Enum):
    IDLE = "idle"
    LOOK = "look"
    GO = "go"


@dataclass(frozen=True)
class Action:
    """Pending action of a cell: Idle, Look(direction) or Go(direction)."""
    kind: ActionKind
    direction: Optional[Direction] = None

    @classmethod
    def look(cls, direction: Direction) -> "Action":
        return cls(ActionKind.LOOK, direction)

    @classmethod
    def go(cls, direction: Direction) -> "Action":
        return cls(ActionKind.GO, direction)

    def label(self) -> str:
        """Short text form used in exports, e.g. 'look:forward'."""
        if self.direction is None:
            return self.kind.value
        return f"{self.kind.value}:{self.direction.name.lower()}"


IDLE = Action(ActionKind.IDLE)


class DirectionSource(Protocol):
    """Anything able to hand out the next direction for an idle cell."""

    def next_direction(self) -> Direction:
        ...


class UniformDirectionSource:
    """
    Draws one of the nine directions (IDLE included) from a numpy Generator.

    Each draw is an index in [0, 9) turned into a Direction by
    Direction.from_index, so weights follow the order of COMPASS with the
    IDLE weight last.
    """

    SYMBOL_COUNT = len(COMPASS) + 1

    def __init__(self, rng: np.random.Generator,
                 weights: Optional[Sequence[float]] = None):
        self.rng = rng
        if weights is None:
            self.probabilities = None
        else:
            if len(weights) != self.SYMBOL_COUNT:
                raise ValueError(f"Expected {self.SYMBOL_COUNT} weights, got {len(weights)}")
            probs = np.asarray(weights, dtype=np.float64)
            if np.any(probs < 0) or probs.sum() <= 0:
                raise ValueError("Direction weights must be non-negative and not all zero")
            self.probabilities = probs / probs.sum()

    def next_direction(self) -> Direction:
        idx = self.rng.choice(self.SYMBOL_COUNT, p=self.probabilities)
        return Direction.from_index(int(idx))
