"""Living cell with the two-phase look/go movement protocol."""

from enum import Enum
from typing import Optional

from .direction import IDLE, Action, ActionKind, Direction, DirectionSource
from .grid import Cell, OccupancyGrid
from .plane import WorldPosition


class CellState(Enum):
    """Lifecycle flag for a cell."""
    ALIVE = "alive"
    DEAD = "dead"


class TickOutcome(Enum):
    """What a single tick did to a cell."""
    SKIPPED = "skipped"      # dead, nothing happened
    CHOSE = "chose"          # idle -> look
    CLEARED = "cleared"      # look saw a free slot -> go
    CANCELLED = "cancelled"  # look saw an occupant or the edge -> idle
    MOVED = "moved"          # go committed
    STAYED = "stayed"        # go with the idle direction
    BLOCKED = "blocked"      # go rejected


class LivingCell:
    """
    Autonomous agent wandering the plane.

    Each tick advances exactly one transition:

        Idle -> Look(d) -> Go(d) -> Idle

    Look cancels the move when the destination is taken or off the grid.
    Go re-checks the destination against the same tick's snapshot and
    applies the whole displacement or none of it. A cell only ever
    mutates its own position and pending action.
    """

    def __init__(self, cell_id: int, position: WorldPosition,
                 action: Action = IDLE):
        self.id = cell_id
        self.position = WorldPosition(*position)
        self.state = CellState.ALIVE
        self.pending_action = action

    @property
    def alive(self) -> bool:
        return self.state == CellState.ALIVE

    def kill(self) -> None:
        """Mark the cell dead. Position and pending action are kept."""
        self.state = CellState.DEAD

    def destination(self, direction: Direction) -> WorldPosition:
        dx, dy = direction.vector
        return self.position.offset(dx, dy)

    def _is_free(self, slot: Optional[Cell]) -> bool:
        # Off-grid counts as taken; our own slot counts as free
        if slot is None:
            return False
        return slot.is_empty or slot.agent_id == self.id

    def tick(self, grid: OccupancyGrid, directions: DirectionSource) -> TickOutcome:
        """Advance the state machine once against a read-only snapshot."""
        if not self.alive:
            return TickOutcome.SKIPPED

        action = self.pending_action
        if action.kind == ActionKind.IDLE:
            self.pending_action = Action.look(directions.next_direction())
            return TickOutcome.CHOSE

        target = self.destination(action.direction)

        if action.kind == ActionKind.LOOK:
            if self._is_free(grid.lookup(target)):
                self.pending_action = Action.go(action.direction)
                return TickOutcome.CLEARED
            self.pending_action = IDLE
            return TickOutcome.CANCELLED

        # Go: commit only inside the plane and onto a free slot
        self.pending_action = IDLE
        if action.direction == Direction.IDLE:
            return TickOutcome.STAYED
        if grid.plane.contains(target) and self._is_free(grid.lookup(target)):
            self.position = target
            return TickOutcome.MOVED
        return TickOutcome.BLOCKED

    def __repr__(self) -> str:
        return (f"LivingCell(id={self.id}, pos=({self.position.x}, {self.position.y}), "
                f"state={self.state.value}, action={self.pending_action.label()})")
