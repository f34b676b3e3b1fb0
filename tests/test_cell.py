from __future__ import annotations

from living_cells.model.cell import CellState, LivingCell, TickOutcome
from living_cells.model.direction import IDLE, Action, ActionKind, Direction
from living_cells.model.grid import OccupancyGrid
from living_cells.model.plane import WorldPosition


def _cell(cell_id, x, y, action=IDLE):
    return LivingCell(cell_id, WorldPosition(float(x), float(y)), action)


def test_new_cell_is_alive_and_idle():
    cell = _cell(0, 1, 2)

    assert cell.alive
    assert cell.state is CellState.ALIVE
    assert cell.pending_action == IDLE


def test_idle_draws_a_direction_and_looks(small_plane, scripted):
    cell = _cell(0, 0, 0)
    source = scripted([Direction.LEFT])
    grid = OccupancyGrid.build([cell], small_plane)

    assert cell.tick(grid, source) is TickOutcome.CHOSE
    assert cell.pending_action == Action.look(Direction.LEFT)
    assert cell.position == WorldPosition(0.0, 0.0)
    assert source.drawn == 1


def test_look_at_free_slot_turns_into_go(small_plane, scripted):
    cell = _cell(0, 0, 0, Action.look(Direction.RIGHT))
    grid = OccupancyGrid.build([cell], small_plane)

    assert cell.tick(grid, scripted()) is TickOutcome.CLEARED
    assert cell.pending_action == Action.go(Direction.RIGHT)
    assert cell.position == WorldPosition(0.0, 0.0)


def test_look_at_occupied_slot_cancels(small_plane, scripted):
    cell = _cell(0, 0, 0, Action.look(Direction.FORWARD))
    other = _cell(1, 0, 1)
    grid = OccupancyGrid.build([cell, other], small_plane)

    assert cell.tick(grid, scripted()) is TickOutcome.CANCELLED
    assert cell.pending_action == IDLE


def test_look_off_grid_cancels(small_plane, scripted):
    cell = _cell(0, 9, 0, Action.look(Direction.RIGHT))
    grid = OccupancyGrid.build([cell], small_plane)

    assert cell.tick(grid, scripted()) is TickOutcome.CANCELLED
    assert cell.pending_action == IDLE


def test_go_commits_full_displacement(small_plane, scripted):
    cell = _cell(0, 0, 0, Action.go(Direction.LEFT_BACKWARD))
    grid = OccupancyGrid.build([cell], small_plane)

    assert cell.tick(grid, scripted()) is TickOutcome.MOVED
    assert cell.position == WorldPosition(-1.0, -1.0)
    assert cell.pending_action == IDLE


def test_go_into_occupant_is_blocked(small_plane, scripted):
    cell = _cell(0, 0, 0, Action.go(Direction.RIGHT))
    other = _cell(1, 1, 0)
    grid = OccupancyGrid.build([cell, other], small_plane)

    assert cell.tick(grid, scripted()) is TickOutcome.BLOCKED
    assert cell.position == WorldPosition(0.0, 0.0)
    assert cell.pending_action == IDLE


def test_go_across_edge_is_blocked(small_plane, scripted):
    cell = _cell(0, 10, 0, Action.go(Direction.RIGHT))
    grid = OccupancyGrid.build([cell], small_plane)

    assert cell.tick(grid, scripted()) is TickOutcome.BLOCKED
    assert cell.position == WorldPosition(10.0, 0.0)


def test_diagonal_crossing_one_edge_moves_neither_axis(small_plane, scripted):
    # x would stay on the plane, y would leave it
    cell = _cell(0, 0, 5, Action.go(Direction.RIGHT_FORWARD))
    grid = OccupancyGrid.build([cell], small_plane)

    assert cell.tick(grid, scripted()) is TickOutcome.BLOCKED
    assert cell.position == WorldPosition(0.0, 5.0)


def test_idle_direction_runs_the_cycle_in_place(small_plane, scripted):
    cell = _cell(0, 2, 2)
    source = scripted([Direction.IDLE])
    outcomes = []
    for _ in range(3):
        grid = OccupancyGrid.build([cell], small_plane)
        outcomes.append(cell.tick(grid, source))

    assert outcomes == [TickOutcome.CHOSE, TickOutcome.CLEARED, TickOutcome.STAYED]
    assert cell.position == WorldPosition(2.0, 2.0)
    assert cell.pending_action.kind is ActionKind.IDLE


def test_kill_is_idempotent_and_keeps_state():
    action = Action.go(Direction.BACKWARD)
    cell = _cell(0, 3, 3, action)

    cell.kill()
    cell.kill()

    assert not cell.alive
    assert cell.state is CellState.DEAD
    assert cell.position == WorldPosition(3.0, 3.0)
    assert cell.pending_action == action


def test_dead_cell_tick_is_a_no_op(small_plane, scripted):
    cell = _cell(0, 0, 0, Action.go(Direction.LEFT))
    cell.kill()
    source = scripted([Direction.RIGHT])
    grid = OccupancyGrid.build([cell], small_plane)

    assert cell.tick(grid, source) is TickOutcome.SKIPPED
    assert cell.position == WorldPosition(0.0, 0.0)
    assert cell.pending_action == Action.go(Direction.LEFT)
    assert source.drawn == 0
