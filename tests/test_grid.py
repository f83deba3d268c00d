# tests/test_grid.py
import os
import sys

import pytest

# Ensure project root (where gridmaze/ lives) is on sys.path
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from gridmaze.config import DEFAULT_WEIGHT
from gridmaze.core.errors import (
    GridTooSmall,
    InvalidConfiguration,
    InvalidRoleTransition,
    InvalidWeight,
    OutOfBounds,
)
from gridmaze.core.grid import Grid
from gridmaze.core.types import Role, TileState


def test_grid_has_correct_dimensions_and_default_endpoints():
    grid = Grid(5, 4)

    assert (grid.width, grid.height) == (5, 4)
    assert len(grid) == 20
    assert len(list(grid)) == 20
    assert grid.root_position == (0, 0)
    assert grid.target_position == (4, 3)
    assert grid.cell_at(0, 0).role is Role.ROOT
    assert grid.cell_at(4, 3).role is Role.TARGET


def test_cells_iterate_row_major():
    grid = Grid(3, 2)
    assert [c.position for c in grid] == [(0, 0), (1, 0), (2, 0), (0, 1), (1, 1), (2, 1)]


@pytest.mark.parametrize("pos", [(-1, 0), (0, -1), (5, 0), (0, 4)])
def test_cell_at_rejects_out_of_bounds(pos):
    grid = Grid(5, 4)
    with pytest.raises(OutOfBounds):
        grid.cell_at(*pos)
    # still an IndexError for callers that only know builtins
    with pytest.raises(IndexError):
        grid[pos]


def test_construction_errors():
    with pytest.raises(GridTooSmall):
        Grid(0, 3)
    with pytest.raises(GridTooSmall):
        Grid(1, 1)
    with pytest.raises(InvalidConfiguration):
        Grid(4, 4, root=(2, 2), target=(2, 2))
    with pytest.raises(OutOfBounds):
        Grid(4, 4, target=(4, 0))


def test_neighbors_are_orthogonal_and_in_bounds():
    grid = Grid(3, 3)

    corner = grid.neighbors_of(grid.cell_at(0, 0))
    edge = grid.neighbors_of(grid.cell_at(1, 0))
    middle = grid.neighbors_of(grid.cell_at(1, 1))

    assert {c.position for c in corner} == {(1, 0), (0, 1)}
    assert {c.position for c in edge} == {(0, 0), (2, 0), (1, 1)}
    assert {c.position for c in middle} == {(0, 1), (2, 1), (1, 0), (1, 2)}


def test_passable_neighbors_skip_walls():
    grid = Grid(3, 3)
    grid.set_role(grid.cell_at(1, 0), Role.WALL)
    assert [c.position for c in grid.passable_neighbors(grid.cell_at(0, 0))] == [(0, 1)]


@pytest.mark.parametrize("pos", [(0, 0), (3, 3)])
def test_endpoints_reject_wall(pos):
    grid = Grid(4, 4)
    cell = grid[pos]
    before = cell.role

    with pytest.raises(InvalidRoleTransition):
        grid.set_role(cell, Role.WALL)
    with pytest.raises(InvalidRoleTransition):
        grid.set_role(cell, Role.OPEN)
    assert cell.role is before


def test_moving_root_demotes_previous_holder():
    grid = Grid(4, 4)
    grid.set_role(grid.cell_at(2, 1), Role.ROOT)

    assert grid.root_position == (2, 1)
    assert grid.cell_at(0, 0).role is Role.OPEN
    assert sum(1 for c in grid if c.role is Role.ROOT) == 1


def test_root_cannot_land_on_target_or_wall():
    grid = Grid(4, 4)
    wall = grid.cell_at(1, 1)
    grid.set_role(wall, Role.WALL)
    before = grid.snapshot()

    with pytest.raises(InvalidRoleTransition):
        grid.set_role(grid.target, Role.ROOT)
    with pytest.raises(InvalidRoleTransition):
        grid.set_role(wall, Role.ROOT)
    with pytest.raises(InvalidRoleTransition):
        grid.set_role(wall, Role.TARGET)

    assert grid.snapshot() == before


@pytest.mark.parametrize("bad", [0, -3, True, 1.5, "2"])
def test_set_weight_rejects_invalid(bad):
    grid = Grid(3, 3)
    cell = grid.cell_at(1, 1)
    with pytest.raises(InvalidWeight):
        grid.set_weight(cell, bad)
    assert cell.weight == DEFAULT_WEIGHT


def test_set_weight_accepts_positive():
    grid = Grid(3, 3)
    grid.set_weight(grid.cell_at(1, 1), 7)
    assert grid.cell_at(1, 1).weight == 7


def test_reset_markers_variants():
    grid = Grid(3, 3)
    for cell in grid:
        cell.visited = cell.on_path = cell.highlighted = True

    grid.reset_solve_markers()
    assert not any(c.visited or c.on_path for c in grid)
    assert all(c.highlighted for c in grid)

    grid.reset_markers()
    assert not any(c.highlighted for c in grid)


def test_clear_reopens_everything_but_keeps_endpoints():
    grid = Grid(4, 3, root=(1, 1), target=(3, 0))
    grid.set_role(grid.cell_at(0, 0), Role.WALL)
    grid.set_weight(grid.cell_at(2, 2), 5)
    grid.cell_at(2, 1).visited = True

    grid.clear()

    assert grid.root_position == (1, 1)
    assert grid.target_position == (3, 0)
    assert all(c.passable for c in grid)
    assert grid.cell_at(2, 2).weight == DEFAULT_WEIGHT
    assert not grid.cell_at(2, 1).visited


def test_restore_rolls_back_roles_and_endpoints():
    grid = Grid(4, 4)
    before = grid.snapshot()

    grid.set_role(grid.cell_at(1, 1), Role.WALL)
    grid.set_role(grid.cell_at(2, 2), Role.ROOT)
    grid.restore(before)

    assert grid.snapshot() == before
    assert grid.root_position == (0, 0)


def test_cell_state_precedence_and_text():
    grid = Grid(3, 1)
    cell = grid.cell_at(1, 0)

    assert cell.state is TileState.EMPTY
    cell.visited = True
    assert cell.state is TileState.VISITED
    cell.on_path = True
    assert cell.state is TileState.PATH
    cell.highlighted = True
    assert cell.state is TileState.HIGHLIGHT

    grid.root.highlighted = True
    assert grid.root.state is TileState.ROOT
    assert str(cell) == "OPEN - (1,0) W:1"
