# tests/test_maze_generation.py
import os
import sys
from collections import deque

import pytest

# Ensure project root (where gridmaze/ lives) is on sys.path
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from gridmaze.config import DEFAULT_WEIGHT
from gridmaze.core.errors import GridTooSmall
from gridmaze.core.generator import MazeGenerator
from gridmaze.core.grid import Grid
from gridmaze.core.types import Role


def _path_exists(grid: Grid) -> bool:
    """
    Plain BFS over open cells.
    Return True if there is a path from root to target.
    """
    start = grid.root_position
    goal = grid.target_position
    seen = {start}
    queue = deque([start])

    while queue:
        col, row = queue.popleft()
        if (col, row) == goal:
            return True
        for dc, dr in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nxt = (col + dc, row + dr)
            if grid.in_bounds(nxt) and nxt not in seen and grid[nxt].role is not Role.WALL:
                seen.add(nxt)
                queue.append(nxt)

    return False


def _layout(grid: Grid):
    return [[cell.role for cell in row] for row in grid.cells]


@pytest.mark.parametrize("width,height,root,target", [
    (10, 10, None, None),
    (9, 7, None, None),
    (2, 2, None, None),
    (4, 4, (0, 0), (3, 3)),      # target on a pillar cell
    (12, 9, (5, 4), (0, 8)),
    (3, 8, (2, 7), (0, 0)),
])
def test_maze_has_path_from_root_to_target(width, height, root, target):
    for seed in range(8):
        grid = Grid(width, height, root, target)
        MazeGenerator(seed=seed).carve(grid)
        assert _path_exists(grid), f"seed {seed} left target unreachable"
        assert MazeGenerator.reaches(grid)


def test_same_seed_same_layout():
    a = Grid(15, 11)
    b = Grid(15, 11)
    MazeGenerator(seed=1234).carve(a)
    MazeGenerator(seed=1234).carve(b)
    assert _layout(a) == _layout(b)


def test_different_seeds_differ():
    a = Grid(21, 21)
    b = Grid(21, 21)
    MazeGenerator(seed=1).carve(a)
    MazeGenerator(seed=2).carve(b)
    assert _layout(a) != _layout(b)


def test_lattice_maze_is_a_spanning_tree():
    grid = Grid(9, 7)
    gen = MazeGenerator(seed=3)
    gen.carve(grid)

    nodes = 5 * 4
    open_cells = sum(1 for cell in grid if cell.passable)
    # nodes plus exactly one passage per tree edge
    assert open_cells == nodes + (nodes - 1)
    assert gen.carved == nodes - 1


def test_generation_marks_do_not_leak_into_cells():
    grid = Grid(11, 11)
    MazeGenerator(seed=5).carve(grid)
    assert not any(c.visited or c.on_path or c.highlighted for c in grid)


def test_generation_resets_weights_and_keeps_endpoints():
    grid = Grid(7, 7, root=(2, 2), target=(6, 0))
    grid.set_weight(grid.cell_at(3, 3), 8)
    opened = MazeGenerator(seed=9).carve(grid)

    assert grid.root_position == (2, 2)
    assert grid.target_position == (6, 0)
    assert all(c.weight == DEFAULT_WEIGHT for c in grid if c.role in (Role.OPEN, Role.WALL))
    assert all(grid[pos].role is Role.OPEN for pos in opened)


@pytest.mark.parametrize("width,height", [(2, 1), (1, 3), (5, 1)])
def test_too_small_grid_is_rejected_untouched(width, height):
    grid = Grid(width, height)
    grid.set_weight(grid.cell_at(0, 0), 4)
    before = grid.snapshot()

    with pytest.raises(GridTooSmall):
        MazeGenerator(seed=0).carve(grid)
    assert grid.snapshot() == before
