# gridmaze/core/generator.py
#!/usr/bin/env python3
"""
Randomized depth-first (recursive backtracker) maze carving.

Walls here are whole cells, so the spanning tree is built over the lattice of
cells sharing the root's column/row parity: two lattice nodes two cells apart
are joined by opening the cell between them. Every lattice node ends up open
and connected to the root, with no cycles.

A target that sits off the lattice is joined to the tree by opening one of
its neighbours. A final BFS confirms the target is reachable.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from typing import List, Optional, Set

from gridmaze.config import DEFAULT_WEIGHT, MIN_MAZE_HEIGHT, MIN_MAZE_WIDTH
from gridmaze.core.errors import GenerationFailed, GridTooSmall, InvalidConfiguration
from gridmaze.core.grid import Grid
from gridmaze.core.types import Position, Role

logger = logging.getLogger(__name__)

# (dx, dy) between lattice nodes
LATTICE_STEPS = [(2, 0), (-2, 0), (0, 2), (0, -2)]


@dataclass
class MazeGenerator:
    seed: Optional[int] = None
    carved: int = 0
    opened: List[Position] = field(default_factory=list)

    # -------------------- validation --------------------

    @staticmethod
    def check(grid: Grid) -> None:
        """Raise before any mutation if the grid cannot hold a maze."""
        if grid.width < MIN_MAZE_WIDTH or grid.height < MIN_MAZE_HEIGHT:
            raise GridTooSmall(
                f"Maze needs at least {MIN_MAZE_WIDTH}x{MIN_MAZE_HEIGHT} cells, "
                f"got {grid.width}x{grid.height}")
        if grid.root_position == grid.target_position:
            raise InvalidConfiguration(f"Root and target share cell {grid.root_position}")

    # -------------------- carving --------------------

    def carve(self, grid: Grid) -> List[Position]:
        """Turn ``grid`` into a maze; returns the positions opened, in carve order."""
        self.check(grid)

        # Local RNG so seeding does not affect global random state
        rng = random.Random(self.seed)
        self.carved = 0
        self.opened = []

        for cell in grid:
            if cell.role not in (Role.ROOT, Role.TARGET):
                cell.role = Role.WALL
                cell.weight = DEFAULT_WEIGHT

        start = grid.root_position
        seen: Set[Position] = {start}
        stack: List[Position] = [start]

        while stack:
            x, y = stack[-1]
            candidates = [
                (x + dx, y + dy, x + dx // 2, y + dy // 2)
                for dx, dy in LATTICE_STEPS
                if grid.in_bounds((x + dx, y + dy)) and (x + dx, y + dy) not in seen
            ]
            if not candidates:
                stack.pop()
                continue

            nx, ny, px, py = rng.choice(candidates)
            self._open(grid, (px, py))
            self._open(grid, (nx, ny))
            seen.add((nx, ny))
            stack.append((nx, ny))
            self.carved += 1

        if not self.reaches(grid):
            self._join_target(grid, rng)

        if not self.reaches(grid):
            raise GenerationFailed(
                f"Target {grid.target_position} unreachable from root {grid.root_position}")

        logger.debug("carved %d passages on %dx%d grid (seed=%s)",
                     self.carved, grid.width, grid.height, self.seed)
        return self.opened

    def _open(self, grid: Grid, pos: Position) -> None:
        cell = grid[pos]
        if cell.role is Role.WALL:
            cell.role = Role.OPEN
            self.opened.append(pos)

    def _join_target(self, grid: Grid, rng: random.Random) -> None:
        # Off-lattice target: open one neighbour that already touches the tree.
        target = grid.target
        links = [
            n for n in grid.neighbors_of(target)
            if any(m.passable for m in grid.neighbors_of(n) if m is not target)
        ]
        if links:
            self._open(grid, rng.choice(links).position)

    # -------------------- connectivity --------------------

    @staticmethod
    def reaches(grid: Grid) -> bool:
        """BFS over passable cells from root; True if the target is found."""
        goal = grid.target
        frontier = deque([grid.root])
        seen = {grid.root_position}
        while frontier:
            cell = frontier.popleft()
            if cell is goal:
                return True
            for n in grid.passable_neighbors(cell):
                if n.position not in seen:
                    seen.add(n.position)
                    frontier.append(n)
        return False
