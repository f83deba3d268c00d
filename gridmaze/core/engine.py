# gridmaze/core/engine.py
#!/usr/bin/env python3
"""
MazeEngine: the single entry point over one Grid.

Every command validates first, mutates, drops stale solve markers, then
notifies observers once with the cells whose snapshot changed. A command
that raises leaves the grid exactly as it was.
"""

import logging
import random
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple

from gridmaze.core.dijkstra import DijkstraAlgo
from gridmaze.core.errors import InvalidRoleTransition, MazeError
from gridmaze.core.generator import MazeGenerator
from gridmaze.core.grid import Cell, Grid, check_weight
from gridmaze.core.types import CellSnapshot, Position, Role, SolveResult, StepResult

logger = logging.getLogger(__name__)


class CellObserver(Protocol):
    def __call__(self, changed: List[CellSnapshot]) -> None: ...


class MazeEngine:
    def __init__(self, width: int, height: int,
                 root: Optional[Position] = None, target: Optional[Position] = None):
        self._grid = Grid(width, height, root, target)
        self._observers: List[CellObserver] = []
        self.seed: Optional[int] = None
        self.last_result: Optional[SolveResult] = None
        self._edits = 0     # bumped by anything that stales an in-flight solve

    # -------------------- observers --------------------

    def subscribe(self, observer: CellObserver) -> CellObserver:
        """Register ``observer``; returned unchanged so this works as a decorator."""
        if observer not in self._observers:
            self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: CellObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _commit(self, before: Sequence[CellSnapshot]) -> List[CellSnapshot]:
        after = self._grid.snapshot()
        changed = [new for old, new in zip(before, after) if old != new]
        if changed:
            for observer in list(self._observers):
                observer(changed)
        return changed

    # -------------------- queries --------------------

    def dimensions(self) -> Tuple[int, int]:
        return self._grid.width, self._grid.height

    def cell_at(self, position: Position) -> CellSnapshot:
        return self._cell(position).snapshot()

    def cells(self) -> List[CellSnapshot]:
        return self._grid.snapshot()

    def root_position(self) -> Position:
        return self._grid.root_position

    def target_position(self) -> Position:
        return self._grid.target_position

    def _cell(self, position: Position) -> Cell:
        col, row = position
        return self._grid.cell_at(col, row)

    # -------------------- commands --------------------

    def generate(self, seed: Optional[int] = None) -> int:
        """Carve a fresh maze; returns the seed used."""
        MazeGenerator.check(self._grid)
        if seed is None:
            seed = random.randint(0, 2**32 - 1)

        before = self._grid.snapshot()
        self._grid.reset_markers()
        try:
            MazeGenerator(seed=seed).carve(self._grid)
        except MazeError:
            self._grid.restore(before)
            raise

        self.seed = seed
        self._stale()
        changed = self._commit(before)
        logger.debug("generated maze seed=%d (%d cells changed)", seed, len(changed))
        return seed

    def toggle_wall(self, position: Position) -> CellSnapshot:
        cell = self._cell(position)
        self._reject_endpoint(cell)
        return self._apply_wall(cell, cell.role is not Role.WALL)

    def set_wall(self, position: Position, wall: bool = True) -> CellSnapshot:
        cell = self._cell(position)
        self._reject_endpoint(cell)
        return self._apply_wall(cell, wall)

    def _reject_endpoint(self, cell: Cell) -> None:
        if cell.role in (Role.ROOT, Role.TARGET):
            logger.debug("rejected wall edit on %s", cell)
            raise InvalidRoleTransition(
                f"Cannot toggle wall on the {cell.role.name} cell {cell.position}")

    def _apply_wall(self, cell: Cell, wall: bool) -> CellSnapshot:
        before = self._grid.snapshot()
        self._grid.set_role(cell, Role.WALL if wall else Role.OPEN)
        self._invalidate()
        self._commit(before)
        return cell.snapshot()

    def move_root(self, position: Position) -> None:
        self._move(position, Role.ROOT)

    def move_target(self, position: Position) -> None:
        self._move(position, Role.TARGET)

    def _move(self, position: Position, role: Role) -> None:
        cell = self._cell(position)
        before = self._grid.snapshot()
        self._grid.set_role(cell, role)
        self._invalidate()
        self._commit(before)

    def set_weight(self, position: Position, weight: int) -> CellSnapshot:
        cell = self._cell(position)
        check_weight(weight)
        before = self._grid.snapshot()
        self._grid.set_weight(cell, weight)
        self._invalidate()
        self._commit(before)
        return cell.snapshot()

    def highlight(self, position: Position, on: bool = True) -> None:
        cell = self._cell(position)
        before = self._grid.snapshot()
        cell.highlighted = bool(on)
        self._commit(before)

    def clear(self) -> None:
        before = self._grid.snapshot()
        self._grid.clear()
        self._stale()
        self._commit(before)

    def reset_markers(self) -> None:
        before = self._grid.snapshot()
        self._grid.reset_markers()
        self._stale()
        self._commit(before)

    def _invalidate(self) -> None:
        self._grid.reset_solve_markers()
        self._stale()

    def _stale(self) -> None:
        self.last_result = None
        self._edits += 1

    # -------------------- solving --------------------

    def solve(self) -> SolveResult:
        self._edits += 1
        before = self._grid.snapshot()
        algo = DijkstraAlgo()
        algo.init(self._grid)
        result = algo.run()
        self.last_result = result
        self._commit(before)
        logger.debug("solve %s: %d expanded, cost=%s",
                     result.status, len(result.visited), result.cost)
        return result

    def solve_steps(self) -> Iterator[StepResult]:
        """Yield one StepResult per expansion, notifying after each step.

        Callers may stop iterating at any point; the grid then shows the
        partial search. Any edit, regeneration, marker reset or new solve
        made between steps ends the iteration without a result.
        """
        self.last_result = None
        self._edits += 1
        epoch = self._edits
        before = self._grid.snapshot()
        algo = DijkstraAlgo()
        algo.init(self._grid)
        while True:
            res = algo.step()
            self._commit(before)
            before = self._grid.snapshot()
            if res.status in ("done", "unreachable"):
                self.last_result = algo.result()
            yield res
            if res.status != "running":
                return
            if self._edits != epoch:
                logger.debug("stepped solve abandoned: grid changed after %d expansions",
                             algo.popped_count)
                return
