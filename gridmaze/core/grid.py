# gridmaze/core/grid.py
#!/usr/bin/env python3
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from gridmaze.config import DEFAULT_WEIGHT
from gridmaze.core.errors import (
    GridTooSmall,
    InvalidConfiguration,
    InvalidRoleTransition,
    InvalidWeight,
    OutOfBounds,
)
from gridmaze.core.types import CellSnapshot, Position, Role, TileState, classify

logger = logging.getLogger(__name__)


def check_weight(weight) -> int:
    if isinstance(weight, bool) or not isinstance(weight, int) or weight < 1:
        raise InvalidWeight(weight)
    return weight


@dataclass(eq=False)
class Cell:
    """One grid square. ``position`` is fixed; everything else is reclassified."""
    position: Position
    role: Role = Role.OPEN
    weight: int = DEFAULT_WEIGHT
    visited: bool = False
    on_path: bool = False
    highlighted: bool = False

    @property
    def col(self) -> int:
        return self.position[0]

    @property
    def row(self) -> int:
        return self.position[1]

    @property
    def passable(self) -> bool:
        return self.role is not Role.WALL

    @property
    def state(self) -> TileState:
        return classify(self.role, self.visited, self.on_path, self.highlighted)

    def snapshot(self) -> CellSnapshot:
        return CellSnapshot(self.position, self.role, self.weight,
                            self.visited, self.on_path, self.highlighted)

    def __str__(self) -> str:
        col, row = self.position
        return f"{self.role.name} - ({col},{row}) W:{self.weight}"


class Grid:
    """Fixed-size 2-D collection of cells with exactly one root and one target."""

    def __init__(self, width: int, height: int,
                 root: Optional[Position] = None, target: Optional[Position] = None):
        if width < 1 or height < 1 or width * height < 2:
            raise GridTooSmall(f"Grid needs at least two cells, got {width}x{height}")
        self.width = width
        self.height = height
        self.cells: List[List[Cell]] = [           # [row][col]
            [Cell((col, row)) for col in range(width)]
            for row in range(height)
        ]

        root = tuple(root) if root is not None else (0, 0)
        target = tuple(target) if target is not None else (width - 1, height - 1)
        for pos in (root, target):
            if not self.in_bounds(pos):
                raise OutOfBounds(pos, width, height)
        if root == target:
            raise InvalidConfiguration(f"Root and target share cell {root}")

        self._root: Position = root
        self._target: Position = target
        self[root].role = Role.ROOT
        self[target].role = Role.TARGET

    # -------------------- access --------------------

    def in_bounds(self, pos: Sequence[int]) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, col: int, row: int) -> Cell:
        if not self.in_bounds((col, row)):
            raise OutOfBounds((col, row), self.width, self.height)
        return self.cells[row][col]

    def __getitem__(self, pos: Sequence[int]) -> Cell:
        col, row = pos
        return self.cell_at(col, row)

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def __len__(self) -> int:
        return self.width * self.height

    @property
    def root(self) -> Cell:
        return self[self._root]

    @property
    def target(self) -> Cell:
        return self[self._target]

    @property
    def root_position(self) -> Position:
        return self._root

    @property
    def target_position(self) -> Position:
        return self._target

    def neighbors_of(self, cell: Cell) -> List[Cell]:
        """In-bounds orthogonal neighbours; diagonals are never adjacent."""
        x, y = cell.position
        candidates = [(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)]
        return [self.cells[ny][nx] for nx, ny in candidates if self.in_bounds((nx, ny))]

    def passable_neighbors(self, cell: Cell) -> List[Cell]:
        return [n for n in self.neighbors_of(cell) if n.passable]

    # -------------------- mutation --------------------

    def set_role(self, cell: Cell, role: Role) -> None:
        if role in (Role.ROOT, Role.TARGET):
            self._promote(cell, role)
            return
        if cell.role in (Role.ROOT, Role.TARGET):
            raise InvalidRoleTransition(
                f"Cannot set {role.name} on the {cell.role.name} cell {cell.position}")
        cell.role = role

    def _promote(self, cell: Cell, role: Role) -> None:
        current = self.root if role is Role.ROOT else self.target
        if cell is current:
            return
        if cell.role in (Role.ROOT, Role.TARGET):
            raise InvalidRoleTransition(
                f"Cannot move {role.name} onto the {cell.role.name} cell {cell.position}")
        if cell.role is Role.WALL:
            raise InvalidRoleTransition(f"Cannot move {role.name} onto wall {cell.position}")

        current.role = Role.OPEN
        cell.role = role
        if role is Role.ROOT:
            self._root = cell.position
        else:
            self._target = cell.position

    def set_weight(self, cell: Cell, weight: int) -> None:
        cell.weight = check_weight(weight)

    def reset_solve_markers(self) -> None:
        for cell in self:
            cell.visited = False
            cell.on_path = False

    def reset_markers(self) -> None:
        for cell in self:
            cell.visited = False
            cell.on_path = False
            cell.highlighted = False

    def clear(self) -> None:
        """Open every non-endpoint cell at the default weight; endpoints stay put."""
        for cell in self:
            if cell.role not in (Role.ROOT, Role.TARGET):
                cell.role = Role.OPEN
                cell.weight = DEFAULT_WEIGHT
        self.reset_markers()
        logger.debug("cleared %dx%d grid", self.width, self.height)

    # -------------------- snapshots --------------------

    def snapshot(self) -> List[CellSnapshot]:
        return [cell.snapshot() for cell in self]

    def restore(self, snapshot: Sequence[CellSnapshot]) -> None:
        if len(snapshot) != len(self):
            raise ValueError("Snapshot does not match grid size")
        for snap in snapshot:
            cell = self[snap.position]
            cell.role = snap.role
            cell.weight = snap.weight
            cell.visited = snap.visited
            cell.on_path = snap.on_path
            cell.highlighted = snap.highlighted
            if snap.role is Role.ROOT:
                self._root = snap.position
            elif snap.role is Role.TARGET:
                self._target = snap.position
