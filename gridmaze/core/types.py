# gridmaze/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any

Position = Tuple[int, int]  # (col, row)


class Role(Enum):
    ROOT = "root"
    TARGET = "target"
    WALL = "wall"
    OPEN = "open"


class TileState(Enum):
    """Display classification of a cell; colours are the renderer's business."""
    ROOT = "root"
    TARGET = "target"
    WALL = "wall"
    EMPTY = "empty"
    PATH = "path"
    HIGHLIGHT = "highlight"
    VISITED = "visited"


def classify(role: Role, visited: bool, on_path: bool, highlighted: bool) -> TileState:
    # ROOT/TARGET > HIGHLIGHT > PATH > VISITED > WALL/EMPTY
    if role is Role.ROOT:
        return TileState.ROOT
    if role is Role.TARGET:
        return TileState.TARGET
    if highlighted:
        return TileState.HIGHLIGHT
    if on_path:
        return TileState.PATH
    if visited:
        return TileState.VISITED
    return TileState.WALL if role is Role.WALL else TileState.EMPTY


@dataclass(frozen=True)
class CellSnapshot:
    position: Position
    role: Role
    weight: int
    visited: bool = False
    on_path: bool = False
    highlighted: bool = False

    @property
    def state(self) -> TileState:
        return classify(self.role, self.visited, self.on_path, self.highlighted)

    @property
    def passable(self) -> bool:
        return self.role is not Role.WALL


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "unreachable"
    opened: List[Position] = field(default_factory=list)
    closed: List[Position] = field(default_factory=list)
    current: Optional[Position] = None
    path: Optional[List[Position]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SolveResult:
    status: str                   # "done" | "unreachable"
    path: List[Position] = field(default_factory=list)
    visited: List[Position] = field(default_factory=list)   # expansion order
    cost: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.status == "done"

    @property
    def unreachable(self) -> bool:
        return self.status == "unreachable"
