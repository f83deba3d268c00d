from gridmaze.core.engine import CellObserver, MazeEngine
from gridmaze.core.errors import (
    GenerationFailed,
    GridTooSmall,
    InvalidConfiguration,
    InvalidRoleTransition,
    InvalidWeight,
    MazeError,
    OutOfBounds,
)
from gridmaze.core.types import CellSnapshot, Role, SolveResult, StepResult, TileState
