# gridmaze/core/errors.py
"""Error kinds raised by the maze engine.

Each kind also derives from the closest builtin so callers that only know
about ``ValueError`` / ``IndexError`` still catch them. An unreachable target
is not an error: the solver reports it through ``SolveResult.status``.
"""


class MazeError(Exception):
    """Base class for every engine error."""


class OutOfBounds(MazeError, IndexError):
    def __init__(self, position, width: int, height: int):
        self.position = tuple(position)
        super().__init__(f"Position {self.position} outside {width}x{height} grid")


class InvalidRoleTransition(MazeError, ValueError):
    pass


class InvalidWeight(MazeError, ValueError):
    def __init__(self, weight):
        self.weight = weight
        super().__init__(f"Weight must be an integer >= 1, got {weight!r}")


class GridTooSmall(MazeError, ValueError):
    pass


class InvalidConfiguration(MazeError, ValueError):
    pass


class GenerationFailed(MazeError, RuntimeError):
    pass
