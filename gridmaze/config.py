# gridmaze/config.py
import os
import random
import sys
from typing import Optional, Sequence, Tuple

# --- Grid ---
DEFAULT_WIDTH = 31
DEFAULT_HEIGHT = 21
MIN_MAZE_WIDTH = 2
MIN_MAZE_HEIGHT = 2

# --- Weights ---
DEFAULT_WEIGHT = 1
MAX_WEIGHT = 9     # viewer cycles 1..MAX_WEIGHT on right click

# --- Environment / CLI keys ---
SEED_ENV = "GRIDMAZE_SEED"
SIZE_ENV = "GRIDMAZE_SIZE"


def _cli_value(key: str, argv: Optional[Sequence[str]] = None) -> Optional[str]:
    argv = sys.argv if argv is None else argv
    value = None
    for arg in argv:
        if arg.startswith(f"--{key}="):
            value = arg.split("=", 1)[1]
    return value


def resolve_seed(argv: Optional[Sequence[str]] = None) -> int:
    """Seed from --seed=N, then $GRIDMAZE_SEED, else a fresh random one."""
    raw = _cli_value("seed", argv)
    if raw is None:
        raw = os.getenv(SEED_ENV)
    if raw is not None and raw.strip():
        return int(raw)
    return random.randint(0, 2**32 - 1)


def resolve_size(argv: Optional[Sequence[str]] = None) -> Tuple[int, int]:
    """Grid size from --size=WxH, then $GRIDMAZE_SIZE, else the defaults."""
    raw = _cli_value("size", argv)
    if raw is None:
        raw = os.getenv(SIZE_ENV)
    if not raw:
        return DEFAULT_WIDTH, DEFAULT_HEIGHT
    w, _, h = raw.lower().partition("x")
    return int(w), int(h)
