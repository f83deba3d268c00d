# tests/test_viewer.py
import os
import sys

import pytest

# Ensure project root (where gridmaze/ lives) is on sys.path
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# headless window for the viewer
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

pygame = pytest.importorskip("pygame")

from gridmaze.app.viewer import Viewer
from gridmaze.core.engine import MazeEngine


@pytest.fixture
def viewer():
    v = Viewer(MazeEngine(3, 1))
    yield v
    pygame.quit()


def test_rerun_after_done_keeps_hover_highlight(viewer):
    viewer._hover_to((1, 0))
    viewer._solve_now()
    assert viewer.state == "Done"

    viewer._toggle_run()

    assert viewer.engine.cell_at((1, 0)).highlighted
    assert viewer.tiles[(1, 0)].highlighted
    assert not viewer.engine.cell_at((1, 0)).on_path
    assert viewer.state == "Running"


def test_reset_keeps_hover_highlight(viewer):
    viewer._hover_to((1, 0))
    viewer._solve_now()

    viewer._reset()

    assert viewer.engine.cell_at((1, 0)).highlighted
    assert not any(c.visited for c in viewer.engine.cells())


def test_hover_moves_highlight(viewer):
    viewer._hover_to((1, 0))
    viewer._hover_to((2, 0))

    assert not viewer.engine.cell_at((1, 0)).highlighted
    assert viewer.engine.cell_at((2, 0)).highlighted
