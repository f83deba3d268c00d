# gridmaze/app/viewer.py
#!/usr/bin/env python3
"""
Maze Viewer: generate, edit and solve with live overlays

- Keyboard:
    [G]          -> generate a new maze
    [SPACE]      -> run/pause animated solve
    [N]          -> single step
    [S]          -> solve instantly
    [C]          -> clear (all open)
    [R]          -> reset markers
    [K]          -> toggle coordinate labels
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit
- Mouse:
    left click/drag  -> paint walls (drag root/target to move them)
    right click      -> cycle cell weight
    hover            -> highlight

Config:
- ENV: GRIDMAZE_SEED, GRIDMAZE_SIZE=WxH
- CLI: --seed=N --size=WxH
"""

import sys
import time
from typing import Dict, Iterator, List, Optional, Tuple

import pygame

from gridmaze.config import DEFAULT_WEIGHT, MAX_WEIGHT, resolve_seed, resolve_size
from gridmaze.core.engine import MazeEngine
from gridmaze.core.errors import MazeError
from gridmaze.core.types import CellSnapshot, Position, Role, StepResult, TileState

# ---------- Config ----------
APP_TITLE = "Generate and solve maze"
PANEL_W = 320            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 24
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
GRID_LINE   = (211,211,211)
CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

TILE_COLORS: Dict[TileState, Tuple[int, int, int]] = {
    TileState.ROOT:      (255,255,  0),
    TileState.TARGET:    (128,  0,128),
    TileState.EMPTY:     WHITE,
    TileState.WALL:      BLACK,
    TileState.PATH:      (255, 20,147),
    TileState.HIGHLIGHT: (255,  0,  0),
    TileState.VISITED:   (152,251,152),
}


def weight_shade(base: Tuple[int, int, int], weight: int) -> Tuple[int, int, int]:
    """Darken ``base`` as weight grows so heavy cells read at a glance."""
    if weight <= DEFAULT_WEIGHT:
        return base
    t = min(1.0, (weight - DEFAULT_WEIGHT) / max(1, MAX_WEIGHT - DEFAULT_WEIGHT))
    return tuple(int(c * (1.0 - 0.55 * t)) for c in base)


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, engine: MazeEngine):
        pygame.init()

        self.engine = engine
        self.width, self.height = engine.dimensions()
        self.cell_size = self._auto_cell_size()
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        grid_px_w = GRID_MARGIN*2 + self.width * self.cell_size
        grid_px_h = GRID_MARGIN*2 + self.height * self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 560)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(APP_TITLE)

        self._buttons: list[UIButton] = []
        self._layout(win_w, win_h)

        # local mirror of cell state, refreshed only by engine notifications
        self.tiles: Dict[Position, CellSnapshot] = {c.position: c for c in engine.cells()}
        self.last_batch = 0
        engine.subscribe(self._on_cells_changed)

        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = 30
        self.state = "Idle"
        self.show_coords = False
        self._steps: Optional[Iterator[StepResult]] = None
        self._last_step_t = 0.0
        self._hover: Optional[Position] = None
        self._drag: Optional[str] = None       # "root" | "target" | "paint"
        self._paint_wall = True
        self._last_metrics: dict = {}

    # ---------- engine notifications ----------
    def _on_cells_changed(self, changed: List[CellSnapshot]) -> None:
        for snap in changed:
            self.tiles[snap.position] = snap
        self.last_batch = len(changed)

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and place the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(6, min(avail_w // self.width, avail_h // self.height)))

        grid_plate_w = self.width * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.height * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(0, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _auto_cell_size(self) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(8, min(CELL_SIZE_DEFAULT, target_h // self.height))

    def _cell_from_pixel(self, px: int, py: int) -> Optional[Position]:
        ox, oy = self._grid_origin
        col = (px - ox) // self.cell_size
        row = (py - oy) // self.cell_size
        if 0 <= col < self.width and 0 <= row < self.height:
            return (col, row)
        return None

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            self._do_step()

    def _do_step(self):
        if self._steps is None:
            if self.state in ("Done", "No path"):
                return
            self._steps = self.engine.solve_steps()
        res = next(self._steps, None)
        if res is None:
            self._finish_steps()
            return
        if res.metrics:
            self._last_metrics = res.metrics
        if res.status == "done":
            self.state = "Done"
            self._finish_steps()
        elif res.status == "unreachable":
            self.state = "No path"
            self._finish_steps()
        else:
            self.state = "Running" if self.running else "Paused"

    def _finish_steps(self):
        self._steps = None
        self.running = False
        self._refresh_active_states()

    def _cancel_solve(self, state: str = "Idle"):
        if self._steps is not None:
            self._steps.close()
        self._steps = None
        self.running = False
        self.state = state
        self._last_metrics = {}
        self._refresh_active_states()

    # ---------- commands ----------
    def _generate(self):
        self._cancel_solve()
        seed = self.engine.generate()
        self._restore_hover()
        print(f"Generated maze seed={seed}")

    def _solve_now(self):
        self._cancel_solve()
        result = self.engine.solve()
        self.state = "Done" if result.found else "No path"
        self._last_metrics = {
            "algo": "Dijkstra",
            "popped": len(result.visited),
            "path_len": len(result.path),
            "total_cost": result.cost,
        }

    def _clear(self):
        self._cancel_solve()
        self.engine.clear()
        self._restore_hover()

    def _reset(self):
        self._cancel_solve()
        self.engine.reset_markers()
        self._restore_hover()

    def _toggle_run(self):
        if self.state in ("Done", "No path"):
            self.engine.reset_markers()
            self._restore_hover()
            self.state = "Idle"
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _toggle_coords(self):
        self.show_coords = not self.show_coords
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(120, self.steps_per_sec + dv)))

    def _edit(self, action, *args):
        """Run an editing command; rejected edits are reported, not fatal."""
        try:
            action(*args)
        except MazeError as ex:
            print(f"Edit rejected: {ex}")
            return False
        if self.state != "Idle":
            self._cancel_solve("Edited")
        return True

    # ---------- events ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e.key)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
                if any(b.handle_mouse(e) for b in self._buttons):
                    continue
                self._handle_grid_mouse(e)

    def _handle_key(self, key: int):
        if key in (pygame.K_ESCAPE, pygame.K_q):
            pygame.quit(); sys.exit(0)
        elif key == pygame.K_SPACE:
            self._toggle_run()
        elif key == pygame.K_n:
            self._do_step()
        elif key == pygame.K_s:
            self._solve_now()
        elif key == pygame.K_g:
            self._generate()
        elif key == pygame.K_c:
            self._clear()
        elif key == pygame.K_r:
            self._reset()
        elif key == pygame.K_k:
            self._toggle_coords()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            self._bump_speed(+5)
        elif key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
            self._bump_speed(-5)

    def _handle_grid_mouse(self, e: pygame.event.Event):
        pos = self._cell_from_pixel(*e.pos) if hasattr(e, "pos") else None

        if e.type == pygame.MOUSEBUTTONUP:
            self._drag = None
            return

        if e.type == pygame.MOUSEMOTION:
            self._hover_to(pos)
            if pos is not None and self._drag is not None:
                self._drag_to(pos)
            return

        if pos is None:
            return
        snap = self.tiles[pos]
        if e.button == 1:
            if snap.role is Role.ROOT:
                self._drag = "root"
            elif snap.role is Role.TARGET:
                self._drag = "target"
            else:
                self._drag = "paint"
                self._paint_wall = snap.role is not Role.WALL
                self._edit(self.engine.set_wall, pos, self._paint_wall)
        elif e.button == 3 and snap.passable:
            self._edit(self.engine.set_weight, pos, snap.weight % MAX_WEIGHT + 1)

    def _drag_to(self, pos: Position):
        snap = self.tiles[pos]
        if self._drag == "paint":
            if snap.role in (Role.OPEN, Role.WALL) and (snap.role is Role.WALL) != self._paint_wall:
                self._edit(self.engine.set_wall, pos, self._paint_wall)
        elif snap.role is Role.OPEN:
            # walls and the other endpoint block the drag
            move = self.engine.move_root if self._drag == "root" else self.engine.move_target
            self._edit(move, pos)

    def _hover_to(self, pos: Optional[Position]):
        if pos == self._hover:
            return
        if self._hover is not None:
            self.engine.highlight(self._hover, False)
        self._hover = pos
        if pos is not None and self._drag is None:
            self.engine.highlight(pos, True)

    def _restore_hover(self):
        """Marker resets drop every highlight, including the cell under the cursor."""
        if self._hover is not None and self._drag is None:
            self.engine.highlight(self._hover, True)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = (
                int(top[0] + (bot[0]-top[0]) * t),
                int(top[1] + (bot[1]-top[1]) * t),
                int(top[2] + (bot[2]-top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin

        for (col, row), snap in self.tiles.items():
            rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
            state = snap.state
            color = TILE_COLORS[state]
            if state in (TileState.EMPTY, TileState.VISITED):
                color = weight_shade(color, snap.weight)
            pygame.draw.rect(self.screen, color, rect)
            pygame.draw.rect(self.screen, GRID_LINE, rect, 1)

            label = None
            if self.show_coords and cs >= 18:
                label = f"{col},{row}"
            elif snap.passable and snap.weight > DEFAULT_WEIGHT and cs >= 12:
                label = str(snap.weight)
            if label:
                fg = WHITE if state is TileState.WALL else BLACK
                txt = self.font_small.render(label, True, fg)
                self.screen.blit(txt, txt.get_rect(center=rect.center))

    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, togglable=False, store_as: str | None = None):
            nonlocal y
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)
            y += h + gap

        add("Generate", self._generate)
        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run")
        add("Step Once", self._do_step)
        add("Solve", self._solve_now)
        add("Clear", self._clear)
        add("Reset", self._reset)
        add("Coords", self._toggle_coords, togglable=True, store_as="btn_coords")

        minus_rect = pygame.Rect(x, y, (w-8)//2, h)
        plus_rect  = pygame.Rect(x + (w-8)//2 + 8, y, (w-8)//2, h)
        self._buttons.append(UIButton("Speed −", minus_rect, lambda: self._bump_speed(-5)))
        self._buttons.append(UIButton("Speed +", plus_rect,  lambda: self._bump_speed(+5)))

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(getattr(self, "running", False))
        if hasattr(self, "btn_coords"):
            self.btn_coords.set_active(getattr(self, "show_coords", False))

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 230
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"State: {self.state}")
        line(f"Seed: {self.engine.seed}")
        line(f"Expanded: {m.get('popped', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost", None) is not None:
            line(f"Total Cost: {m['total_cost']}")
        line(f"Last update: {self.last_batch} cells")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main():
    try:
        width, height = resolve_size()
        engine = MazeEngine(width, height)
        engine.generate(resolve_seed())
    except (MazeError, ValueError) as ex:
        print(f"Failed to build maze: {ex}")
        sys.exit(1)
    Viewer(engine).run()

if __name__ == "__main__":
    main()
