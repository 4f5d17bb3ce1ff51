# pathsim/app/viewer.py
#!/usr/bin/env python3
"""
Path Finder Viewer: click to toggle obstacles, watch the search re-run.

- Mouse:
    [LEFT CLICK]        -> toggle obstacle on a cell, re-run the search
    [S]/[G] + CLICK     -> move start / goal
- Keyboard:
    [A]/[D]/[B]/[U]     -> select algorithm (A* / Dijkstra / BFS / Uniform cost)
    [SPACE]             -> animate the search step by step (again to pause)
    [N]                 -> single step
    [R]                 -> re-run instantly
    [C]                 -> clear all obstacles
    [+]/[-]             -> steps/sec
    [1]..[9]            -> switch bundled map
    [Q]/[ESC]           -> quit

Colors: blue = start, red = goal, black = obstacle, white = open,
grey = visited, green = path.
"""

import logging
import sys
import time
from typing import Dict, List, Optional, Tuple

import pygame

from pathsim.app.config import ViewerConfig, bundled_maps, resolve_config
from pathsim.core.errors import PathSimError
from pathsim.core.maps import GridMap, blank_map, load_map, move_endpoint
from pathsim.core.stepper import SearchAlgo
from pathsim.core.types import Algorithm, Cell, StepResult

logger = logging.getLogger(__name__)

# ---------- Config ----------
PANEL_W = 300            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 32
MIN_CELL_SIZE = 8
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
GREY        = (140,140,140)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
PATH_GREEN  = ( 46,200, 87)
OPEN_CYAN_A = (0,150,255,70)
BG_TOP      = (24, 26, 32)
BG_BOT      = (36, 40, 48)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)

ALGO_KEYS = {
    pygame.K_a: Algorithm.ASTAR,
    pygame.K_d: Algorithm.DIJKSTRA,
    pygame.K_b: Algorithm.BFS,
    pygame.K_u: Algorithm.UNIFORM_COST,
}
MAP_KEYS = [pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4, pygame.K_5,
            pygame.K_6, pygame.K_7, pygame.K_8, pygame.K_9]


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
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

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
    def __init__(self, grid: GridMap, algorithm: Algorithm = Algorithm.ASTAR):
        pygame.init()

        self.grid = grid
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)
        self.maps = bundled_maps()

        cs = self._auto_cell_size(grid)
        win_w = GRID_MARGIN*2 + grid.width * cs + PANEL_W
        win_h = max(GRID_MARGIN*2 + grid.height * cs, 560)
        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"Path Finder - {grid.name}")

        self._buttons: List[UIButton] = []
        self.selected_algo = algorithm
        self.algo = SearchAlgo(algorithm)

        self.visited: set = set()
        self.open_set: set = set()
        self.path: List[Cell] = []
        self.place_mode: Optional[str] = None   # "start" | "goal" while S/G held

        self.animating = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = 20
        self._last_step_t = 0.0
        self.state = "Idle"
        self._last_metrics: Dict = {}

        self._layout(win_w, win_h)
        self.search()

    # ---------- layout ----------
    def _auto_cell_size(self, grid: GridMap) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(MIN_CELL_SIZE, min(CELL_SIZE_DEFAULT, target_h // grid.height))

    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits the window; grid on the left, panel on the right."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = max(MIN_CELL_SIZE, min(avail_w // self.grid.width,
                                                avail_h // self.grid.height))
        self._grid_origin = (GRID_MARGIN, GRID_MARGIN)
        grid_right = GRID_MARGIN * 2 + self.grid.width * self.cell_size
        self._right_band = pygame.Rect(grid_right, 0, max(PANEL_W, win_w - grid_right), win_h)
        self._build_buttons()

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Cell]:
        """Map a pixel position to the cell under it, None outside the grid."""
        ox, oy = self._grid_origin
        px, py = pos
        if px < ox or py < oy:
            return None
        c = ((px - ox) // self.cell_size, (py - oy) // self.cell_size)
        return c if self.grid.graph.in_bounds(c) else None

    # ---------- search control ----------
    def search(self):
        """Run the selected algorithm to completion and show the result."""
        self.animating = False
        self.algo.init(self.grid)
        result = self.algo.run_to_end()
        self.visited = set(result.visited_cells())
        self.open_set.clear()
        self.path = list(result.path)
        self.state = "Done" if result.reachable else "No path"
        self._last_metrics = dict(result.metrics)
        self._refresh_active_states()

    def animate(self):
        """Restart the search and play it back one expansion at a time."""
        self.algo.init(self.grid)
        self.visited.clear()
        self.open_set.clear()
        self.path = []
        self.animating = True
        self.state = "Running"
        self._last_metrics = {"algo": self.algo.name}
        self._refresh_active_states()

    def _toggle_animation(self):
        if self.animating:
            self.animating = False
            self.state = "Paused"
        elif self.state == "Paused":
            self.animating = True
            self.state = "Running"
        else:
            self.animate()
        self._refresh_active_states()

    def _do_step(self) -> StepResult:
        if self.algo.finished and not self.animating:
            self.animate()
            self.animating = False
            self.state = "Paused"
        res = self.algo.step()
        for c in res.closed:
            self.visited.add(c)
            self.open_set.discard(c)
        for c in res.opened:
            self.open_set.add(c)
        if res.path is not None:
            self.path = res.path
        if res.status in ("done", "no_path"):
            self.state = "Done" if res.status == "done" else "No path"
            self.animating = False
            self.open_set.clear()
            self._refresh_active_states()
        if res.metrics:
            self._last_metrics = res.metrics
        return res

    def _tick_algorithm(self):
        t0 = time.time()
        if t0 - self._last_step_t >= 1.0 / max(1, self.steps_per_sec):
            self._last_step_t = t0
            self._do_step()

    # ---------- edits ----------
    def click_cell(self, cell: Cell):
        if self.place_mode is not None:
            move_endpoint(self.grid, self.place_mode, cell)
        else:
            self.grid.graph.toggle_obstacle(cell)
        self.search()

    def clear_obstacles(self):
        self.grid.graph.clear_obstacles()
        self.search()

    def switch_algo(self, algorithm: Algorithm):
        self.selected_algo = algorithm
        self.algo = SearchAlgo(algorithm)
        self.search()

    def switch_map(self, key: str):
        if key not in self.maps:
            return
        try:
            grid = load_map(self.maps[key])
        except PathSimError as ex:
            logger.error("failed to load map %s: %s", key, ex)
            return
        self.grid = grid
        pygame.display.set_caption(f"Path Finder - {grid.name}")
        self._layout(*self.screen.get_size())
        self.search()

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.animating:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _quit(self):
        pygame.quit()
        sys.exit(0)

    def _handle_events(self):
        for e in pygame.event.get():
            self.handle_event(e)

    def handle_event(self, e: pygame.event.Event):
        if e.type == pygame.QUIT:
            self._quit()
        elif e.type == pygame.KEYDOWN:
            if e.key in (pygame.K_ESCAPE, pygame.K_q):
                self._quit()
            elif e.key == pygame.K_s:
                self.place_mode = "start"
            elif e.key == pygame.K_g:
                self.place_mode = "goal"
            elif e.key == pygame.K_SPACE:
                self._toggle_animation()
            elif e.key == pygame.K_n:
                self._do_step()
            elif e.key == pygame.K_r:
                self.search()
            elif e.key == pygame.K_c:
                self.clear_obstacles()
            elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                self._bump_speed(+1)
            elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                self._bump_speed(-1)
            elif e.key in ALGO_KEYS:
                self.switch_algo(ALGO_KEYS[e.key])
            elif e.key in MAP_KEYS:
                keys = list(self.maps)
                idx = MAP_KEYS.index(e.key)
                if idx < len(keys):
                    self.switch_map(keys[idx])
        elif e.type == pygame.KEYUP:
            if e.key in (pygame.K_s, pygame.K_g):
                self.place_mode = None
        elif e.type == pygame.VIDEORESIZE:
            self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
            self._layout(e.w, e.h)
        elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
            for b in self._buttons:
                if b.handle_mouse(e):
                    return
            if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                cell = self.cell_at(e.pos)
                if cell is not None:
                    self.click_cell(cell)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        for y in range(h):
            t = y / max(1, h-1)
            c = tuple(int(BG_TOP[i] + (BG_BOT[i]-BG_TOP[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_rect(self, cell: Cell, border: int = 1) -> pygame.Rect:
        cs = self.cell_size
        ox, oy = self._grid_origin
        col, row = cell
        return pygame.Rect(ox + col*cs + border, oy + row*cs + border, cs - 2*border, cs - 2*border)

    def _draw_grid(self):
        graph = self.grid.graph
        for cell in graph.cells():
            if graph.is_obstacle(cell):
                color = BLACK
            elif cell in self.visited:
                color = GREY
            else:
                color = WHITE
            pygame.draw.rect(self.screen, color, self._cell_rect(cell))

        cs = self.cell_size
        for cell in self.open_set:
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(OPEN_CYAN_A)
            self.screen.blit(s, self._cell_rect(cell, border=0).topleft)

        # path cells between start and goal
        for cell in self.path[1:-1]:
            pygame.draw.rect(self.screen, PATH_GREEN, self._cell_rect(cell, border=max(2, cs // 5)))

        pygame.draw.rect(self.screen, BLUE, self._cell_rect(self.grid.start))
        pygame.draw.rect(self.screen, RED, self._cell_rect(self.grid.goal))
        if cs >= 16:
            for cell, label in ((self.grid.start, "S"), (self.grid.goal, "G")):
                txt = self.font_small.render(label, True, WHITE)
                self.screen.blit(txt, txt.get_rect(center=self._cell_rect(cell).center))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Animate / Pause", self._toggle_animation, togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step); y += h + gap
        add("Clear Obstacles", self.clear_obstacles); y += h + gap
        self._algo_buttons: Dict[Algorithm, UIButton] = {}
        for algorithm in Algorithm:
            add(f"Algo: {algorithm.label}", lambda a=algorithm: self.switch_algo(a), togglable=True)
            self._algo_buttons[algorithm] = self._buttons[-1]
            y += h + gap

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.animating)
        for algorithm, btn in getattr(self, "_algo_buttons", {}).items():
            btn.set_active(algorithm is self.selected_algo)

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(120, self.steps_per_sec + dv)))

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card = pygame.Surface((rb.width - 20, 210), pygame.SRCALPHA)
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

        m = self._last_metrics
        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"Algo: {self.selected_algo.label}")
        line(f"State: {self.state}")
        line(f"Popped: {m.get('popped', 0)}   Pushed: {m.get('pushed', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']:.1f}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def make_grid(cfg: ViewerConfig) -> GridMap:
    if cfg.map_path is not None:
        return load_map(cfg.map_path)
    return blank_map(*cfg.size)


def main(argv: Optional[List[str]] = None):
    try:
        cfg = resolve_config(argv)
    except PathSimError as ex:
        print(f"pathsim-viewer: {ex}", file=sys.stderr)
        sys.exit(2)
    logging.basicConfig(level=cfg.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        grid = make_grid(cfg)
    except PathSimError as ex:
        logger.error("failed to load map: %s", ex)
        sys.exit(1)
    Viewer(grid, cfg.algorithm).run()


if __name__ == "__main__":
    main()
