# gridmaze/core/dijkstra.py
#!/usr/bin/env python3
"""
Weighted Dijkstra over a Grid, one expansion per step() for animation.

API:
- init(grid) - reset() - step() -> StepResult - run() -> SolveResult

Edge cost is the weight of the cell being entered, so the root's own weight
never counts. Frontier entries are (g, seq, cell): equal costs pop in the
order they were discovered.
"""

import heapq
import logging
from dataclasses import dataclass, field
from math import inf
from typing import Dict, List, Optional, Tuple

from gridmaze.core.grid import Grid
from gridmaze.core.types import Position, SolveResult, StepResult

logger = logging.getLogger(__name__)


@dataclass
class DijkstraAlgo:
    name: str = "Dijkstra"

    grid: Optional[Grid] = None
    open_pq: List[Tuple[int, int, Position]] = field(default_factory=list)   # (g, seq, cell)
    open_set: set = field(default_factory=set)
    closed_set: set = field(default_factory=set)
    expanded: List[Position] = field(default_factory=list)
    g: Dict[Position, int] = field(default_factory=dict)
    parent: Dict[Position, Position] = field(default_factory=dict)
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    goal_cell: Optional[Position] = None
    seq: int = 0

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid) -> None:
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        """Clear solver state and the grid's solve markers, then seed with the root."""
        if self.grid is None:
            return
        self.grid.reset_solve_markers()
        self.open_pq.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.expanded.clear()
        self.g.clear()
        self.parent.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self.goal_cell = self.grid.target_position
        self.seq = 0

        s = self.grid.root_position
        self.g[s] = 0
        heapq.heappush(self.open_pq, (0, self._bump(), s))
        self.open_set.add(s)

    # -------------------- helpers --------------------

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _neighbors4(self, c: Position) -> List[Position]:
        return [n.position for n in self.grid.passable_neighbors(self.grid[c])]

    def _reconstruct_path(self, end: Position) -> List[Position]:
        path: List[Position] = []
        cur = end
        while True:
            path.append(cur)
            if cur == self.grid.root_position:
                break
            cur = self.parent[cur]
        path.reverse()
        return path

    def _mark_path(self, path: List[Position]) -> None:
        for pos in path:
            self.grid[pos].on_path = True

    # -------------------- stepping --------------------

    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            path = self._reconstruct_path(self.goal_cell)
            return StepResult(status="done", path=path,
                              metrics=self._metrics(path_len=len(path)))

        if self.no_path:
            return StepResult(status="unreachable", metrics=self._metrics())

        if not self.open_pq:
            self.no_path = True
            logger.debug("%s: frontier exhausted after %d expansions", self.name, self.popped_count)
            return StepResult(status="unreachable", metrics=self._metrics())

        g_u, _, u = heapq.heappop(self.open_pq)
        if u in self.closed_set or g_u != self.g.get(u, inf):
            return StepResult(status="running", current=u, metrics=self._metrics())

        self.popped_count += 1
        self.open_set.discard(u)
        self.closed_set.add(u)
        self.expanded.append(u)
        self.grid[u].visited = True

        if u == self.goal_cell:
            self.done = True
            path = self._reconstruct_path(u)
            self._mark_path(path)
            logger.debug("%s: reached %s at cost %d", self.name, u, self.g[u])
            return StepResult(status="done", closed=[u], current=u, path=path,
                              metrics=self._metrics(path_len=len(path)))

        opened_now: List[Position] = []
        for v in self._neighbors4(u):
            if v in self.closed_set:
                continue
            alt = self.g[u] + self.grid[v].weight
            if alt < self.g.get(v, inf):
                self.g[v] = alt
                self.parent[v] = u
                heapq.heappush(self.open_pq, (alt, self._bump(), v))
                if v not in self.open_set:
                    self.open_set.add(v)
                    opened_now.append(v)

        return StepResult(status="running", opened=opened_now, closed=[u], current=u,
                          metrics=self._metrics())

    def run(self) -> SolveResult:
        """Step until the target is popped or the frontier empties."""
        res = self.step()
        while res.status == "running":
            res = self.step()
        return self.result()

    def result(self) -> SolveResult:
        if self.done:
            path = self._reconstruct_path(self.goal_cell)
            return SolveResult(status="done", path=path, visited=list(self.expanded),
                               cost=self.g[self.goal_cell])
        if self.no_path:
            return SolveResult(status="unreachable", visited=list(self.expanded))
        raise RuntimeError(f"{self.name} has not finished")

    # -------------------- metrics --------------------

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "path_len": path_len,
            "total_cost": self.g.get(self.goal_cell) if self.done else None,
        }
