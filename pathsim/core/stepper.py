# pathsim/core/stepper.py
#!/usr/bin/env python3
"""
Step-at-a-time search for animation.

Implements the Algorithm API expected by the viewer:
- init(grid_map) - reset() - step() -> StepResult

Each step() is one expansion of the shared traversal engine; once the frontier
is exhausted (or BFS discovers the goal) the path is reconstructed and every
later step() reports "done" or "no_path".
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from pathsim.core.engine import traverse
from pathsim.core.maps import GridMap
from pathsim.core.path import reconstruct
from pathsim.core.state import SearchState
from pathsim.core.types import Algorithm, SearchResult, StepResult


@dataclass
class SearchAlgo:
    algorithm: Algorithm = Algorithm.ASTAR

    # Internal state
    grid: Optional[GridMap] = None
    state: Optional[SearchState] = None
    result: Optional[SearchResult] = None
    steps: int = 0
    _run: Optional[Iterator[StepResult]] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.algorithm.label

    @property
    def finished(self) -> bool:
        return self.result is not None

    # -------------------- lifecycle --------------------

    def init(self, grid: GridMap) -> None:
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        """Drop all progress and seed a fresh run from the grid's current start/goal."""
        if self.grid is None:
            return
        g = self.grid
        if self.state is None or len(self.state) != g.graph.size:
            self.state = SearchState(g.graph.size)
        self.result = None
        self.steps = 0
        self._run = traverse(g.graph, self.state, g.start, g.goal, self.algorithm)

    # -------------------- stepping --------------------

    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.result is not None:
            return self._final()

        res = next(self._run)
        self.steps += 1
        if res.status != "finished":
            return res

        g = self.grid
        self.result = reconstruct(g.graph, g.start, g.goal, self.state.snapshot())
        self.result.metrics = {**res.metrics, **self.result.metrics}
        return self._final()

    def run_to_end(self) -> SearchResult:
        while self.result is None:
            if self.step().status == "idle":
                raise RuntimeError("SearchAlgo.run_to_end() called before init()")
        return self.result

    def _final(self) -> StepResult:
        r = self.result
        if r.reachable:
            return StepResult(status="done", current=self.grid.goal, path=list(r.path),
                              metrics=dict(r.metrics))
        return StepResult(status="no_path", metrics=dict(r.metrics))
