# pathsim/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any

from pathsim.core.errors import OutOfBounds

Cell = Tuple[int, int]  # (col, row)


def cell_in_grid(c, width: int, height: int) -> bool:
    """True when c is an integer (x, y) pair inside [0, width) x [0, height)."""
    try:
        x, y = c
    except (TypeError, ValueError):
        return False
    if not (isinstance(x, int) and isinstance(y, int)):
        return False
    return 0 <= x < width and 0 <= y < height


class Algorithm(Enum):
    ASTAR = "astar"
    DIJKSTRA = "dijkstra"          # FIFO-ordered, see DESIGN.md
    BFS = "bfs"
    UNIFORM_COST = "ucs"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def cost_aware(self) -> bool:
        return self is not Algorithm.BFS

    @classmethod
    def parse(cls, text: str) -> "Algorithm":
        key = text.strip().lower()
        for algo in cls:
            if key in (algo.value, algo.name.lower(), algo.label.lower()):
                return algo
        raise ValueError(f"unknown algorithm: {text!r}")


_LABELS = {
    Algorithm.ASTAR: "A*",
    Algorithm.DIJKSTRA: "Dijkstra",
    Algorithm.BFS: "BFS",
    Algorithm.UNIFORM_COST: "Uniform cost",
}


@dataclass
class SearchAnnotation:
    visited: bool = False
    local_cost: float = float("inf")
    global_estimate: float = float("inf")
    predecessor: Optional[int] = None   # arena index, not a Cell

    def clear(self) -> None:
        self.visited = False
        self.local_cost = float("inf")
        self.global_estimate = float("inf")
        self.predecessor = None


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "finished" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResult:
    reachable: bool
    path: List[Cell]
    annotations: List[SearchAnnotation]
    width: int
    height: int
    metrics: Dict[str, Any] = field(default_factory=dict)

    def annotation(self, cell: Cell) -> SearchAnnotation:
        """Annotation of cell. Raises OutOfBounds."""
        if not cell_in_grid(cell, self.width, self.height):
            raise OutOfBounds(cell, self.width, self.height)
        x, y = cell
        return self.annotations[y * self.width + x]

    def visited_cells(self) -> List[Cell]:
        return [(i % self.width, i // self.width)
                for i, a in enumerate(self.annotations) if a.visited]

    @property
    def edge_count(self) -> int:
        return max(0, len(self.path) - 1)
