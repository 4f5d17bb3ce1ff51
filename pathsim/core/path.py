# pathsim/core/path.py
#!/usr/bin/env python3
import logging
from typing import List, Optional, Sequence

from pathsim.core.errors import InternalInvariantViolation
from pathsim.core.grid import GridGraph
from pathsim.core.types import Cell, SearchAnnotation, SearchResult

logger = logging.getLogger(__name__)


def path_cost(graph: GridGraph, path: Sequence[Cell]) -> float:
    """Sum of edge distances along path."""
    return sum(graph.distance(a, b) for a, b in zip(path, path[1:]))


def reconstruct(graph: GridGraph, start: Cell, goal: Cell,
                annotations: List[SearchAnnotation]) -> SearchResult:
    """
    Walk predecessor links back from goal to start.

    Unreachable (no predecessor on goal, goal != start) is a normal result.
    A chain that does not reach start within W*H steps is a broken tree and
    raises InternalInvariantViolation.
    """
    s = graph.index_of(start)
    g = graph.index_of(goal)

    if g != s and annotations[g].predecessor is None:
        return SearchResult(reachable=False, path=[], annotations=annotations,
                            width=graph.width, height=graph.height,
                            metrics={"path_len": 0, "total_cost": None})

    chain: List[int] = [g]
    cur: Optional[int] = g
    for _ in range(graph.size):
        if cur == s:
            break
        cur = annotations[cur].predecessor
        if cur is None:
            logger.error("predecessor chain from %s ends before reaching %s", goal, start)
            raise InternalInvariantViolation(
                f"predecessor chain from {goal} does not reach {start}",
                start=start, goal=goal, length=len(chain))
        chain.append(cur)
    else:
        logger.error("predecessor chain from %s exceeds %d cells", goal, graph.size)
        raise InternalInvariantViolation(
            f"predecessor cycle: chain from {goal} exceeds {graph.size} cells",
            start=start, goal=goal, length=len(chain))

    chain.reverse()
    path = [graph.cell_of(i) for i in chain]
    return SearchResult(reachable=True, path=path, annotations=annotations,
                        width=graph.width, height=graph.height,
                        metrics={"path_len": len(path), "total_cost": path_cost(graph, path)})
