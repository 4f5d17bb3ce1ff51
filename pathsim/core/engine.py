# pathsim/core/engine.py
#!/usr/bin/env python3
"""
Traversal engine shared by every algorithm.

One run: reset -> seed -> loop(pop, mark visited, scan neighbors) -> reconstruct.

- traverse() is a generator yielding one StepResult per expansion, so a viewer
  can animate it; run_search() drains it and reconstructs the path.
- The goal is never expanded: entries for it are dropped at pop time, and the
  path hangs off the predecessor set when the goal was relaxed as a neighbor.
- BFS does not relax costs. It links each cell to the first cell that discovers
  it and stops the moment the goal is discovered.
"""

import logging
from typing import Iterator, List, Optional, Union

from pathsim.core.frontier import make_frontier
from pathsim.core.grid import GridGraph
from pathsim.core.path import reconstruct
from pathsim.core.state import SearchState
from pathsim.core.types import Algorithm, Cell, SearchResult, StepResult

logger = logging.getLogger(__name__)


def traverse(graph: GridGraph, state: SearchState, start: Cell, goal: Cell,
             algorithm: Algorithm) -> Iterator[StepResult]:
    """
    Run the search loop over `state`, yielding after every expansion.

    The last item yielded has status "finished" and carries the final counters.
    """
    s = graph.index_of(start)
    g = graph.index_of(goal)
    heuristic = algorithm is Algorithm.ASTAR
    cost_aware = algorithm.cost_aware

    def h(i: int) -> float:
        return graph.distance_between(i, g) if heuristic else 0.0

    # Reset
    state.reset()

    # Seed
    frontier = make_frontier(algorithm, state, g)
    state[s].local_cost = 0.0
    if cost_aware:
        state[s].global_estimate = h(s)
    frontier.push(s)

    popped = 0
    closed = 0

    def metrics() -> dict:
        return {
            "algo": algorithm.label,
            "popped": popped,
            "pushed": frontier.pushed,
            "open_size": len(frontier),
            "closed_count": closed,
        }

    while True:
        u = frontier.pop_next()
        if u is None:
            break

        popped += 1
        cur = state[u]
        cur.visited = True
        closed += 1

        opened: List[Cell] = []
        reached_goal = False
        for v in graph.adjacency[u]:
            if graph.obstacles[v]:
                continue
            nb = state[v]

            if cost_aware:
                alt = cur.local_cost + graph.distance_between(u, v)
                if alt < nb.local_cost:
                    nb.predecessor = u
                    nb.local_cost = alt
                    nb.global_estimate = alt + h(v)
            elif nb.predecessor is None and not nb.visited:
                nb.predecessor = u
                if v == g:
                    reached_goal = True
                    break

            if not nb.visited:
                frontier.push(v)
                opened.append(graph.cell_of(v))

        yield StepResult(status="running", opened=opened, closed=[graph.cell_of(u)],
                         current=graph.cell_of(u), metrics=metrics())
        if reached_goal:
            break

    yield StepResult(status="finished", metrics=metrics())


def run_search(graph: GridGraph, start: Cell, goal: Cell,
               algorithm: Union[Algorithm, str] = Algorithm.ASTAR,
               state: Optional[SearchState] = None) -> SearchResult:
    """Search from start to goal and return the path plus a snapshot of the annotations."""
    if isinstance(algorithm, str):
        algorithm = Algorithm.parse(algorithm)
    graph.index_of(start)
    graph.index_of(goal)
    if state is None:
        state = SearchState(graph.size)
    elif len(state) != graph.size:
        raise ValueError(f"search state holds {len(state)} cells, grid has {graph.size}")

    logger.debug("%s search %s -> %s on %dx%d grid",
                 algorithm.label, start, goal, graph.width, graph.height)

    last = None
    for last in traverse(graph, state, start, goal, algorithm):
        pass

    result = reconstruct(graph, start, goal, state.snapshot())
    result.metrics = {**last.metrics, **result.metrics}
    logger.debug("%s search done: reachable=%s popped=%d pushed=%d path_len=%d",
                 algorithm.label, result.reachable, result.metrics["popped"],
                 result.metrics["pushed"], result.metrics["path_len"])
    return result
