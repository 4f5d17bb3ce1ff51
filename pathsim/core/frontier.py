# pathsim/core/frontier.py
#!/usr/bin/env python3
"""
Frontier strategies: the only structural difference between the algorithms.

- PriorityFrontier: min global_estimate first (A*, uniform cost).
  Tie-breaking: (key, seq, index) so equal keys pop in insertion order.
- FifoFrontier: strict insertion order (Dijkstra as shipped, BFS).

Entries are never removed eagerly. Duplicates are allowed; entries that are
already visited, or are the goal, are dropped lazily when they reach the head.
"""

import heapq
from collections import deque
from typing import Deque, List, Optional, Tuple

from pathsim.core.state import SearchState
from pathsim.core.types import Algorithm


class _Frontier:
    def __init__(self, state: SearchState, goal: int):
        self.state = state
        self.goal = goal
        self.pushed = 0

    def _inert(self, i: int) -> bool:
        return i == self.goal or self.state[i].visited

    def push(self, i: int) -> None:
        raise NotImplementedError

    def pop_next(self) -> Optional[int]:
        """Drop inert entries at the head, then pop. None when exhausted."""
        raise NotImplementedError

    def is_empty(self) -> bool:
        raise NotImplementedError


class PriorityFrontier(_Frontier):
    def __init__(self, state: SearchState, goal: int):
        super().__init__(state, goal)
        self._heap: List[Tuple[float, int, int]] = []

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, i: int) -> None:
        # key is frozen at push time; a later improvement pushes a fresh entry
        self.pushed += 1
        heapq.heappush(self._heap, (self.state[i].global_estimate, self.pushed, i))

    def _drain(self) -> None:
        while self._heap and self._inert(self._heap[0][2]):
            heapq.heappop(self._heap)

    def pop_next(self) -> Optional[int]:
        self._drain()
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def is_empty(self) -> bool:
        self._drain()
        return not self._heap


class FifoFrontier(_Frontier):
    def __init__(self, state: SearchState, goal: int):
        super().__init__(state, goal)
        self._queue: Deque[int] = deque()

    def __len__(self) -> int:
        return len(self._queue)

    def push(self, i: int) -> None:
        self.pushed += 1
        self._queue.append(i)

    def _drain(self) -> None:
        while self._queue and self._inert(self._queue[0]):
            self._queue.popleft()

    def pop_next(self) -> Optional[int]:
        self._drain()
        if not self._queue:
            return None
        return self._queue.popleft()

    def is_empty(self) -> bool:
        self._drain()
        return not self._queue


def make_frontier(algorithm: Algorithm, state: SearchState, goal: int) -> _Frontier:
    if algorithm in (Algorithm.ASTAR, Algorithm.UNIFORM_COST):
        return PriorityFrontier(state, goal)
    return FifoFrontier(state, goal)
