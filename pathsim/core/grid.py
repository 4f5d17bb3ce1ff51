# pathsim/core/grid.py
#!/usr/bin/env python3
"""
Grid graph: W x H cells in a flat arena, addressed by index = y * W + x.

- Adjacency is 4-connected (left, up, right, down) and fixed at construction.
- Obstacle flags are the only mutable part; callers flip them between searches.
- Edge weight and heuristic are both the Euclidean distance between cells.
"""

import logging
from dataclasses import dataclass, field
from math import hypot
from typing import List, Tuple, Iterable

from pathsim.core.errors import InvalidDimension, OutOfBounds
from pathsim.core.types import Cell, cell_in_grid

logger = logging.getLogger(__name__)


@dataclass
class GridGraph:
    width: int
    height: int
    obstacles: List[bool] = field(default_factory=list)
    adjacency: Tuple[Tuple[int, ...], ...] = ()

    @property
    def size(self) -> int:
        return self.width * self.height

    # -------------------- identities --------------------

    def in_bounds(self, c: Cell) -> bool:
        return cell_in_grid(c, self.width, self.height)

    def index_of(self, c: Cell) -> int:
        """Arena index of cell c. Raises OutOfBounds."""
        if not self.in_bounds(c):
            raise OutOfBounds(c, self.width, self.height)
        x, y = c
        return y * self.width + x

    def cell_of(self, i: int) -> Cell:
        return (i % self.width, i // self.width)

    # -------------------- topology --------------------

    def neighbors(self, c: Cell) -> List[Cell]:
        return [self.cell_of(j) for j in self.adjacency[self.index_of(c)]]

    def distance(self, a: Cell, b: Cell) -> float:
        (ax, ay), (bx, by) = a, b
        return hypot(ax - bx, ay - by)

    def distance_between(self, i: int, j: int) -> float:
        """Same as distance(), on arena indices."""
        w = self.width
        return hypot(i % w - j % w, i // w - j // w)

    # -------------------- obstacles --------------------

    def is_obstacle(self, c: Cell) -> bool:
        return self.obstacles[self.index_of(c)]

    def toggle_obstacle(self, c: Cell) -> bool:
        """Flip the obstacle flag of c and return the new value."""
        i = self.index_of(c)
        self.obstacles[i] = not self.obstacles[i]
        logger.debug("toggled %s -> obstacle=%s", c, self.obstacles[i])
        return self.obstacles[i]

    def set_obstacle(self, c: Cell, value: bool = True) -> None:
        self.obstacles[self.index_of(c)] = bool(value)

    def clear_obstacles(self) -> None:
        for i in range(self.size):
            self.obstacles[i] = False

    def obstacle_cells(self) -> List[Cell]:
        return [self.cell_of(i) for i, blocked in enumerate(self.obstacles) if blocked]

    def cells(self) -> Iterable[Cell]:
        for i in range(self.size):
            yield self.cell_of(i)


def _build_adjacency(width: int, height: int) -> Tuple[Tuple[int, ...], ...]:
    out = []
    for y in range(height):
        for x in range(width):
            nbrs = []
            if x > 0:
                nbrs.append(y * width + (x - 1))
            if y > 0:
                nbrs.append((y - 1) * width + x)
            if x < width - 1:
                nbrs.append(y * width + (x + 1))
            if y < height - 1:
                nbrs.append((y + 1) * width + x)
            out.append(tuple(nbrs))
    return tuple(out)


def create_grid(width: int, height: int) -> GridGraph:
    """Build a W x H grid with no obstacles. Raises InvalidDimension."""
    if width <= 0 or height <= 0:
        raise InvalidDimension(width, height)
    return GridGraph(width=width, height=height,
                     obstacles=[False] * (width * height),
                     adjacency=_build_adjacency(width, height))


def toggle_obstacle(graph: GridGraph, c: Cell) -> bool:
    return graph.toggle_obstacle(c)
