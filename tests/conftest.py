"""Test configuration and fixtures for pathsim."""
import pytest

from pathsim.core.grid import create_grid
from pathsim.core.types import Algorithm

ALL_ALGORITHMS = list(Algorithm)
SHIPPED_ALGORITHMS = [Algorithm.ASTAR, Algorithm.DIJKSTRA, Algorithm.BFS]


@pytest.fixture
def grid3():
    """3x3 grid, no obstacles."""
    return create_grid(3, 3)


@pytest.fixture
def walled_grid3():
    """3x3 grid with the whole middle column blocked."""
    graph = create_grid(3, 3)
    for y in range(3):
        graph.toggle_obstacle((1, y))
    return graph


@pytest.fixture
def open_grid():
    """7x5 grid, no obstacles."""
    return create_grid(7, 5)


@pytest.fixture(params=ALL_ALGORITHMS, ids=lambda a: a.value)
def algorithm(request):
    return request.param
