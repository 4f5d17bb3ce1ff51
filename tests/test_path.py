"""Tests for path reconstruction from predecessor links."""
import pytest

from pathsim.core.errors import InternalInvariantViolation
from pathsim.core.grid import create_grid
from pathsim.core.path import path_cost, reconstruct
from pathsim.core.types import SearchAnnotation


def _annotations(graph, links):
    """links: {cell: predecessor cell}"""
    table = [SearchAnnotation() for _ in range(graph.size)]
    for cell, pred in links.items():
        table[graph.index_of(cell)].predecessor = graph.index_of(pred)
    return table


class TestReconstruct:
    """Walking predecessor links back to start"""

    def test_simple_chain(self):
        graph = create_grid(3, 2)
        table = _annotations(graph, {(1, 0): (0, 0), (1, 1): (1, 0), (2, 1): (1, 1)})
        result = reconstruct(graph, (0, 0), (2, 1), table)
        assert result.reachable
        assert result.path == [(0, 0), (1, 0), (1, 1), (2, 1)]
        assert result.metrics == {"path_len": 4, "total_cost": 3.0}

    def test_no_predecessor_is_unreachable(self):
        graph = create_grid(3, 2)
        result = reconstruct(graph, (0, 0), (2, 1), _annotations(graph, {}))
        assert result.reachable is False
        assert result.path == []

    def test_goal_is_start(self):
        graph = create_grid(2, 2)
        result = reconstruct(graph, (1, 1), (1, 1), _annotations(graph, {}))
        assert result.reachable
        assert result.path == [(1, 1)]
        assert result.metrics["total_cost"] == 0.0

    def test_path_spanning_whole_grid(self):
        graph = create_grid(3, 1)
        table = _annotations(graph, {(1, 0): (0, 0), (2, 0): (1, 0)})
        result = reconstruct(graph, (0, 0), (2, 0), table)
        assert result.path == [(0, 0), (1, 0), (2, 0)]
        assert len(result.path) == graph.size

    def test_cycle_raises(self):
        graph = create_grid(3, 1)
        table = _annotations(graph, {(2, 0): (1, 0), (1, 0): (2, 0)})
        with pytest.raises(InternalInvariantViolation) as exc:
            reconstruct(graph, (0, 0), (2, 0), table)
        assert exc.value.error_code == "INVARIANT"
        assert isinstance(exc.value, RuntimeError)

    def test_chain_not_ending_at_start_raises(self):
        graph = create_grid(3, 3)
        table = _annotations(graph, {(2, 2): (2, 1), (2, 1): (2, 0)})
        with pytest.raises(InternalInvariantViolation):
            reconstruct(graph, (0, 0), (2, 2), table)


class TestPathCost:
    """Sum of Euclidean edge weights"""

    def test_cost(self):
        graph = create_grid(4, 4)
        assert path_cost(graph, [(0, 0), (1, 0), (1, 1)]) == 2.0
        assert path_cost(graph, [(0, 0)]) == 0.0
        assert path_cost(graph, []) == 0.0
