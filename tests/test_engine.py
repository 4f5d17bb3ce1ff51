"""
Traversal engine tests.

Covers the concrete 3x3 scenarios, the cross-algorithm properties (A* vs
Dijkstra cost, BFS hop-optimality, idempotence), the work bound and the
soft-failure edge cases.
"""
import itertools

import pytest

from pathsim.core.engine import run_search, traverse
from pathsim.core.errors import OutOfBounds
from pathsim.core.grid import create_grid
from pathsim.core.maps import MAP_DIR, load_map
from pathsim.core.path import path_cost
from pathsim.core.state import SearchState
from pathsim.core.types import Algorithm

from conftest import ALL_ALGORITHMS, SHIPPED_ALGORITHMS


def _assert_valid_path(graph, path, start, goal):
    assert path[0] == start
    assert path[-1] == goal
    for a, b in zip(path, path[1:]):
        assert b in graph.neighbors(a)
    for c in path[1:-1]:
        assert not graph.is_obstacle(c)
    assert len(set(path)) == len(path)


class TestConcreteScenarios:
    """Fixed 3x3 scenarios"""

    def test_bfs_three_by_three(self, grid3):
        result = run_search(grid3, (0, 0), (2, 2), Algorithm.BFS)
        assert result.reachable
        assert result.edge_count == 4
        assert result.path == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]

    def test_astar_three_by_three_cost(self, grid3):
        result = run_search(grid3, (0, 0), (2, 2), Algorithm.ASTAR)
        assert result.reachable
        _assert_valid_path(grid3, result.path, (0, 0), (2, 2))
        assert path_cost(grid3, result.path) == pytest.approx(4.0)
        assert result.metrics["total_cost"] == pytest.approx(4.0)

    @pytest.mark.parametrize("algo", ALL_ALGORITHMS, ids=lambda a: a.value)
    def test_blocked_middle_column_unreachable(self, walled_grid3, algo):
        result = run_search(walled_grid3, (0, 1), (2, 1), algo)
        assert result.reachable is False
        assert result.path == []
        assert result.metrics["total_cost"] is None
        assert result.metrics["path_len"] == 0

    def test_start_equals_goal(self, algorithm):
        graph = create_grid(4, 4)
        result = run_search(graph, (2, 1), (2, 1), algorithm)
        assert result.reachable
        assert result.path == [(2, 1)]
        assert result.metrics["popped"] == 0
        assert result.visited_cells() == []


class TestProperties:
    """Cross-algorithm properties"""

    def test_all_algorithms_reach_on_open_grid(self, open_grid, algorithm):
        cells = list(open_grid.cells())
        for start, goal in itertools.product(cells[::3], cells[::4]):
            result = run_search(open_grid, start, goal, algorithm)
            assert result.reachable, (start, goal)
            _assert_valid_path(open_grid, result.path, start, goal)

    def test_open_grid_paths_are_manhattan(self, open_grid):
        for start, goal in [((0, 0), (6, 4)), ((3, 2), (0, 0)), ((6, 0), (1, 3))]:
            manhattan = abs(start[0] - goal[0]) + abs(start[1] - goal[1])
            for algo in ALL_ALGORITHMS:
                result = run_search(open_grid, start, goal, algo)
                assert result.edge_count == manhattan, algo

    @pytest.mark.parametrize("map_name", ["02_wall_gap", "03_maze"])
    def test_astar_and_dijkstra_agree_on_cost(self, map_name):
        grid_map = load_map(MAP_DIR / f"{map_name}.json")
        costs = {}
        for algo in (Algorithm.ASTAR, Algorithm.DIJKSTRA, Algorithm.UNIFORM_COST):
            result = run_search(grid_map.graph, grid_map.start, grid_map.goal, algo)
            assert result.reachable
            _assert_valid_path(grid_map.graph, result.path, grid_map.start, grid_map.goal)
            costs[algo] = path_cost(grid_map.graph, result.path)
        assert costs[Algorithm.ASTAR] == pytest.approx(costs[Algorithm.DIJKSTRA])
        assert costs[Algorithm.ASTAR] == pytest.approx(costs[Algorithm.UNIFORM_COST])

    @pytest.mark.parametrize("map_name", ["01_open_field", "02_wall_gap", "03_maze"])
    def test_bfs_hop_count_is_minimal(self, map_name):
        grid_map = load_map(MAP_DIR / f"{map_name}.json")
        args = (grid_map.graph, grid_map.start, grid_map.goal)
        bfs = run_search(*args, Algorithm.BFS)
        assert bfs.reachable
        for algo in ALL_ALGORITHMS:
            assert bfs.edge_count <= run_search(*args, algo).edge_count

    def test_idempotent(self, algorithm):
        grid_map = load_map(MAP_DIR / "03_maze.json")
        args = (grid_map.graph, grid_map.start, grid_map.goal, algorithm)
        first = run_search(*args)
        second = run_search(*args)
        assert first.reachable == second.reachable
        assert first.path == second.path
        assert first.annotations == second.annotations
        assert first.metrics == second.metrics

    def test_work_bound(self, algorithm):
        grid_map = load_map(MAP_DIR / "03_maze.json")
        graph = grid_map.graph
        result = run_search(graph, grid_map.start, grid_map.goal, algorithm)
        m = result.metrics
        assert m["popped"] <= graph.size
        assert m["pushed"] <= 1 + 4 * m["popped"]
        assert len(result.path) <= graph.size

    def test_predecessor_tree_is_acyclic(self, algorithm):
        grid_map = load_map(MAP_DIR / "02_wall_gap.json")
        graph = grid_map.graph
        result = run_search(graph, grid_map.start, grid_map.goal, algorithm)
        s = graph.index_of(grid_map.start)
        for i, a in enumerate(result.annotations):
            if a.predecessor is None:
                continue
            cur, steps = i, 0
            while cur != s:
                cur = result.annotations[cur].predecessor
                steps += 1
                assert cur is not None
                assert steps <= graph.size


class TestTraversalRules:
    """Engine details: goal handling, obstacles, cost bookkeeping"""

    def test_goal_never_expanded(self, grid3, algorithm):
        result = run_search(grid3, (0, 0), (1, 1), algorithm)
        assert result.reachable
        assert result.annotation((1, 1)).visited is False

    @pytest.mark.parametrize("algo", [Algorithm.ASTAR, Algorithm.DIJKSTRA], ids=lambda a: a.value)
    def test_cost_aware_variants_explore_everything_else(self, algo):
        graph = create_grid(5, 5)
        result = run_search(graph, (0, 0), (1, 0), algo)
        assert result.metrics["popped"] == graph.size - 1
        assert len(result.visited_cells()) == graph.size - 1

    def test_bfs_stops_when_goal_discovered(self):
        graph = create_grid(5, 5)
        result = run_search(graph, (0, 0), (1, 0), Algorithm.BFS)
        assert result.path == [(0, 0), (1, 0)]
        assert result.metrics["popped"] == 1
        assert result.visited_cells() == [(0, 0)]

    def test_bfs_does_not_relax_costs(self, grid3):
        result = run_search(grid3, (0, 0), (2, 2), Algorithm.BFS)
        assert result.annotation((0, 0)).local_cost == 0.0
        assert result.annotation((1, 0)).local_cost == float("inf")

    def test_astar_seed_estimate(self, grid3):
        result = run_search(grid3, (0, 0), (2, 2), Algorithm.ASTAR)
        start = result.annotation((0, 0))
        assert start.local_cost == 0.0
        assert start.global_estimate == pytest.approx(grid3.distance((0, 0), (2, 2)))
        assert start.predecessor is None

    def test_dijkstra_estimate_equals_cost(self, grid3):
        result = run_search(grid3, (0, 0), (2, 2), Algorithm.DIJKSTRA)
        for a in result.annotations:
            assert a.global_estimate == a.local_cost

    def test_astar_estimate_adds_heuristic(self, grid3):
        result = run_search(grid3, (0, 0), (2, 2), Algorithm.ASTAR)
        a = result.annotation((1, 0))
        assert a.local_cost == 1.0
        assert a.global_estimate == pytest.approx(1.0 + grid3.distance((1, 0), (2, 2)))

    def test_obstacles_never_visited_or_linked(self, walled_grid3, algorithm):
        result = run_search(walled_grid3, (0, 0), (0, 2), algorithm)
        assert result.reachable
        for y in range(3):
            a = result.annotation((1, y))
            assert not a.visited
            assert a.predecessor is None

    def test_obstacle_goal_is_unreachable(self, grid3, algorithm):
        grid3.toggle_obstacle((2, 2))
        result = run_search(grid3, (0, 0), (2, 2), algorithm)
        assert result.reachable is False

    def test_obstacle_start_still_expands(self, grid3, algorithm):
        grid3.toggle_obstacle((0, 0))
        result = run_search(grid3, (0, 0), (2, 2), algorithm)
        assert result.reachable
        assert result.path[0] == (0, 0)

    def test_detour_around_wall(self):
        grid_map = load_map(MAP_DIR / "02_wall_gap.json")
        result = run_search(grid_map.graph, grid_map.start, grid_map.goal, Algorithm.ASTAR)
        assert (5, 8) in result.path
        # 1,5 -> 5,8 -> 8,5: 4 + 3 + 3 + 3
        assert result.edge_count == 13


class TestRunSearchContract:
    """Arguments, state reuse and errors"""

    @pytest.mark.parametrize("start,goal", [((3, 0), (0, 0)), ((0, 0), (0, -1))])
    def test_out_of_bounds_endpoints(self, grid3, start, goal):
        with pytest.raises(OutOfBounds):
            run_search(grid3, start, goal, Algorithm.BFS)

    def test_out_of_bounds_leaves_state_alone(self, grid3):
        state = SearchState(grid3.size)
        run_search(grid3, (0, 0), (2, 2), Algorithm.BFS, state=state)
        before = state.snapshot()
        with pytest.raises(OutOfBounds):
            run_search(grid3, (0, 0), (9, 9), Algorithm.BFS, state=state)
        assert state.annotations == before

    def test_algorithm_by_name(self, grid3):
        assert run_search(grid3, (0, 0), (2, 2), "bfs").metrics["algo"] == "BFS"
        assert run_search(grid3, (0, 0), (2, 2), "A*").metrics["algo"] == "A*"
        with pytest.raises(ValueError):
            run_search(grid3, (0, 0), (2, 2), "greedy")

    def test_reused_state_is_reset_and_snapshots_independent(self, grid3):
        state = SearchState(grid3.size)
        first = run_search(grid3, (0, 0), (2, 2), Algorithm.DIJKSTRA, state=state)
        second = run_search(grid3, (2, 2), (0, 0), Algorithm.BFS, state=state)
        assert first.annotation((0, 0)).predecessor is None
        assert first.annotation((0, 0)).local_cost == 0.0
        assert second.annotation((2, 2)).local_cost == 0.0
        assert first.path[0] == (0, 0)
        assert second.path[0] == (2, 2)

    def test_state_size_mismatch(self, grid3):
        with pytest.raises(ValueError):
            run_search(grid3, (0, 0), (2, 2), state=SearchState(4))


class TestTraverse:
    """Step-wise generator"""

    def test_one_step_per_expansion(self, grid3):
        state = SearchState(grid3.size)
        steps = list(traverse(grid3, state, (0, 0), (2, 2), Algorithm.DIJKSTRA))
        assert steps[-1].status == "finished"
        running = steps[:-1]
        assert all(s.status == "running" for s in running)
        assert len(running) == steps[-1].metrics["popped"] == 8
        assert running[0].current == (0, 0)
        assert running[0].opened == [(1, 0), (0, 1)]
        assert state.visited_count() == 8


class TestResultReadBack:
    """Per-cell annotation access on a finished search"""

    @pytest.mark.parametrize("cell", [(3, 0), (-1, 0), (0, 3), (0, -1), (1.0, 0), (0, 0, 0), None])
    def test_annotation_rejects_cells_outside_grid(self, grid3, cell):
        result = run_search(grid3, (0, 0), (2, 2), Algorithm.BFS)
        with pytest.raises(OutOfBounds):
            result.annotation(cell)

    def test_annotation_corners(self, grid3):
        result = run_search(grid3, (0, 0), (2, 2), Algorithm.DIJKSTRA)
        assert result.height == 3
        assert result.annotation((0, 0)).local_cost == 0.0
        assert result.annotation((2, 2)).local_cost == 4.0
