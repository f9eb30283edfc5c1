"""Tests for the A* search kernel."""

import heapq
from dataclasses import dataclass
from typing import ClassVar

import pytest
from omegaconf import OmegaConf

from astar_kernel.core.grid import OccupancyGrid
from astar_kernel.core.points import GridPoint
from astar_kernel.search.astar import (
    AStarSearcher, SearchNode, SearchResult, SearchConfig, SearchStatistics,
    astar, reconstruct_path, create_astar_searcher
)


@dataclass(frozen=True, order=True)
class LinePoint:
    """Point on an infinite one-way line; nothing behind the start is reachable."""

    n: int

    MOVE_COST: ClassVar[int] = 1

    def neighbors(self):
        return [LinePoint(self.n + 1)]

    def heuristic(self, goal):
        return 0


@dataclass(frozen=True, order=True)
class BrokenPoint:
    n: int

    MOVE_COST: ClassVar[int] = 1

    def neighbors(self):
        raise RuntimeError("neighbor lookup failed")

    def heuristic(self, goal):
        return 1


def path_cost(path):
    return sum(type(a).MOVE_COST for a, _ in zip(path, path[1:]))


class TestSearchNode:
    """Test SearchNode ordering and identity."""

    def test_node_creation(self):
        node = SearchNode(point=GridPoint(1, 2), predecessor=GridPoint(1, 1), cost=3, f_score=7)

        assert node.point == GridPoint(1, 2)
        assert node.predecessor == GridPoint(1, 1)
        assert node.cost == 3
        assert node.f_score == 7
        assert node.heuristic == 4

    def test_lower_f_score_pops_first(self):
        low = SearchNode(point=GridPoint(0, 0), predecessor=None, cost=0, f_score=3)
        high = SearchNode(point=GridPoint(9, 9), predecessor=None, cost=0, f_score=4)

        assert low < high
        assert not high < low

    def test_tie_prefers_greater_point(self):
        small = SearchNode(point=GridPoint(0, 5), predecessor=None, cost=0, f_score=5)
        large = SearchNode(point=GridPoint(1, 0), predecessor=None, cost=2, f_score=5)

        # (1,0) > (0,5) under the point's natural ordering
        assert large < small
        assert not small < large

    def test_heap_order(self):
        queue = []
        for point, f_score in [(GridPoint(0, 0), 3), (GridPoint(0, 0), 2), (GridPoint(2, 2), 3)]:
            heapq.heappush(queue, SearchNode(point=point, predecessor=None, cost=0, f_score=f_score))

        popped = [heapq.heappop(queue) for _ in range(3)]
        assert [(n.point, n.f_score) for n in popped] == [
            (GridPoint(0, 0), 2),
            (GridPoint(2, 2), 3),
            (GridPoint(0, 0), 3),
        ]

    def test_node_equality(self):
        a = SearchNode(point=GridPoint(1, 1), predecessor=None, cost=0, f_score=2)
        b = SearchNode(point=GridPoint(1, 1), predecessor=GridPoint(0, 1), cost=1, f_score=2)
        c = SearchNode(point=GridPoint(1, 1), predecessor=None, cost=0, f_score=3)

        assert a == b
        assert hash(a) == hash(b)
        assert a != c


class TestSearchConfig:
    """Test SearchConfig functionality."""

    def test_defaults_are_unbounded(self):
        config = SearchConfig()

        assert config.max_nodes_expanded is None
        assert config.max_computation_time is None
        assert config.reopen_closed is False
        assert config.consume_closed_on_reconstruct is False
        assert config.statistics_tracking is True

    def test_rejects_negative_limits(self):
        with pytest.raises(ValueError):
            SearchConfig(max_nodes_expanded=-1)
        with pytest.raises(ValueError):
            SearchConfig(max_computation_time=0)

    def test_from_config(self):
        cfg = OmegaConf.create({
            'search': {
                'astar': {
                    'max_nodes_expanded': 250,
                    'max_computation_time': 1.5,
                    'reopen_closed': True,
                }
            }
        })

        config = SearchConfig.from_config(cfg)

        assert config.max_nodes_expanded == 250
        assert config.max_computation_time == 1.5
        assert config.reopen_closed is True
        assert config.consume_closed_on_reconstruct is False

    def test_from_config_without_search_section(self):
        assert SearchConfig.from_config(None) == SearchConfig()
        assert SearchConfig.from_config(OmegaConf.create({'logging': {'level': 'INFO'}})) == SearchConfig()


class TestSearchStatistics:

    def test_branching_factor_and_efficiency(self):
        stats = SearchStatistics()
        stats.nodes_expanded = 1
        stats.update_branching_factor(4)
        stats.nodes_expanded = 2
        stats.update_branching_factor(2)
        stats.nodes_generated = 8
        stats.compute_efficiency()

        assert stats.average_branching_factor == 3.0
        assert stats.search_efficiency == 0.25
        assert stats.to_dict()['nodes_expanded'] == 2


class TestReconstructPath:
    """Test predecessor-chain walking."""

    @pytest.fixture
    def closed(self):
        a, b, c = GridPoint(0, 0), GridPoint(0, 1), GridPoint(0, 2)
        return {
            a: SearchNode(point=a, predecessor=None, cost=0, f_score=2),
            b: SearchNode(point=b, predecessor=a, cost=1, f_score=2),
            c: SearchNode(point=c, predecessor=b, cost=2, f_score=2),
        }

    def test_walks_back_to_start(self, closed):
        path = reconstruct_path(closed, GridPoint(0, 2))

        assert path == [GridPoint(0, 0), GridPoint(0, 1), GridPoint(0, 2)]

    def test_is_non_destructive_by_default(self, closed):
        first = reconstruct_path(closed, GridPoint(0, 2))
        second = reconstruct_path(closed, GridPoint(0, 2))

        assert first == second
        assert len(closed) == 3

    def test_consume_pops_visited_entries(self, closed):
        closed[GridPoint(5, 5)] = SearchNode(point=GridPoint(5, 5), predecessor=None, cost=0, f_score=0)

        path = reconstruct_path(closed, GridPoint(0, 1), consume=True)

        assert path == [GridPoint(0, 0), GridPoint(0, 1)]
        assert set(closed) == {GridPoint(0, 2), GridPoint(5, 5)}

    def test_unclosed_goal_gives_empty_path(self, closed):
        assert reconstruct_path(closed, GridPoint(7, 7)) == []


class TestAStarScenarios:
    """End-to-end searches on the unbounded grid."""

    def test_small_offset(self):
        start, goal = GridPoint(0, 0), GridPoint(3, 2)

        path = astar(start, goal)

        assert len(path) == 6
        assert path[0] == start
        assert path[-1] == goal

    def test_start_equals_goal(self):
        searcher = AStarSearcher()

        result = searcher.search(GridPoint(5, 5), GridPoint(5, 5))

        assert result.success
        assert result.path == [GridPoint(5, 5)]
        assert result.cost == 0
        assert result.nodes_expanded == 0
        assert len(result.closed) == 1
        assert result.closed[GridPoint(5, 5)].predecessor is None

    def test_corner_to_corner(self):
        result = AStarSearcher().search(GridPoint(0, 0), GridPoint(64, 64))

        assert result.success
        assert len(result.path) == 129
        assert result.cost == 128
        # Recorded cost grows by exactly one move per step
        assert [result.closed[p].cost for p in result.path] == list(range(129))

    def test_consecutive_points_are_neighbors(self):
        path = astar(GridPoint(-4, 7), GridPoint(6, -3))

        for current, following in zip(path, path[1:]):
            assert following in current.neighbors()
            assert current in following.neighbors()

    def test_cost_matches_path(self):
        result = AStarSearcher().search(GridPoint(2, -1), GridPoint(-5, 4))

        assert result.cost == path_cost(result.path)
        assert result.cost == GridPoint(2, -1).heuristic(GridPoint(-5, 4))

    def test_deterministic(self):
        first = astar(GridPoint(0, 0), GridPoint(10, 7))
        second = astar(GridPoint(0, 0), GridPoint(10, 7))

        assert first == second

    def test_goal_is_never_expanded(self):
        result = AStarSearcher().search(GridPoint(0, 0), GridPoint(0, 1))

        # Only the start is expanded; the goal is closed on pop
        assert result.nodes_expanded == 1
        assert result.termination_reason == "goal_reached"

    def test_result_to_dict(self):
        result = AStarSearcher().search(GridPoint(0, 0), GridPoint(1, 0))
        data = result.to_dict()

        assert data['success'] is True
        assert data['path'] == ['(0,0)', '(1,0)']
        assert data['path_length'] == 2
        assert data['cost'] == 1
        assert data['termination_reason'] == "goal_reached"
        assert 'nodes_pruned' in data['statistics']


class TestAStarGraphs:
    """Searches over finite graphs with hand-picked heuristics."""

    def test_unreachable_goal_returns_empty(self, graph_point_factory):
        Point = graph_point_factory([('s', 'a'), ('a', 'b'), ('b', 's')])

        result = AStarSearcher().search(Point('s'), Point('z'))

        assert result.path == []
        assert not result.success
        assert result.cost is None
        assert result.termination_reason == "search_exhausted"
        assert set(result.closed) == {Point('s'), Point('a'), Point('b')}

    def test_equal_estimate_duplicate_is_pruned(self, graph_point_factory):
        # The table stores f = g + h. With h depending only on (point, goal),
        # a second copy with the same f also has the same g and is dropped.
        Point = graph_point_factory([('s', 'a'), ('s', 'b'), ('a', 't'), ('b', 't')])

        result = AStarSearcher().search(Point('s'), Point('t'))

        # 'b' > 'a', so b is expanded first and claims t
        assert result.path == [Point('s'), Point('b'), Point('t')]
        assert result.statistics['nodes_pruned'] == 1

    def test_stale_duplicate_is_skipped(self, graph_point_factory):
        Point = graph_point_factory(
            [('s', 'c'), ('s', 'e'), ('c', 'd'), ('d', 'a'), ('e', 'a'),
             ('a', 'u'), ('u', 'v'), ('v', 't')],
            heuristics={'e': 2, 'a': 1},
        )

        result = AStarSearcher().search(Point('s'), Point('t'))

        # a is queued via d (g=3) and again via e (g=2); the g=3 copy pops later
        assert result.path == [Point(n) for n in 'seauvt']
        assert result.cost == 5
        assert result.statistics['duplicate_states'] == 1
        assert result.closed[Point('a')].predecessor == Point('e')
        assert result.closed[Point('a')].cost == 2

    @pytest.fixture
    def inconsistent_graph(self, graph_point_factory):
        return graph_point_factory(
            [('s', 'c'), ('c', 'd'), ('d', 'a'), ('s', 'e'), ('e', 'a'),
             ('a', 'u'), ('u', 't')],
            heuristics={'e': 10, 'u': 20},
        )

    def test_closed_points_stay_closed_by_default(self, inconsistent_graph):
        Point = inconsistent_graph

        result = AStarSearcher().search(Point('s'), Point('t'))

        assert result.path == [Point(n) for n in 'scdaut']
        assert result.cost == 5
        assert result.statistics['nodes_reopened'] == 0

    def test_reopen_closed_recovers_cheaper_path(self, inconsistent_graph):
        Point = inconsistent_graph
        searcher = AStarSearcher(SearchConfig(reopen_closed=True))

        result = searcher.search(Point('s'), Point('t'))

        assert result.path == [Point(n) for n in 'seaut']
        assert result.cost == 4
        assert result.statistics['nodes_reopened'] == 1

    def test_move_cost_is_applied_per_edge(self, graph_point_factory):
        Point = graph_point_factory([('s', 'a'), ('a', 'b')], move_cost=3)

        result = AStarSearcher().search(Point('s'), Point('b'))

        assert result.cost == 6
        assert result.cost == path_cost(result.path)

    def test_capability_errors_propagate(self):
        with pytest.raises(RuntimeError, match="neighbor lookup failed"):
            astar(BrokenPoint(0), BrokenPoint(1))


class TestAStarOccupancyGrid:
    """Searches over walled grids."""

    def test_path_avoids_walls(self):
        grid = OccupancyGrid.from_text("""
            ....
            .##.
            ....
        """)

        result = AStarSearcher().search(grid.cell(0, 0), grid.cell(3, 2))

        assert len(result.path) == 6
        assert all(not grid.is_blocked(p.x, p.y) for p in result.path)

    def test_walled_in_goal_is_unreachable(self):
        grid = OccupancyGrid.from_text("""
            .....
            ..#..
            .#.#.
            ..#..
        """)
        goal = grid.cell(2, 2)
        assert goal.neighbors() == []

        assert astar(grid.cell(0, 0), goal) == []

    def test_disconnected_regions(self):
        grid = OccupancyGrid.from_text("""
            .#.
            ##.
            ...
        """)

        result = AStarSearcher().search(grid.cell(0, 0), grid.cell(2, 2))

        assert result.path == []
        assert result.termination_reason == "search_exhausted"
        assert result.nodes_expanded == 1


class TestSearchLimits:
    """Optional expansion ceiling and deadline."""

    def test_node_limit(self):
        searcher = AStarSearcher(SearchConfig(max_nodes_expanded=100))

        result = searcher.search(LinePoint(0), LinePoint(-1))

        assert not result.success
        assert result.path == []
        assert result.nodes_expanded == 100
        assert result.termination_reason == "max_nodes_reached"

    def test_node_limit_does_not_block_reaching_goal(self):
        searcher = AStarSearcher(SearchConfig(max_nodes_expanded=0))

        assert searcher.search(GridPoint(1, 1), GridPoint(1, 1)).path == [GridPoint(1, 1)]

    def test_timeout(self):
        searcher = AStarSearcher(SearchConfig(max_computation_time=0.05))

        result = searcher.search(LinePoint(0), LinePoint(-1))

        assert not result.success
        assert result.termination_reason == "timeout"
        assert result.computation_time >= 0.05

    def test_consume_closed_on_reconstruct(self):
        searcher = AStarSearcher(SearchConfig(consume_closed_on_reconstruct=True))

        result = searcher.search(GridPoint(0, 0), GridPoint(3, 2))

        assert len(result.path) == 6
        assert result.cost == 5
        assert all(p not in result.closed for p in result.path)


class TestCreateAStarSearcher:

    def test_from_explicit_config(self):
        cfg = OmegaConf.create({'search': {'astar': {'max_nodes_expanded': 10}}})

        searcher = create_astar_searcher(cfg)

        assert isinstance(searcher, AStarSearcher)
        assert searcher.config.max_nodes_expanded == 10

    def test_overrides_take_precedence(self):
        cfg = OmegaConf.create({'search': {'astar': {'max_nodes_expanded': 10}}})

        searcher = create_astar_searcher(cfg, max_nodes_expanded=20, reopen_closed=True)

        assert searcher.config.max_nodes_expanded == 20
        assert searcher.config.reopen_closed is True

    def test_defaults_without_global_config(self):
        searcher = create_astar_searcher()

        assert searcher.config == SearchConfig()

    def test_unknown_override_rejected(self):
        with pytest.raises(TypeError):
            create_astar_searcher(OmegaConf.create({}), beam_width=4)

    def test_search_result_defaults(self):
        result = SearchResult(success=False)

        assert result.path == []
        assert result.closed == {}
