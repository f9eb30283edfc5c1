"""A* search kernel.

This module implements best-first shortest-path search over any point type
that provides the :class:`~astar_kernel.core.points.SearchablePoint`
capability. Edges are discovered lazily through ``neighbors()`` and every
edge costs the point type's ``MOVE_COST``.

All working state (frontier, best-score table and closed map) is created per
search call, so independent searches never share mutable state.
"""

import heapq
import logging
import math
import time
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Hashable, List, Optional

from omegaconf import DictConfig, OmegaConf

from astar_kernel.config import get_config
from astar_kernel.core.points import SearchablePoint

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class SearchNode:
    """Frontier entry pairing a point with its cost bookkeeping.

    The predecessor is stored as a point value rather than a reference to
    another node; the chain is walked through closed-map lookups.
    """
    point: Any
    predecessor: Optional[Any]
    cost: int  # g(n) - actual cost from start
    f_score: int  # g(n) + h(n)

    @property
    def heuristic(self) -> int:
        """Heuristic part h(n) of the total estimate."""
        return self.f_score - self.cost

    def __lt__(self, other: 'SearchNode') -> bool:
        """Comparison for priority queue (lower f_score has higher priority)."""
        if self.f_score != other.f_score:
            return self.f_score < other.f_score
        # Tie-breaking: the greater point pops first
        return other.point < self.point

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SearchNode):
            return NotImplemented
        return self.point == other.point and self.f_score == other.f_score

    def __hash__(self) -> int:
        return hash((self.point, self.f_score))


@dataclass
class SearchConfig:
    """Configuration for A* search.

    Both limits default to ``None`` (unbounded). An unbounded search for an
    unreachable goal in an infinite graph never terminates.
    """
    max_nodes_expanded: Optional[int] = None
    max_computation_time: Optional[float] = None  # seconds
    reopen_closed: bool = False  # needed only for inconsistent heuristics
    consume_closed_on_reconstruct: bool = False
    statistics_tracking: bool = True

    def __post_init__(self):
        if self.max_nodes_expanded is not None and self.max_nodes_expanded < 0:
            raise ValueError(
                f"max_nodes_expanded must be non-negative, got {self.max_nodes_expanded}"
            )
        if self.max_computation_time is not None and self.max_computation_time <= 0:
            raise ValueError(
                f"max_computation_time must be positive, got {self.max_computation_time}"
            )

    @classmethod
    def from_config(cls, cfg: Optional[DictConfig]) -> 'SearchConfig':
        """Build from the ``search.astar`` group of a Hydra configuration.

        Args:
            cfg: Loaded configuration, or None for defaults

        Returns:
            SearchConfig with values taken from the config where present
        """
        if cfg is None:
            return cls()

        astar_cfg = OmegaConf.select(cfg, 'search.astar', default=None)
        if astar_cfg is None:
            return cls()

        max_nodes = astar_cfg.get('max_nodes_expanded', None)
        max_time = astar_cfg.get('max_computation_time', None)
        return cls(
            max_nodes_expanded=int(max_nodes) if max_nodes is not None else None,
            max_computation_time=float(max_time) if max_time is not None else None,
            reopen_closed=bool(astar_cfg.get('reopen_closed', False)),
            consume_closed_on_reconstruct=bool(
                astar_cfg.get('consume_closed_on_reconstruct', False)
            ),
            statistics_tracking=bool(astar_cfg.get('statistics_tracking', True)),
        )


@dataclass
class SearchStatistics:
    """Counters collected during a single search."""
    nodes_expanded: int = 0
    nodes_generated: int = 0
    nodes_pruned: int = 0
    duplicate_states: int = 0
    nodes_reopened: int = 0
    heuristic_computations: int = 0
    max_frontier_size: int = 0
    average_branching_factor: float = 0.0
    search_efficiency: float = 0.0  # nodes_expanded / nodes_generated

    def update_branching_factor(self, total_successors: int) -> None:
        """Update average branching factor."""
        if self.nodes_expanded > 0:
            self.average_branching_factor = (
                (self.average_branching_factor * (self.nodes_expanded - 1) + total_successors)
                / self.nodes_expanded
            )
        else:
            self.average_branching_factor = total_successors

    def compute_efficiency(self) -> None:
        if self.nodes_generated > 0:
            self.search_efficiency = self.nodes_expanded / self.nodes_generated

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary."""
        return {
            'nodes_expanded': self.nodes_expanded,
            'nodes_generated': self.nodes_generated,
            'nodes_pruned': self.nodes_pruned,
            'duplicate_states': self.duplicate_states,
            'nodes_reopened': self.nodes_reopened,
            'heuristic_computations': self.heuristic_computations,
            'max_frontier_size': self.max_frontier_size,
            'average_branching_factor': self.average_branching_factor,
            'search_efficiency': self.search_efficiency
        }


@dataclass
class SearchResult:
    """Result from A* search."""
    success: bool
    path: List[Any] = field(default_factory=list)
    cost: Optional[int] = None
    nodes_expanded: int = 0
    nodes_generated: int = 0
    computation_time: float = 0.0
    termination_reason: str = "unknown"
    statistics: Optional[Dict[str, Any]] = None
    # Closed map left behind by the search, kept for inspection
    closed: Dict[Any, SearchNode] = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'path': [str(point) for point in self.path],
            'path_length': len(self.path),
            'cost': self.cost,
            'nodes_expanded': self.nodes_expanded,
            'nodes_generated': self.nodes_generated,
            'computation_time': self.computation_time,
            'termination_reason': self.termination_reason,
            'statistics': self.statistics
        }


def reconstruct_path(closed: Dict[Hashable, SearchNode], goal: Any,
                     consume: bool = False) -> List[Any]:
    """Walk predecessor links backward from ``goal``.

    Args:
        closed: Closed map produced by a search
        goal: Point to walk back from
        consume: Pop each visited entry from ``closed`` instead of reading it

    Returns:
        Points from start to goal inclusive, or an empty list if ``goal``
        was never closed
    """
    path = deque()
    current = goal
    while True:
        node = closed.pop(current, None) if consume else closed.get(current)
        if node is None:
            break
        path.appendleft(current)
        if node.predecessor is None:
            break
        current = node.predecessor
    return list(path)


class AStarSearcher:
    """A* search over searchable points."""

    def __init__(self, config: Optional[SearchConfig] = None):
        """Initialize A* searcher.

        Args:
            config: Search configuration parameters
        """
        self.config = config or SearchConfig()
        self.statistics = SearchStatistics()

        logger.info(f"A* searcher initialized with max_nodes={self.config.max_nodes_expanded}, "
                    f"max_time={self.config.max_computation_time}, "
                    f"reopen_closed={self.config.reopen_closed}")

    def search(self, start: SearchablePoint, goal: SearchablePoint) -> SearchResult:
        """Search for a minimum-cost path from ``start`` to ``goal``.

        Args:
            start: Starting point
            goal: Goal point (same type as ``start``)

        Returns:
            SearchResult whose ``path`` runs start..goal, or is empty when
            the goal is unreachable or a configured limit was hit
        """
        start_time = time.perf_counter()
        config = self.config
        self.statistics = stats = SearchStatistics()

        deadline = None
        if config.max_computation_time is not None:
            deadline = start_time + config.max_computation_time
        move_cost = type(start).MOVE_COST

        open_queue: List[SearchNode] = [
            SearchNode(point=start, predecessor=None, cost=0, f_score=start.heuristic(goal))
        ]
        stats.heuristic_computations += 1
        stats.nodes_generated += 1
        # Keyed on f rather than g: equivalent only while h depends on (point, goal) alone
        best_scores: Dict[Hashable, int] = {}
        closed: Dict[Hashable, SearchNode] = {}
        termination_reason = "search_exhausted"

        while open_queue:
            if deadline is not None and time.perf_counter() > deadline:
                termination_reason = "timeout"
                break

            current_node = heapq.heappop(open_queue)

            if current_node.point == goal:
                closed[current_node.point] = current_node
                termination_reason = "goal_reached"
                break

            # A cheaper copy already settled this point
            if current_node.point in closed:
                stats.duplicate_states += 1
                continue

            if (config.max_nodes_expanded is not None and
                    stats.nodes_expanded >= config.max_nodes_expanded):
                termination_reason = "max_nodes_reached"
                break

            successors = 0
            cost = current_node.cost + move_cost
            for neighbor in current_node.point.neighbors():
                closed_node = closed.get(neighbor)
                if closed_node is not None and not (config.reopen_closed and cost < closed_node.cost):
                    continue

                f_score = cost + neighbor.heuristic(goal)
                stats.heuristic_computations += 1
                if f_score >= best_scores.get(neighbor, math.inf):
                    stats.nodes_pruned += 1
                    continue
                best_scores[neighbor] = f_score
                if closed_node is not None:
                    del closed[neighbor]
                    stats.nodes_reopened += 1

                heapq.heappush(open_queue, SearchNode(
                    point=neighbor,
                    predecessor=current_node.point,
                    cost=cost,
                    f_score=f_score
                ))
                successors += 1

            closed[current_node.point] = current_node
            stats.nodes_expanded += 1
            stats.nodes_generated += successors
            if config.statistics_tracking:
                stats.update_branching_factor(successors)
                stats.max_frontier_size = max(stats.max_frontier_size, len(open_queue))

        computation_time = time.perf_counter() - start_time
        stats.compute_efficiency()

        if termination_reason != "goal_reached":
            if termination_reason != "search_exhausted":
                logger.info(f"A* search stopped early ({termination_reason}) after "
                            f"{stats.nodes_expanded} expansions")
            else:
                logger.debug(f"A* search exhausted after {stats.nodes_expanded} expansions")
            return SearchResult(
                success=False,
                nodes_expanded=stats.nodes_expanded,
                nodes_generated=stats.nodes_generated,
                computation_time=computation_time,
                termination_reason=termination_reason,
                statistics=stats.to_dict(),
                closed=closed
            )

        goal_cost = closed[goal].cost
        path = reconstruct_path(closed, goal, consume=config.consume_closed_on_reconstruct)
        logger.debug(f"A* search reached goal: length={len(path)}, cost={goal_cost}, "
                     f"expanded={stats.nodes_expanded}")

        return SearchResult(
            success=True,
            path=path,
            cost=goal_cost,
            nodes_expanded=stats.nodes_expanded,
            nodes_generated=stats.nodes_generated,
            computation_time=computation_time,
            termination_reason=termination_reason,
            statistics=stats.to_dict(),
            closed=closed
        )


def astar(start: SearchablePoint, goal: SearchablePoint,
          config: Optional[SearchConfig] = None) -> List[SearchablePoint]:
    """Shortest path from ``start`` to ``goal``; empty if unreachable."""
    return AStarSearcher(config).search(start, goal).path


def create_astar_searcher(cfg: Optional[DictConfig] = None, **overrides: Any) -> AStarSearcher:
    """Factory function to create A* searcher from configuration.

    Args:
        cfg: Hydra configuration; the global configuration is used if None
        **overrides: SearchConfig fields that take precedence over ``cfg``

    Returns:
        Configured AStarSearcher instance
    """
    if cfg is None:
        cfg = get_config()
    config = replace(SearchConfig.from_config(cfg), **overrides)

    return AStarSearcher(config)
