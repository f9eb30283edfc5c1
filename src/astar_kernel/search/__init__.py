"""Search algorithms for the A* kernel.

This module exposes the generic A* driver, its frontier entries and the
result/statistics containers it produces.
"""

from .astar import (
    AStarSearcher, SearchNode, SearchResult, SearchConfig, SearchStatistics,
    astar, reconstruct_path, create_astar_searcher
)

__all__ = [
    'AStarSearcher',
    'SearchNode',
    'SearchResult',
    'SearchConfig',
    'SearchStatistics',
    'astar',
    'reconstruct_path',
    'create_astar_searcher'
]
