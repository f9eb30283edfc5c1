"""Generic A* shortest-path search kernel.

Search any point type that provides ``MOVE_COST``, ``neighbors()`` and
``heuristic(goal)``::

    from astar_kernel import GridPoint, astar

    path = astar(GridPoint(0, 0), GridPoint(3, 2))
"""

from .core.points import SearchablePoint, GridPoint
from .core.grid import OccupancyGrid, GridCell
from .search.astar import (
    AStarSearcher, SearchConfig, SearchResult, astar, reconstruct_path
)

__version__ = "0.1.0"

__all__ = [
    'SearchablePoint',
    'GridPoint',
    'OccupancyGrid',
    'GridCell',
    'AStarSearcher',
    'SearchConfig',
    'SearchResult',
    'astar',
    'reconstruct_path'
]
