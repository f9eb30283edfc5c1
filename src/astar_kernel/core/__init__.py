"""Searchable point types for the A* kernel."""

from .points import SearchablePoint, GridPoint, manhattan_distance
from .grid import OccupancyGrid, GridCell

__all__ = [
    'SearchablePoint',
    'GridPoint',
    'manhattan_distance',
    'OccupancyGrid',
    'GridCell'
]
