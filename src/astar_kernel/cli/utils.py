"""CLI utility functions."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from astar_kernel.core.grid import OccupancyGrid
from astar_kernel.core.points import GridPoint


def setup_logging(level: int = logging.INFO,
                  format_string: Optional[str] = None) -> None:
    """Setup logging configuration.

    Args:
        level: Logging level
        format_string: Custom format string
    """
    if format_string is None:
        if level <= logging.DEBUG:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S"
    )


def resolve_points(start: str, goal: str, grid: Optional[OccupancyGrid] = None):
    """Turn ``"x,y"`` strings into searchable points.

    Args:
        start: Start coordinates
        goal: Goal coordinates
        grid: Occupancy grid to place the points on; unbounded grid if None

    Returns:
        Tuple of (start, goal) points

    Raises:
        ValueError: If a coordinate string is malformed or off the grid
    """
    start_point = GridPoint.parse(start)
    goal_point = GridPoint.parse(goal)
    if grid is None:
        return start_point, goal_point
    return grid.cell(start_point.x, start_point.y), grid.cell(goal_point.x, goal_point.y)


def format_path(path: Iterable[Any]) -> str:
    """Format a path as ``(x,y) -> (x,y) -> ...``."""
    return ' -> '.join(str(point) for point in path)


def save_results(results: Dict[str, Any],
                 output_path: Union[str, Path],
                 pretty: bool = True) -> None:
    """Save results to JSON file.

    Args:
        results: Results dictionary
        output_path: Output file path
        pretty: Whether to pretty-print JSON
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        if pretty:
            json.dump(results, f, indent=2, sort_keys=True)
        else:
            json.dump(results, f)


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if seconds < 0.001:
        return f"{seconds*1000000:.1f}µs"
    elif seconds < 1:
        return f"{seconds*1000:.1f}ms"
    elif seconds < 60:
        return f"{seconds:.2f}s"
    else:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.1f}s"
