"""Bounded occupancy grids backed by numpy arrays.

A grid is a boolean array where ``True`` marks a blocked cell, indexed as
``blocked[y, x]``. Cells handed out by :meth:`OccupancyGrid.cell` implement
the searchable point capability, so a grid with walls can be searched with
the same kernel as the unbounded :class:`~astar_kernel.core.points.GridPoint`.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Iterable, List, Optional, Sequence, Union

import numpy as np

from .points import manhattan_distance

logger = logging.getLogger(__name__)

FREE_CHAR = '.'
BLOCKED_CHAR = '#'
PATH_CHAR = '*'


@dataclass(frozen=True, order=True)
class GridCell:
    """A cell of an :class:`OccupancyGrid`.

    Identity and ordering use the coordinates only; the owning grid is
    carried along so neighbor enumeration can consult it.
    """

    x: int
    y: int
    grid: 'OccupancyGrid' = field(compare=False, repr=False)

    MOVE_COST: ClassVar[int] = 1

    def neighbors(self) -> Sequence['GridCell']:
        x, y = self.x, self.y
        candidates = ((x, y + 1), (x, y - 1), (x + 1, y), (x - 1, y))
        return [
            GridCell(cx, cy, self.grid)
            for cx, cy in candidates
            if self.grid.is_passable(cx, cy)
        ]

    def heuristic(self, goal: 'GridCell') -> int:
        return manhattan_distance(self.x, self.y, goal.x, goal.y)

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


class OccupancyGrid:
    """Finite four-connected grid with blocked cells."""

    def __init__(self, blocked: np.ndarray):
        """Initialize grid.

        Args:
            blocked: 2D array, truthy where a cell cannot be entered
        """
        blocked = np.array(blocked, dtype=bool)
        if blocked.ndim != 2:
            raise ValueError(f"Occupancy grid must be 2D, got shape {blocked.shape}")
        # Shared by every cell handed out by this grid
        blocked.setflags(write=False)
        self.blocked = blocked

    @property
    def height(self) -> int:
        return self.blocked.shape[0]

    @property
    def width(self) -> int:
        return self.blocked.shape[1]

    @classmethod
    def from_text(cls, text: str) -> 'OccupancyGrid':
        """Build a grid from lines of ``.`` (free) and ``#`` (blocked).

        Blank lines are ignored. All rows must have the same width.

        Raises:
            ValueError: On ragged rows or unknown characters
        """
        rows = [line.strip() for line in text.splitlines() if line.strip()]
        if not rows:
            raise ValueError("Grid text is empty")

        width = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {i} has width {len(row)}, expected {width}"
                )
            unknown = set(row) - {FREE_CHAR, BLOCKED_CHAR}
            if unknown:
                raise ValueError(
                    f"Row {i} contains unknown characters: {''.join(sorted(unknown))}"
                )

        blocked = np.array([[ch == BLOCKED_CHAR for ch in row] for row in rows], dtype=bool)
        return cls(blocked)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'OccupancyGrid':
        """Load a grid from a text file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file contents are not a valid grid
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Grid file not found: {file_path}")

        grid = cls.from_text(file_path.read_text())
        logger.debug(f"Loaded {grid.width}x{grid.height} grid from {file_path}")
        return grid

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_blocked(self, x: int, y: int) -> bool:
        return bool(self.blocked[y, x])

    def is_passable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and not self.is_blocked(x, y)

    def cell(self, x: int, y: int) -> GridCell:
        """Return the searchable cell at ``(x, y)``.

        Raises:
            ValueError: If the coordinates are outside the grid
        """
        if not self.in_bounds(x, y):
            raise ValueError(
                f"Cell ({x},{y}) is outside the {self.width}x{self.height} grid"
            )
        return GridCell(x, y, self)

    def free_cells(self) -> List[GridCell]:
        ys, xs = np.nonzero(~self.blocked)
        return [GridCell(int(x), int(y), self) for y, x in zip(ys, xs)]

    def render(self, path: Optional[Iterable] = None) -> str:
        """Draw the grid, marking cells on ``path`` with ``*``.

        Args:
            path: Cells or points with ``x``/``y`` attributes
        """
        canvas = np.where(self.blocked, BLOCKED_CHAR, FREE_CHAR).astype('<U1')
        for point in path or ():
            canvas[point.y, point.x] = PATH_CHAR
        return '\n'.join(''.join(row) for row in canvas)

    def __repr__(self) -> str:
        return f"OccupancyGrid(width={self.width}, height={self.height})"
