"""Searchable point capability and the unbounded grid point.

The search kernel never inspects a point directly. Anything that can be
hashed, compared, and that exposes ``MOVE_COST``, ``neighbors()`` and
``heuristic(goal)`` can be searched over.
"""

from dataclasses import dataclass
from typing import ClassVar, Protocol, Sequence, TypeVar

P = TypeVar('P', bound='SearchablePoint')


class SearchablePoint(Protocol):
    """Capability consumed by the A* kernel.

    Implementations must be immutable values with a total order, equality
    and a stable hash. ``neighbors`` and ``heuristic`` must be pure: the
    kernel calls them an unbounded number of times.

    The heuristic must depend only on ``(self, goal)``. The best-score table
    compares total estimates ``f = g + h`` for the same point, which is only
    equivalent to comparing ``g`` while ``h`` is path independent.
    """

    MOVE_COST: ClassVar[int]

    def neighbors(self: P) -> Sequence[P]:
        """Points reachable from this one in a single move (may be empty)."""
        ...

    def heuristic(self: P, goal: P) -> int:
        """Non-negative estimate of the remaining cost to ``goal``."""
        ...

    def __lt__(self, other) -> bool:
        ...

    def __hash__(self) -> int:
        ...


def manhattan_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    """|dx| + |dy| between two integer coordinates."""
    return abs(x1 - x2) + abs(y1 - y2)


@dataclass(frozen=True, order=True)
class GridPoint:
    """Point on an unbounded integer grid with four-directional moves."""

    x: int
    y: int

    MOVE_COST: ClassVar[int] = 1

    def neighbors(self) -> Sequence['GridPoint']:
        x, y = self.x, self.y
        return [
            GridPoint(x, y + 1),
            GridPoint(x, y - 1),
            GridPoint(x + 1, y),
            GridPoint(x - 1, y),
        ]

    def heuristic(self, goal: 'GridPoint') -> int:
        return manhattan_distance(self.x, self.y, goal.x, goal.y)

    @classmethod
    def parse(cls, text: str) -> 'GridPoint':
        """Parse ``"x,y"`` (whitespace and surrounding parentheses allowed).

        Raises:
            ValueError: If the text is not two comma-separated integers
        """
        cleaned = text.strip().strip('()')
        parts = [part.strip() for part in cleaned.split(',')]
        if len(parts) != 2:
            raise ValueError(f"Expected point as 'x,y', got {text!r}")
        try:
            return cls(int(parts[0]), int(parts[1]))
        except ValueError:
            raise ValueError(f"Point coordinates must be integers, got {text!r}")

    def __str__(self) -> str:
        return f"({self.x},{self.y})"
