"""Shared fixtures: finite graphs whose points implement the search capability."""

from dataclasses import dataclass
from typing import ClassVar, Dict, Iterable, Optional, Tuple

import pytest

from astar_kernel.config.config_manager import reset_config


def make_graph_point(edges: Iterable[Tuple[str, str]],
                     heuristics: Optional[Dict[str, int]] = None,
                     move_cost: int = 1):
    """Build a point type over a finite directed graph.

    Args:
        edges: (source, target) pairs; neighbor order follows edge order
        heuristics: Per-node heuristic values (0 when missing)
        move_cost: Uniform edge cost

    Returns:
        A frozen, ordered dataclass keyed by node name
    """
    adjacency: Dict[str, list] = {}
    for source, target in edges:
        adjacency.setdefault(source, []).append(target)
    estimates = dict(heuristics or {})

    @dataclass(frozen=True, order=True)
    class GraphPoint:
        name: str

        MOVE_COST: ClassVar[int] = move_cost

        def neighbors(self):
            return [GraphPoint(name) for name in adjacency.get(self.name, [])]

        def heuristic(self, goal):
            return estimates.get(self.name, 0)

        def __str__(self):
            return self.name

    return GraphPoint


@pytest.fixture
def graph_point_factory():
    return make_graph_point


@pytest.fixture(autouse=True)
def clear_global_config():
    """Keep the module-level Hydra configuration from leaking between tests."""
    reset_config()
    yield
    reset_config()
