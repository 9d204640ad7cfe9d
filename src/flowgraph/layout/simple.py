"""
Closed-form placements: circle and grid.

Both are O(n), deterministic and ignore edges.
"""

import math
from typing import List, Optional, Sequence

from ..config import (
    CIRCLE_CENTER_X,
    CIRCLE_CENTER_Y,
    CIRCLE_INSET,
    DEFAULT_LAYOUT_CONFIG,
    LayoutConfig,
)
from ..core.types import Edge, Node


def circular_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge] = (),
    config: Optional[LayoutConfig] = None,
) -> List[Node]:
    """Place node i of n at angle 2πi/n around a fixed center."""
    cfg = config or DEFAULT_LAYOUT_CONFIG
    count = len(nodes)
    if not count:
        return []

    radius = min(CIRCLE_CENTER_X, CIRCLE_CENTER_Y) - cfg.padding - CIRCLE_INSET
    placed = []
    for index, node in enumerate(nodes):
        angle = 2 * math.pi * index / count
        placed.append(node.with_position(
            CIRCLE_CENTER_X + radius * math.cos(angle),
            CIRCLE_CENTER_Y + radius * math.sin(angle),
        ))
    return placed


def grid_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge] = (),
    config: Optional[LayoutConfig] = None,
) -> List[Node]:
    """Fill a ceil(sqrt(n))-column grid row by row."""
    cfg = config or DEFAULT_LAYOUT_CONFIG
    if not nodes:
        return []

    cols = math.ceil(math.sqrt(len(nodes)))
    placed = []
    for index, node in enumerate(nodes):
        row, col = divmod(index, cols)
        placed.append(node.with_position(
            cfg.padding + col * (cfg.node_width + cfg.horizontal_spacing),
            cfg.padding + row * (cfg.node_height + cfg.vertical_spacing),
        ))
    return placed
