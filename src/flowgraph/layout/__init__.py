"""
Layout strategies.

``layout()`` is the single entry point the editor calls; it returns a new
node list with updated positions and leaves its inputs untouched.
"""

import logging
from typing import List, Optional, Sequence, Union

from ..config import EngineConfig
from ..core.exceptions import UnknownLayoutError
from ..core.types import Edge, LayoutStrategy, Node
from .animation import interpolate_positions, transition_frames
from .force import CancellationToken, ForceSimulator
from .hierarchical import LayeringEngine
from .simple import circular_layout, grid_layout

logger = logging.getLogger(__name__)


def layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    strategy: Union[LayoutStrategy, str] = LayoutStrategy.HIERARCHICAL,
    config: Optional[EngineConfig] = None,
    simulator: Optional[ForceSimulator] = None,
) -> List[Node]:
    """
    Compute positions for ``nodes`` with the named strategy.

    Pass a long-lived ``simulator`` to get cancellation of superseded force
    runs; otherwise each force layout gets a fresh one.
    """
    try:
        chosen = LayoutStrategy(strategy)
    except ValueError:
        raise UnknownLayoutError(str(strategy)) from None

    cfg = config or EngineConfig()
    logger.debug(f"Running {chosen} layout on {len(nodes)} nodes / {len(edges)} edges")

    if chosen == LayoutStrategy.FORCE:
        sim = simulator or ForceSimulator(cfg.force)
        return sim.run(nodes, edges)
    if chosen == LayoutStrategy.CIRCULAR:
        return circular_layout(nodes, edges, cfg.layout)
    if chosen == LayoutStrategy.GRID:
        return grid_layout(nodes, edges, cfg.layout)
    return LayeringEngine(cfg.layout).apply(nodes, edges)


__all__ = [
    "CancellationToken",
    "ForceSimulator",
    "LayeringEngine",
    "circular_layout",
    "grid_layout",
    "interpolate_positions",
    "layout",
    "transition_frames",
]
