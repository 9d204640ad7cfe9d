"""
Hierarchical (layered) layout.

Nodes are assigned to layers by longest-path depth from the sources, using
Kahn's algorithm, so a node is never drawn above one of its own
dependencies. Layers are then ordered by pipeline stage and connectivity and
centered horizontally.
"""

import logging
from collections import deque
from typing import Dict, List, Optional, Sequence

from ..config import DEFAULT_LAYOUT_CONFIG, LayoutConfig
from ..core.graph import GraphModel
from ..core.types import Edge, Node, NodeType

logger = logging.getLogger(__name__)

# Lower values are placed further left within a layer.
TYPE_PRIORITIES: Dict[NodeType, int] = {
    NodeType.DATA_LAKE: 1,
    NodeType.DATA_WAREHOUSE: 1,
    NodeType.CSV_INPUT: 2,
    NodeType.JSON_INPUT: 2,
    NodeType.PARQUET_INPUT: 2,
    NodeType.DATABASE_INPUT: 2,
    NodeType.API_INPUT: 2,
    NodeType.PROCESS: 5,
    NodeType.TRANSFORM: 5,
    NodeType.FILTER: 5,
    NodeType.AGGREGATE: 6,
    NodeType.JOIN: 6,
    NodeType.SPLIT: 6,
    NodeType.MODEL_TRAIN: 7,
    NodeType.MODEL_PREDICT: 8,
    NodeType.MODEL_EVALUATE: 8,
    NodeType.DATA_MART: 9,
    NodeType.CSV_OUTPUT: 10,
    NodeType.JSON_OUTPUT: 10,
    NodeType.PARQUET_OUTPUT: 10,
    NodeType.DATABASE_OUTPUT: 10,
    NodeType.API_OUTPUT: 10,
    NodeType.BI_TOOL: 11,
}
DEFAULT_TYPE_PRIORITY = 5


def type_priority(node_type: NodeType) -> int:
    return TYPE_PRIORITIES.get(node_type, DEFAULT_TYPE_PRIORITY)


class LayeringEngine:
    """
    Longest-path layering with deterministic in-layer ordering.

    Cycles never stall the queue: a graph with no source node at all becomes
    a single layer, and any node left unvisited once the queue drains is put
    into one catch-all layer below everything else.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or DEFAULT_LAYOUT_CONFIG

    def compute_depths(self, graph: GraphModel) -> Dict[str, int]:
        """Map every node id to its layer index."""
        node_ids = graph.node_ids
        depths = {node_id: 0 for node_id in node_ids}
        in_degree = {node_id: graph.in_degree(node_id) for node_id in node_ids}

        queue = deque(node_id for node_id in node_ids if in_degree[node_id] == 0)
        if not queue:
            if node_ids:
                logger.debug(f"No source nodes among {len(node_ids)}, using a single layer")
            return depths

        visited = set()
        while queue:
            current = queue.popleft()
            visited.add(current)
            for target in graph.successors(current):
                in_degree[target] -= 1
                depths[target] = max(depths[target], depths[current] + 1)
                if in_degree[target] == 0:
                    queue.append(target)

        residual = [node_id for node_id in node_ids if node_id not in visited]
        if residual:
            catch_all = max(depths[node_id] for node_id in visited) + 1
            logger.debug(f"{len(residual)} node(s) on cycles placed in catch-all layer {catch_all}")
            for node_id in residual:
                depths[node_id] = catch_all

        return depths

    def build_layers(self, graph: GraphModel, depths: Dict[str, int]) -> List[List[Node]]:
        """Group nodes by depth and order each layer by stage, then degree."""
        if not depths:
            return []

        layers: List[List[Node]] = [[] for _ in range(max(depths.values()) + 1)]
        for node in graph.iter_nodes():
            layers[depths[node.id]].append(node)

        for layer in layers:
            # Stable sort keeps input order as the last tie-break.
            layer.sort(key=lambda n: (type_priority(n.type), -graph.degree(n.id)))

        return [layer for layer in layers if layer]

    def apply(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> List[Node]:
        """Return copies of ``nodes`` with hierarchical positions."""
        if not nodes:
            return []

        cfg = self.config
        graph = GraphModel(nodes, edges)
        depths = self.compute_depths(graph)
        layers = self.build_layers(graph, depths)

        step_x = cfg.node_width + cfg.horizontal_spacing
        step_y = cfg.node_height + cfg.vertical_spacing
        max_layer_size = max(len(layer) for layer in layers)
        canvas_width = max(cfg.min_canvas_width, max_layer_size * step_x)

        positions: Dict[str, tuple] = {}
        for layer in layers:
            layer_width = len(layer) * step_x - cfg.horizontal_spacing
            center_offset = (canvas_width - layer_width) / 2
            for index, node in enumerate(layer):
                x = max(cfg.padding, center_offset + index * step_x)
                y = cfg.padding + depths[node.id] * step_y
                positions[node.id] = (x, y)

        return [node.with_position(*positions[node.id]) for node in nodes]


def hierarchical_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    config: Optional[LayoutConfig] = None,
) -> List[Node]:
    return LayeringEngine(config).apply(nodes, edges)
