"""
Lineage Analysis.

Upstream/downstream reachability around a seed node, and the four named
lineage questions built on it:

- impact:     what breaks downstream if the seed fails
- dependency: what the seed needs upstream
- path:       every node on a source -> seed -> sink flow
- critical:   high-fan, ML, central-processing and bottleneck nodes in the
              seed's connected flow

Every walk is guarded by a visited set, so cyclic pipelines terminate and
each node is expanded once. Every result contains the seed.
"""

import logging
from collections import deque
from typing import Callable, Dict, Iterable, List, Sequence, Set, Union

from ..core.exceptions import UnknownLineageModeError
from ..core.graph import GraphModel
from ..core.types import (
    CENTRAL_PROCESSING_TYPES,
    ML_STAGE_TYPES,
    Edge,
    LineageMode,
    Node,
    NodeType,
)

logger = logging.getLogger(__name__)

# Breakdown buckets for reporting.
NODE_CATEGORIES: Dict[str, frozenset] = {
    "architecture": frozenset({
        NodeType.DATA_LAKE, NodeType.DATA_WAREHOUSE, NodeType.DATA_MART, NodeType.BI_TOOL,
    }),
    "input": frozenset({
        NodeType.CSV_INPUT, NodeType.JSON_INPUT, NodeType.PARQUET_INPUT,
        NodeType.DATABASE_INPUT, NodeType.API_INPUT,
    }),
    "processing": frozenset({
        NodeType.PROCESS, NodeType.TRANSFORM, NodeType.FILTER,
        NodeType.AGGREGATE, NodeType.JOIN, NodeType.SPLIT,
    }),
    "ml": ML_STAGE_TYPES,
    "output": frozenset({
        NodeType.CSV_OUTPUT, NodeType.JSON_OUTPUT, NodeType.PARQUET_OUTPUT,
        NodeType.DATABASE_OUTPUT, NodeType.API_OUTPUT,
    }),
}


class LineageAnalyzer:
    """
    Reachability queries over one graph snapshot.

    Build it once per snapshot and ask as many questions as needed; the
    adjacency lists are shared across queries.
    """

    def __init__(self, graph: GraphModel):
        self.graph = graph

    @classmethod
    def from_collections(cls, nodes: Iterable[Node], edges: Iterable[Edge]) -> "LineageAnalyzer":
        return cls(GraphModel(nodes, edges))

    # =========================================================================
    # Traversal
    # =========================================================================

    def _walk(
        self,
        node_id: str,
        neighbors: Callable[[str], Sequence[str]],
        max_depth: int,
    ) -> Set[str]:
        visited: Set[str] = {node_id}
        to_visit = deque([(node_id, 0)])

        while to_visit:
            current, depth = to_visit.popleft()
            if max_depth >= 0 and depth >= max_depth:
                continue
            for neighbor in neighbors(current):
                if neighbor not in visited:
                    visited.add(neighbor)
                    to_visit.append((neighbor, depth + 1))

        visited.discard(node_id)
        return visited

    def upstream(self, node_id: str, max_depth: int = -1) -> Set[str]:
        """
        Nodes with a directed path to ``node_id`` (excluding it).

        Follows edges where the current node is the target.
        """
        return self._walk(node_id, self.graph.predecessors, max_depth)

    def downstream(self, node_id: str, max_depth: int = -1) -> Set[str]:
        """
        Nodes reachable from ``node_id`` (excluding it).

        Follows edges where the current node is the source.
        """
        return self._walk(node_id, self.graph.successors, max_depth)

    def related(
        self,
        node_id: str,
        upstream: bool = True,
        downstream: bool = True,
        max_depth: int = -1,
    ) -> Set[str]:
        """Seed plus its upstream and/or downstream reach, walked separately."""
        related = {node_id}
        if upstream:
            related |= self.upstream(node_id, max_depth)
        if downstream:
            related |= self.downstream(node_id, max_depth)
        return related

    # =========================================================================
    # Lineage modes
    # =========================================================================

    def impact(self, node_id: str) -> Set[str]:
        return {node_id} | self.downstream(node_id)

    def dependency(self, node_id: str) -> Set[str]:
        return {node_id} | self.upstream(node_id)

    def path(self, node_id: str) -> Set[str]:
        """
        End-to-end flow through the seed.

        Every ancestor lies on some path into the seed and every descendant
        on some path out of it, so one backward and one forward pass give the
        union of all source -> seed -> sink paths. A pure source degenerates
        to its downstream reach and a pure sink to its upstream reach.

        Nothing requires a path to start at an in-degree-0 node: an upstream
        cycle with no entry point (X <-> Y -> S) still counts as reaching S,
        so X and Y are part of S's path.
        """
        return {node_id} | self.upstream(node_id) | self.downstream(node_id)

    def critical(self, node_id: str) -> Set[str]:
        """
        Critical nodes within the seed's upstream+downstream component.

        A member is critical when, counting only edges inside the component:
        - it has in-degree >= 2 or out-degree >= 2,
        - it is a model train/predict/evaluate stage,
        - it is a join/aggregate/transform with at least one connection, or
        - it is a bottleneck: one predecessor, at least one successor, and no
          edge that bypasses it (neither the predecessor nor the
          predecessor's other successors feed its successors directly).
        """
        graph = self.graph
        component = self.related(node_id)
        critical = {node_id}

        for member in component:
            node = graph.get_node(member)
            if node is None:
                continue

            preds = [p for p in graph.predecessors(member) if p in component]
            succs = [s for s in graph.successors(member) if s in component]
            incoming, outgoing = len(preds), len(succs)

            if incoming >= 2 or outgoing >= 2:
                critical.add(member)
            elif node.type in ML_STAGE_TYPES:
                critical.add(member)
            elif node.type in CENTRAL_PROCESSING_TYPES and (incoming or outgoing):
                critical.add(member)
            elif incoming == 1 and outgoing >= 1 and self._is_bottleneck(member, preds[0], succs):
                critical.add(member)

        return critical

    def _is_bottleneck(self, node_id: str, pred: str, succs: List[str]) -> bool:
        if pred == node_id:
            return False
        targets = set(succs)
        targets.discard(node_id)

        # Predecessor feeding a successor directly.
        if any(t in targets for t in self.graph.successors(pred)):
            return False

        # Predecessor's other successors feeding a successor.
        for sibling in self.graph.successors(pred):
            if sibling == node_id:
                continue
            if any(t in targets for t in self.graph.successors(sibling)):
                return False
        return True

    def lineage(self, node_id: str, mode: Union[LineageMode, str]) -> Set[str]:
        try:
            chosen = LineageMode(mode)
        except ValueError:
            raise UnknownLineageModeError(str(mode)) from None

        if not self.graph.has_node(node_id):
            logger.debug(f"Lineage seed {node_id} is not in the graph")

        if chosen == LineageMode.IMPACT:
            return self.impact(node_id)
        if chosen == LineageMode.DEPENDENCY:
            return self.dependency(node_id)
        if chosen == LineageMode.PATH:
            return self.path(node_id)
        return self.critical(node_id)

    # =========================================================================
    # Reporting
    # =========================================================================

    def breakdown(self, node_ids: Iterable[str]) -> Dict[str, List[str]]:
        """Bucket node ids by pipeline stage."""
        result: Dict[str, List[str]] = {name: [] for name in NODE_CATEGORIES}
        result["other"] = []

        for node_id in sorted(node_ids):
            node = self.graph.get_node(node_id)
            bucket = "other"
            if node is not None:
                for name, types in NODE_CATEGORIES.items():
                    if node.type in types:
                        bucket = name
                        break
            result[bucket].append(node_id)

        return result


def related_nodes(
    seed: str,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    upstream: bool = True,
    downstream: bool = True,
    max_depth: int = -1,
) -> Set[str]:
    return LineageAnalyzer.from_collections(nodes, edges).related(
        seed, upstream=upstream, downstream=downstream, max_depth=max_depth
    )


def lineage(
    seed: str,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    mode: Union[LineageMode, str],
) -> Set[str]:
    return LineageAnalyzer.from_collections(nodes, edges).lineage(seed, mode)
