"""
Pipeline Graph Module.

Read-only adjacency view over a node collection and an edge collection.
Every layout and analysis routine builds one of these first, so edge
validation happens in exactly one place: edges whose source or target is not
a known node are excluded from adjacency and degree counts.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from .types import Edge, Node

logger = logging.getLogger(__name__)


class GraphModel:
    """
    Immutable snapshot of a pipeline graph.

    Provides:
    - O(1) node lookup by id
    - Successor/predecessor lists (parallel edges kept, in input order)
    - Degree queries used by layering and critical-node analysis
    - Source/sink/orphan discovery and substring search
    """

    def __init__(self, nodes: Iterable[Node], edges: Iterable[Edge]):
        self._nodes: Dict[str, Node] = {}
        for node in nodes:
            self._nodes.setdefault(node.id, node)

        self._edges: List[Edge] = []
        self._outgoing: Dict[str, List[str]] = defaultdict(list)
        self._incoming: Dict[str, List[str]] = defaultdict(list)
        self._dropped = 0

        for edge in edges:
            if edge.source not in self._nodes or edge.target not in self._nodes:
                self._dropped += 1
                logger.debug(f"Ignoring dangling edge {edge.id} ({edge.source} -> {edge.target})")
                continue
            self._edges.append(edge)
            self._outgoing[edge.source].append(edge.target)
            self._incoming[edge.target].append(edge.source)

    # =========================================================================
    # Nodes & Edges
    # =========================================================================

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def iter_nodes(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def iter_edges(self) -> Iterator[Edge]:
        """Edges with both endpoints present."""
        return iter(self._edges)

    @property
    def node_ids(self) -> List[str]:
        return list(self._nodes)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    @property
    def dropped_edge_count(self) -> int:
        return self._dropped

    # =========================================================================
    # Adjacency
    # =========================================================================

    def successors(self, node_id: str) -> Sequence[str]:
        return self._outgoing.get(node_id, ())

    def predecessors(self, node_id: str) -> Sequence[str]:
        return self._incoming.get(node_id, ())

    def in_degree(self, node_id: str) -> int:
        return len(self._incoming.get(node_id, ()))

    def out_degree(self, node_id: str) -> int:
        return len(self._outgoing.get(node_id, ()))

    def degree(self, node_id: str) -> int:
        """Total number of edges touching the node."""
        return self.in_degree(node_id) + self.out_degree(node_id)

    def sources(self) -> List[str]:
        """Nodes with no incoming edges."""
        return [node_id for node_id in self._nodes if not self._incoming.get(node_id)]

    def sinks(self) -> List[str]:
        """Nodes with no outgoing edges."""
        return [node_id for node_id in self._nodes if not self._outgoing.get(node_id)]

    def orphans(self) -> List[str]:
        """Nodes with no connections at all."""
        return [
            node_id for node_id in self._nodes
            if not self._outgoing.get(node_id) and not self._incoming.get(node_id)
        ]

    # =========================================================================
    # Search
    # =========================================================================

    def find_nodes(self, pattern: str) -> List[str]:
        """
        Find nodes matching a pattern (case-insensitive substring).

        Searches both node ids and labels.
        """
        pattern_lower = pattern.lower()
        results = []
        for node_id, node in self._nodes.items():
            if pattern_lower in node_id.lower():
                results.append(node_id)
            elif pattern_lower in node.data.label.lower():
                results.append(node_id)
        return results

    def find_by_label(self, label: str) -> List[str]:
        """Exact (case-insensitive) label matches."""
        label_lower = label.lower()
        return [
            node_id for node_id, node in self._nodes.items()
            if node.data.label.lower() == label_lower
        ]

    # =========================================================================
    # Statistics
    # =========================================================================

    def stats(self) -> Dict[str, Any]:
        nodes_by_type: Dict[str, int] = defaultdict(int)
        for node in self._nodes.values():
            nodes_by_type[node.type.value] += 1

        edges_by_transfer: Dict[str, int] = defaultdict(int)
        for edge in self._edges:
            edges_by_transfer[edge.data.transfer_type.value] += 1

        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "dropped_edges": self._dropped,
            "nodes_by_type": dict(nodes_by_type),
            "edges_by_transfer_type": dict(edges_by_transfer),
            "sources": len(self.sources()),
            "sinks": len(self.sinks()),
            "orphans": len(self.orphans()),
        }
