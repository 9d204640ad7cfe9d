"""
Pipeline Slicing.

Narrows a pipeline to the part a user wants to look at or run, through a
fixed sequence of filters:

0. group membership
1. tags
2. node types
3. expansion around explicitly selected nodes
4. edge visibility (both endpoints must survive)

and renders the equivalent ``pipeline run`` command line.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set

from pydantic import BaseModel, Field

from ..config import RUN_COMMAND_PREFIX
from ..core.graph import GraphModel
from ..core.types import Edge, Node, SliceMode, SliceResult
from .lineage import LineageAnalyzer

logger = logging.getLogger(__name__)


class SliceOptions(BaseModel):
    """Active filter state. Empty collections disable their filter."""
    tags: List[str] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)
    groups: List[str] = Field(default_factory=list)
    selection: List[str] = Field(default_factory=list)
    mode: SliceMode = SliceMode.FROM
    # Hops to follow from each selected node; None means unbounded
    depth: Optional[int] = Field(default=None, ge=0)


def _unique(values: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    ordered = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


class SliceExtractor:
    """Applies SliceOptions to a pipeline snapshot."""

    def __init__(self, command_prefix: str = RUN_COMMAND_PREFIX):
        self.command_prefix = command_prefix

    def expand_selection(
        self,
        analyzer: LineageAnalyzer,
        selection: Sequence[str],
        mode: SliceMode,
        depth: Optional[int] = None,
    ) -> Set[str]:
        """Node ids reached from ``selection`` under ``mode``."""
        max_depth = -1 if depth is None else depth
        expanded: Set[str] = set(selection)

        if mode == SliceMode.FROM:
            for node_id in selection:
                expanded |= analyzer.downstream(node_id, max_depth)
        elif mode == SliceMode.TO:
            for node_id in selection:
                expanded |= analyzer.upstream(node_id, max_depth)
        elif mode == SliceMode.AROUND:
            for node_id in selection:
                expanded |= analyzer.related(node_id, max_depth=max_depth)
        elif mode == SliceMode.BETWEEN:
            # Nodes downstream of some selected node and upstream of another.
            below: Set[str] = set()
            above: Set[str] = set()
            for node_id in selection:
                below |= analyzer.downstream(node_id, max_depth)
                above |= analyzer.upstream(node_id, max_depth)
            expanded |= below & above

        return expanded

    def extract(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        options: Optional[SliceOptions] = None,
    ) -> SliceResult:
        opts = options or SliceOptions()
        kept: List[Node] = list(nodes)

        if opts.groups:
            groups = set(opts.groups)
            kept = [n for n in kept if groups.intersection(n.data.group_ids)]

        if opts.tags:
            tags = set(opts.tags)
            kept = [n for n in kept if tags.intersection(n.data.tags)]

        if opts.types:
            types = set(opts.types)
            kept = [n for n in kept if n.type.value in types]

        selection = _unique(opts.selection)
        if selection:
            # Walk the whole pipeline; filtered-out nodes can still connect survivors.
            analyzer = LineageAnalyzer.from_collections(nodes, edges)
            reached = self.expand_selection(analyzer, selection, opts.mode, opts.depth)
            kept = [n for n in kept if n.id in reached]

        visible = {n.id for n in kept}
        kept_edges = [e for e in edges if e.source in visible and e.target in visible]

        logger.debug(f"Slice kept {len(kept)}/{len(nodes)} nodes, {len(kept_edges)}/{len(edges)} edges")
        return SliceResult(nodes=kept, edges=kept_edges, command=self.build_command(opts))

    def build_command(self, options: SliceOptions) -> str:
        parts = [self.command_prefix]
        selection = _unique(options.selection)

        if selection:
            joined = ",".join(selection)
            if options.mode == SliceMode.FROM:
                parts.append(f"--from-nodes={joined}")
            elif options.mode == SliceMode.TO:
                parts.append(f"--to-nodes={joined}")
            elif options.mode == SliceMode.BETWEEN:
                parts.append(f"--from-nodes={joined}")
                parts.append(f"--to-nodes={joined}")
            else:
                parts.append(f"--around-nodes={joined}")
            if options.depth is not None:
                parts.append(f"--depth={options.depth}")

        if options.tags:
            parts.append(f"--tags={','.join(_unique(options.tags))}")
        if options.types:
            parts.append(f"--node-types={','.join(_unique(options.types))}")
        if options.groups:
            parts.append(f"--groups={','.join(_unique(options.groups))}")

        return " ".join(parts)


def slice_graph(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: Optional[SliceOptions] = None,
) -> SliceResult:
    return SliceExtractor().extract(nodes, edges, options)


def available_tags(nodes: Iterable[Node]) -> List[str]:
    return sorted({tag for node in nodes for tag in node.data.tags})


def available_types(nodes: Iterable[Node]) -> List[str]:
    return sorted({node.type.value for node in nodes})


def slice_stats(result: SliceResult, graph: GraphModel) -> dict:
    """How much of the full graph a slice retains."""
    total = graph.node_count or 1
    return {
        "nodes": len(result.nodes),
        "edges": len(result.edges),
        "total_nodes": graph.node_count,
        "coverage": round(len(result.nodes) / total, 3),
    }
