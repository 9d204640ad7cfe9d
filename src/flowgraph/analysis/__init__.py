"""Lineage and slicing analysis over pipeline graphs."""

from .lineage import LineageAnalyzer, lineage, related_nodes
from .slicing import SliceExtractor, SliceOptions, available_tags, available_types, slice_graph

__all__ = [
    "LineageAnalyzer",
    "SliceExtractor",
    "SliceOptions",
    "available_tags",
    "available_types",
    "lineage",
    "related_nodes",
    "slice_graph",
]
