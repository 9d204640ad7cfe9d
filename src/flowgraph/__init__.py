"""
flowgraph - layout, lineage and slicing for data-pipeline graphs.

The engine is a set of pure functions over plain node/edge collections:

- layout:   hierarchical, force, circular and grid placement
- analysis: reachability, lineage modes and pipeline slices
- groups:   named, colored node groups with persistence

Inputs are never mutated; every call returns new nodes, id sets or slices.
"""

from .analysis import LineageAnalyzer, SliceOptions, lineage, related_nodes, slice_graph
from .core import Edge, GraphModel, Group, Node, NodeType, PipelineDocument
from .groups import GroupRegistry, JsonGroupStore, MemoryGroupStore
from .layout import layout

__version__ = "0.3.0"

__all__ = [
    "Edge",
    "GraphModel",
    "Group",
    "GroupRegistry",
    "JsonGroupStore",
    "LineageAnalyzer",
    "MemoryGroupStore",
    "Node",
    "NodeType",
    "PipelineDocument",
    "SliceOptions",
    "layout",
    "lineage",
    "related_nodes",
    "slice_graph",
]
