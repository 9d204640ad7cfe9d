"""
flowgraph Core Module.

Fundamental building blocks shared by the layout and analysis engines:

Types & Graph:
    - Node, Edge, Group: pipeline records (pydantic, frozen)
    - GraphModel: read-only adjacency/degree view

Support:
    - EventEmitter: observer subscriptions for stateful services
    - Ok / Err: result type for expected, user-facing failures
    - load_document / save_document: pipeline JSON IO
"""

from .document import dump_document, load_document, parse_document, save_document
from .events import EventEmitter
from .exceptions import (
    ConfigError,
    DocumentLoadError,
    FlowgraphError,
    LayoutCancelledError,
    NodeNotFoundError,
    UnknownLayoutError,
    UnknownLineageModeError,
)
from .graph import GraphModel
from .result import Err, Ok, Result
from .types import (
    Edge,
    EdgeData,
    Group,
    LayoutStrategy,
    LineageMode,
    Node,
    NodeData,
    NodeType,
    PipelineDocument,
    Position,
    SliceMode,
    SliceResult,
    TransferType,
    ValidationResult,
)

__all__ = [
    "ConfigError",
    "DocumentLoadError",
    "Edge",
    "EdgeData",
    "Err",
    "EventEmitter",
    "FlowgraphError",
    "GraphModel",
    "Group",
    "LayoutCancelledError",
    "LayoutStrategy",
    "LineageMode",
    "Node",
    "NodeData",
    "NodeNotFoundError",
    "NodeType",
    "Ok",
    "PipelineDocument",
    "Position",
    "Result",
    "SliceMode",
    "SliceResult",
    "TransferType",
    "UnknownLayoutError",
    "UnknownLineageModeError",
    "ValidationResult",
    "dump_document",
    "load_document",
    "parse_document",
    "save_document",
]
