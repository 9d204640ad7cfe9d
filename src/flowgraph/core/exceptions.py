"""
Exception hierarchy for flowgraph.

Graph shape never raises: dangling edges and cycles are handled inside the
algorithms. These exceptions cover invalid arguments, unreadable files and
cancelled work.
"""


class FlowgraphError(Exception):
    """Base class for all flowgraph errors."""


class ConfigError(FlowgraphError):
    """Configuration file could not be read or validated."""


class DocumentLoadError(FlowgraphError):
    """A pipeline document could not be read or validated."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load pipeline {path}: {reason}")


class NodeNotFoundError(FlowgraphError):
    """No node matches the identifier given by the user."""

    def __init__(self, node_ref: str):
        self.node_ref = node_ref
        super().__init__(f"Node not found: {node_ref}")


class UnknownLayoutError(FlowgraphError, ValueError):
    def __init__(self, strategy: str):
        self.strategy = strategy
        super().__init__(f"Unknown layout strategy: {strategy}")


class UnknownLineageModeError(FlowgraphError, ValueError):
    def __init__(self, mode: str):
        self.mode = mode
        super().__init__(f"Unknown lineage mode: {mode}")


class LayoutCancelledError(FlowgraphError):
    """A newer layout run superseded this one."""

    def __init__(self, generation: int):
        self.generation = generation
        super().__init__(f"Layout run {generation} was cancelled")
