"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, pipeline loading, node reference resolution and access to
the engine configuration.
"""

import functools
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.logging import RichHandler

from ..config import EngineConfig, load_config
from ..core.document import load_document
from ..core.exceptions import ConfigError, DocumentLoadError, NodeNotFoundError
from ..core.graph import GraphModel
from ..core.types import PipelineDocument
from ..groups.registry import GroupRegistry
from ..groups.store import JsonGroupStore


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich; debug level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def engine_config(obj: Optional[EngineConfig]) -> EngineConfig:
    """
    Config set up by the root command, or loaded on demand.

    Commands invoked directly (tests, embedding) have no context object.
    """
    if isinstance(obj, EngineConfig):
        return obj
    try:
        return load_config()
    except ConfigError as e:
        echo_error(str(e))
        sys.exit(1)


def load_pipeline(path: str) -> PipelineDocument:
    """
    Load a pipeline document or exit with an error.

    Args:
        path (str): Path to a pipeline JSON file.

    Returns:
        PipelineDocument: The validated document.
    """
    try:
        return load_document(Path(path))
    except DocumentLoadError as e:
        echo_error(str(e))
        click.echo("Export the pipeline from the editor as JSON and pass that file.")
        sys.exit(1)


def resolve_node_id(graph: GraphModel, node_ref: str) -> Optional[str]:
    """
    Resolve a user-supplied node reference to a node id.

    Tries an exact id, then an exact label, then a substring match on ids and
    labels (preferring an id that ends with the reference).
    """
    if graph.has_node(node_ref):
        return node_ref

    by_label = graph.find_by_label(node_ref)
    if by_label:
        return by_label[0]

    matches = graph.find_nodes(node_ref)
    if not matches:
        return None
    for match in matches:
        if match.endswith(node_ref):
            return match
    if len(matches) > 1:
        echo_warning(f"Ambiguous node '{node_ref}'. Using first match: {matches[0]}")
    return matches[0]


def require_node(graph: GraphModel, node_ref: str) -> str:
    node_id = resolve_node_id(graph, node_ref)
    if node_id is None:
        raise NodeNotFoundError(node_ref)
    return node_id


def exit_on_missing_node(func):
    """Report an unresolvable node reference and exit with status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except NodeNotFoundError as e:
            echo_error(str(e))
            sys.exit(1)
    return wrapper


def open_registry(config: EngineConfig, store_path: Optional[str] = None) -> GroupRegistry:
    path = Path(store_path) if store_path else config.groups.store_path
    return GroupRegistry(JsonGroupStore(path))
