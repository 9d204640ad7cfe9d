"""
Slice Command - Narrow a pipeline and print the matching run command.

Usage:
    flowgraph slice pipeline.json --tag nightly
    flowgraph slice pipeline.json --select train_model --mode to --depth 2
"""

import logging
from typing import List, Optional, Tuple

import click
from pydantic import BaseModel
from rich.console import Console

from ...analysis.slicing import SliceExtractor, SliceOptions, slice_stats
from ...config import EngineConfig
from ...core.document import save_document
from ...core.graph import GraphModel
from ...core.types import PipelineDocument, SliceMode
from ..utils import (
    echo_info,
    echo_success,
    echo_warning,
    engine_config,
    exit_on_missing_node,
    load_pipeline,
    require_node,
)

logger = logging.getLogger(__name__)
console = Console()


class SliceResponse(BaseModel):
    command: str
    node_ids: List[str]
    edge_ids: List[str]
    coverage: float


@click.command("slice")
@click.argument("pipeline", type=click.Path())
@click.option("-t", "--tag", "tags", multiple=True, help="Keep nodes carrying this tag")
@click.option("--type", "types", multiple=True, help="Keep nodes of this type")
@click.option("-g", "--group", "groups", multiple=True, help="Keep members of this group id")
@click.option("--select", "selection", multiple=True, help="Expand from this node")
@click.option("-m", "--mode", default=SliceMode.FROM.value,
              type=click.Choice([m.value for m in SliceMode]),
              help="How selected nodes expand")
@click.option("-d", "--depth", type=click.IntRange(min=0), default=None,
              help="Hops to follow from selected nodes (default: unbounded)")
@click.option("-o", "--output", type=click.Path(), default=None,
              help="Write the sliced pipeline JSON to this file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
@exit_on_missing_node
def slice_(obj: Optional[EngineConfig], pipeline: str, tags: Tuple[str, ...],
           types: Tuple[str, ...], groups: Tuple[str, ...], selection: Tuple[str, ...],
           mode: str, depth: Optional[int], output: Optional[str], as_json: bool) -> None:
    """
    Slice PIPELINE by tags, types, groups and a node selection.
    """
    config = engine_config(obj)
    document = load_pipeline(pipeline)
    graph = GraphModel(document.nodes, document.edges)

    options = SliceOptions(
        tags=list(tags),
        types=list(types),
        groups=list(groups),
        selection=[require_node(graph, ref) for ref in selection],
        mode=mode,
        depth=depth if depth is not None else config.slicing.default_depth,
    )
    result = SliceExtractor(config.slicing.command_prefix).extract(
        document.nodes, document.edges, options
    )
    stats = slice_stats(result, graph)

    if output:
        sliced = PipelineDocument(nodes=result.nodes, edges=result.edges, groups=document.groups)
        save_document(sliced, output)

    if as_json:
        response = SliceResponse(
            command=result.command,
            node_ids=result.node_ids,
            edge_ids=[e.id for e in result.edges],
            coverage=stats["coverage"],
        )
        click.echo(response.model_dump_json(indent=2))
        return

    if not result.nodes:
        echo_warning("No nodes match the current filters")
    else:
        echo_success(f"{stats['nodes']}/{stats['total_nodes']} nodes, {stats['edges']} edges")
        for node in result.nodes:
            echo_info(f"{node.label} ({node.type.value})")
    if output:
        echo_info(f"Slice written to {output}")

    console.print(f"\n[bold]Run:[/bold] [cyan]{result.command}[/cyan]")
