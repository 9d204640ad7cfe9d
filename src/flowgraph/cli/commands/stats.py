"""
Stats Command - Summarize a pipeline.
"""

import json
from typing import Optional

import click
from rich.console import Console

from ...analysis.slicing import available_tags
from ...config import EngineConfig
from ...core.graph import GraphModel
from ..formatting import format_stats
from ..utils import echo_warning, engine_config, load_pipeline

console = Console()


@click.command()
@click.argument("pipeline", type=click.Path())
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def stats(obj: Optional[EngineConfig], pipeline: str, as_json: bool) -> None:
    """
    Show node, edge and type counts for PIPELINE.
    """
    engine_config(obj)
    document = load_pipeline(pipeline)
    graph = GraphModel(document.nodes, document.edges)

    summary = graph.stats()
    summary["tags"] = len(available_tags(graph.iter_nodes()))
    summary["groups"] = len(document.groups)

    if as_json:
        click.echo(json.dumps(summary, indent=2))
        return

    console.print(format_stats(summary))
    if graph.dropped_edge_count:
        echo_warning(f"{graph.dropped_edge_count} edge(s) reference unknown nodes and were ignored")
