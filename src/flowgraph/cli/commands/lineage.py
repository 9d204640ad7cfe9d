"""
Lineage Commands - Impact, dependency, path and critical-node analysis.

Usage:
    flowgraph lineage pipeline.json train_model --mode impact
    flowgraph related pipeline.json train_model --no-downstream
"""

import logging
from typing import Dict, List, Optional

import click
from pydantic import BaseModel, Field
from rich.console import Console

from ...analysis.lineage import LineageAnalyzer
from ...config import EngineConfig
from ...core.graph import GraphModel
from ...core.types import LineageMode
from ..formatting import format_node_set
from ..utils import engine_config, exit_on_missing_node, load_pipeline, require_node

logger = logging.getLogger(__name__)
console = Console()


class LineageResponse(BaseModel):
    seed: str
    mode: str
    node_ids: List[str]
    count: int
    breakdown: Dict[str, List[str]] = Field(default_factory=dict)


def _render(analyzer: LineageAnalyzer, graph: GraphModel, seed: str,
            mode: str, node_ids: set, as_json: bool) -> None:
    breakdown = analyzer.breakdown(node_ids)
    if as_json:
        response = LineageResponse(
            seed=seed,
            mode=mode,
            node_ids=sorted(node_ids),
            count=len(node_ids),
            breakdown={k: v for k, v in breakdown.items() if v},
        )
        click.echo(response.model_dump_json(indent=2))
        return
    console.print(format_node_set(f"{mode.capitalize()} lineage", seed, breakdown, graph))


@click.command("lineage")
@click.argument("pipeline", type=click.Path())
@click.argument("node")
@click.option("-m", "--mode", default=LineageMode.IMPACT.value,
              type=click.Choice([m.value for m in LineageMode]),
              help="Lineage question to answer")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
@exit_on_missing_node
def lineage(obj: Optional[EngineConfig], pipeline: str, node: str,
            mode: str, as_json: bool) -> None:
    """
    Show the lineage of NODE in PIPELINE.

    \b
    Modes:
      impact      nodes affected if NODE fails
      dependency  nodes NODE depends on
      path        every source -> NODE -> sink flow
      critical    high-fan, ML and bottleneck nodes around NODE
    """
    engine_config(obj)
    document = load_pipeline(pipeline)
    graph = GraphModel(document.nodes, document.edges)
    seed = require_node(graph, node)

    analyzer = LineageAnalyzer(graph)
    _render(analyzer, graph, seed, mode, analyzer.lineage(seed, mode), as_json)


@click.command("related")
@click.argument("pipeline", type=click.Path())
@click.argument("node")
@click.option("--upstream/--no-upstream", default=True, help="Follow incoming edges")
@click.option("--downstream/--no-downstream", default=True, help="Follow outgoing edges")
@click.option("--max-depth", default=-1, type=int,
              help="Maximum traversal depth (-1 for unlimited)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
@exit_on_missing_node
def related(obj: Optional[EngineConfig], pipeline: str, node: str, upstream: bool,
            downstream: bool, max_depth: int, as_json: bool) -> None:
    """
    Show nodes upstream and/or downstream of NODE.
    """
    engine_config(obj)
    document = load_pipeline(pipeline)
    graph = GraphModel(document.nodes, document.edges)
    seed = require_node(graph, node)

    analyzer = LineageAnalyzer(graph)
    node_ids = analyzer.related(seed, upstream=upstream, downstream=downstream, max_depth=max_depth)
    _render(analyzer, graph, seed, "related", node_ids, as_json)
