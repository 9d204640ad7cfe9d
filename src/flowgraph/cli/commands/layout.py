"""
Layout Command - Compute node positions for a pipeline.
"""

import json
import logging
from typing import Dict, Optional

import click
from pydantic import BaseModel
from rich.console import Console

from ...config import EngineConfig
from ...core.document import save_document
from ...core.types import LayoutStrategy
from ...layout import layout as run_layout
from ..formatting import format_positions
from ..utils import echo_success, engine_config, load_pipeline

logger = logging.getLogger(__name__)
console = Console()


class LayoutResponse(BaseModel):
    strategy: str
    positions: Dict[str, Dict[str, float]]


@click.command("layout")
@click.argument("pipeline", type=click.Path())
@click.option("-s", "--strategy", default=LayoutStrategy.HIERARCHICAL.value,
              type=click.Choice([s.value for s in LayoutStrategy]),
              help="Placement strategy")
@click.option("--iterations", type=int, default=None,
              help="Force layout iterations (overrides config)")
@click.option("--seed", type=int, default=None,
              help="Random seed for force layout initial positions")
@click.option("-o", "--output", type=click.Path(), default=None,
              help="Write the laid-out pipeline JSON to this file")
@click.option("--json", "as_json", is_flag=True, help="Output positions as JSON")
@click.pass_obj
def layout(obj: Optional[EngineConfig], pipeline: str, strategy: str,
           iterations: Optional[int], seed: Optional[int],
           output: Optional[str], as_json: bool) -> None:
    """
    Lay out PIPELINE with the chosen strategy.
    """
    config = engine_config(obj)
    force_updates = {}
    if iterations is not None:
        force_updates["iterations"] = iterations
    if seed is not None:
        force_updates["seed"] = seed
    if force_updates:
        config = config.model_copy(update={"force": config.force.model_copy(update=force_updates)})

    document = load_pipeline(pipeline)
    placed = run_layout(document.nodes, document.edges, strategy, config)

    if output:
        save_document(document.model_copy(update={"nodes": placed}), output)
        echo_success(f"Laid out {len(placed)} nodes ({strategy}) -> {output}")
        return

    if as_json:
        response = LayoutResponse(
            strategy=strategy,
            positions={
                n.id: {"x": n.position.x, "y": n.position.y}
                for n in placed if n.position is not None
            },
        )
        click.echo(json.dumps(response.model_dump(), indent=2))
        return

    console.print(format_positions(placed))
