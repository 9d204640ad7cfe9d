"""
Human-readable renderings of engine results.
"""

from typing import Dict, Iterable, List, Optional

from rich.table import Table
from rich.tree import Tree

from ..core.graph import GraphModel
from ..core.types import Group, Node

CATEGORY_STYLES = {
    "architecture": "magenta",
    "input": "cyan",
    "processing": "blue",
    "ml": "yellow",
    "output": "green",
    "other": "white",
}


def format_node_set(
    title: str,
    seed: str,
    breakdown: Dict[str, List[str]],
    graph: GraphModel,
) -> Tree:
    """Tree of a lineage result, bucketed by pipeline stage."""
    total = sum(len(ids) for ids in breakdown.values())
    tree = Tree(f"🔗 [bold]{title}[/bold] for [cyan]{seed}[/cyan] ({total} nodes)")
    for category, node_ids in breakdown.items():
        if not node_ids:
            continue
        style = CATEGORY_STYLES.get(category, "white")
        branch = tree.add(f"[{style}]{category}[/{style}] ({len(node_ids)})")
        for node_id in node_ids:
            node = graph.get_node(node_id)
            label = node.label if node else node_id
            marker = " [bold]◀ seed[/bold]" if node_id == seed else ""
            branch.add(f"{label} [dim]{node_id}[/dim]{marker}")
    return tree


def format_positions(nodes: Iterable[Node]) -> Table:
    table = Table(title="Layout")
    table.add_column("Node")
    table.add_column("Type", style="dim")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    for node in nodes:
        if node.position is None:
            table.add_row(node.id, node.type.value, "-", "-")
        else:
            table.add_row(node.id, node.type.value, f"{node.position.x:.1f}", f"{node.position.y:.1f}")
    return table


def format_groups(groups: List[Group], members: Optional[Dict[str, int]] = None) -> Table:
    table = Table(title="Groups")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Color")
    table.add_column("Description")
    if members is not None:
        table.add_column("Nodes", justify="right")
    for group in groups:
        row = [group.id, group.name, group.color, group.description or ""]
        if members is not None:
            row.append(str(members.get(group.id, 0)))
        table.add_row(*row)
    return table


def format_stats(stats: Dict[str, object]) -> Table:
    table = Table(title="Pipeline statistics", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    for key, value in stats.items():
        if isinstance(value, dict):
            for sub_key, sub_value in sorted(value.items()):
                table.add_row(f"{key}.{sub_key}", str(sub_value))
        else:
            table.add_row(key, str(value))
    return table
