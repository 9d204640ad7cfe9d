"""
Groups Commands - Manage named node groups.

Usage:
    flowgraph groups create "Feature Engineering" -d "Shared features"
    flowgraph groups list --pipeline pipeline.json
    flowgraph groups delete group_1712... --pipeline pipeline.json
    flowgraph groups import pipeline.json
"""

import json
import logging
from collections import Counter
from typing import Optional

import click
from rich.console import Console

from ...core.document import save_document
from ...core.graph import GraphModel
from ...groups.registry import GroupRegistry, assign_group, nodes_in_group, remove_membership
from ..formatting import format_groups
from ..utils import (
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    engine_config,
    exit_on_missing_node,
    load_pipeline,
    open_registry,
    require_node,
)

logger = logging.getLogger(__name__)
console = Console()

store_option = click.option(
    "--store", "store_path", type=click.Path(), default=None,
    help="Group store file (default from config)",
)


def _registry(ctx: click.Context) -> GroupRegistry:
    config = engine_config(ctx.obj)
    return open_registry(config, ctx.meta.get("flowgraph.store_path"))


def _require_group(registry: GroupRegistry, group_ref: str) -> str:
    """Resolve a group by id or (case-insensitive) name."""
    if registry.get_group(group_ref):
        return group_ref
    wanted = group_ref.lower()
    for group in registry.list_groups():
        if group.name.lower() == wanted:
            return group.id
    echo_error(f"Group not found: {group_ref}")
    raise SystemExit(1)


@click.group()
@store_option
@click.pass_context
def groups(ctx: click.Context, store_path: Optional[str]) -> None:
    """Create, rename, delete and inspect node groups."""
    ctx.meta["flowgraph.store_path"] = store_path


@groups.command("list")
@click.option("--pipeline", type=click.Path(), default=None,
              help="Count members in this pipeline")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_groups(ctx: click.Context, pipeline: Optional[str], as_json: bool) -> None:
    """List all groups, sorted by name."""
    registry = _registry(ctx)
    found = registry.list_groups()

    members = None
    if pipeline:
        document = load_pipeline(pipeline)
        members = Counter(gid for node in document.nodes for gid in node.data.group_ids)

    if as_json:
        payload = [g.model_dump(mode="json", by_alias=True) for g in found]
        if members is not None:
            for entry in payload:
                entry["nodeCount"] = members.get(entry["id"], 0)
        click.echo(json.dumps(payload, indent=2))
        return

    if not found:
        echo_warning("No groups defined")
        return
    console.print(format_groups(found, members))


@groups.command("create")
@click.argument("name")
@click.option("-d", "--description", default=None, help="Group description")
@click.option("--color", default=None, help="Background color (default: next free palette color)")
@click.option("--pipeline", type=click.Path(), default=None,
              help="Pipeline to add members to")
@click.option("--node", "node_refs", multiple=True, help="Add this node to the group")
@click.pass_context
@exit_on_missing_node
def create(ctx: click.Context, name: str, description: Optional[str], color: Optional[str],
           pipeline: Optional[str], node_refs: tuple) -> None:
    """Create a group called NAME."""
    if node_refs and not pipeline:
        echo_error("--node requires --pipeline")
        raise SystemExit(1)

    document = None
    node_ids = []
    if pipeline and node_refs:
        document = load_pipeline(pipeline)
        graph = GraphModel(document.nodes, document.edges)
        node_ids = [require_node(graph, ref) for ref in node_refs]

    registry = _registry(ctx)
    result = registry.create_group(name, description=description, color=color)
    if result.is_err():
        echo_error(result.error)
        raise SystemExit(1)

    group = result.unwrap()
    echo_success(f"Created group '{group.name}' ({group.id})")
    echo_info(f"Color: {group.color}")

    if document is not None:
        updated = assign_group(document.nodes, node_ids, group.id)
        save_document(document.model_copy(update={"nodes": updated}), pipeline)
        echo_info(f"Added {len(node_ids)} node(s) to {pipeline}")


@groups.command("update")
@click.argument("group")
@click.option("--name", default=None, help="New name")
@click.option("-d", "--description", default=None, help="New description (empty clears it)")
@click.option("--color", default=None, help="New color")
@click.pass_context
def update(ctx: click.Context, group: str, name: Optional[str],
           description: Optional[str], color: Optional[str]) -> None:
    """Rename or restyle GROUP (id or name)."""
    registry = _registry(ctx)
    group_id = _require_group(registry, group)

    if name is not None:
        check = registry.validate_name(name, exclude_id=group_id)
        if not check.valid:
            echo_error(check.error)
            raise SystemExit(1)

    if not registry.update_group(group_id, name=name, description=description, color=color):
        echo_error(f"Could not update group {group}")
        raise SystemExit(1)
    echo_success(f"Updated group {registry.get_group(group_id).name}")


@groups.command("delete")
@click.argument("group")
@click.option("--pipeline", type=click.Path(), default=None,
              help="Also drop the membership from this pipeline")
@click.pass_context
def delete(ctx: click.Context, group: str, pipeline: Optional[str]) -> None:
    """Delete GROUP (id or name)."""
    registry = _registry(ctx)
    group_id = _require_group(registry, group)

    registry.delete_group(group_id)
    echo_success(f"Deleted group {group_id}")

    if pipeline:
        document = load_pipeline(pipeline)
        before = len(nodes_in_group(document.nodes, group_id))
        updated = remove_membership(document.nodes, group_id)
        groups_left = [g for g in document.groups if g.id != group_id]
        save_document(document.model_copy(update={"nodes": updated, "groups": groups_left}), pipeline)
        echo_info(f"Removed membership from {before} node(s) in {pipeline}")


@groups.command("import")
@click.argument("pipeline", type=click.Path())
@click.option("--merge", is_flag=True,
              help="Keep existing groups instead of replacing them")
@click.pass_context
def import_(ctx: click.Context, pipeline: str, merge: bool) -> None:
    """Load the groups saved in PIPELINE into the group store."""
    document = load_pipeline(pipeline)
    registry = _registry(ctx)

    restored = registry.import_groups(document.groups, replace=not merge)
    skipped = len(document.groups) - len(restored)
    echo_success(f"Imported {len(restored)} group(s) from {pipeline}")
    if skipped:
        echo_warning(f"Skipped {skipped} group(s) with a name already in use")


@groups.command("members")
@click.argument("group")
@click.argument("pipeline", type=click.Path())
@click.pass_context
def members(ctx: click.Context, group: str, pipeline: str) -> None:
    """List the nodes of PIPELINE that belong to GROUP."""
    registry = _registry(ctx)
    group_id = _require_group(registry, group)
    document = load_pipeline(pipeline)

    found = nodes_in_group(document.nodes, group_id)
    name = registry.get_group(group_id).name
    if not found:
        echo_warning(f"No nodes in group '{name}'")
        return

    click.echo(f"🏷️  {name} ({len(found)} nodes)")
    for node in found:
        echo_info(f"{node.label} [{node.type.value}] {node.id}")
