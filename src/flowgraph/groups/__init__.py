"""Node groups: registry service and its storage adapters."""

from .registry import (
    GROUP_DELETED,
    GROUPS_CHANGED,
    GroupRegistry,
    assign_group,
    node_group_ids,
    nodes_in_group,
    remove_membership,
)
from .store import GroupStore, JsonGroupStore, MemoryGroupStore

__all__ = [
    "GROUP_DELETED",
    "GROUPS_CHANGED",
    "GroupRegistry",
    "GroupStore",
    "JsonGroupStore",
    "MemoryGroupStore",
    "assign_group",
    "node_group_ids",
    "nodes_in_group",
    "remove_membership",
]
