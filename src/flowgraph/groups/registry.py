"""
Group Registry.

CRUD over user-defined node groups, backed by a GroupStore that is read once
at construction and rewritten after every mutation. Observers subscribe
through the EventEmitter handed in by the caller:

- ``groups:changed`` fires after any mutation with the sorted group list
- ``group:deleted`` fires after a delete with the removed id, so selection
  state that references it (a group filter) can drop it specifically

Node membership is many-to-many and lives on the nodes (``data.group_ids``);
the helpers at the bottom of this module return updated node copies.
"""

import logging
import random
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..config import (
    DEFAULT_GROUP_COLORS,
    GROUP_NAME_MAX_LENGTH,
    GROUP_NAME_MIN_LENGTH,
    RECENT_GROUP_DAYS,
)
from ..core.events import EventEmitter
from ..core.result import Err, Ok, Result
from ..core.types import Group, Node, ValidationResult
from .store import GroupStore

logger = logging.getLogger(__name__)

GROUPS_CHANGED = "groups:changed"
GROUP_DELETED = "group:deleted"

NAME_REQUIRED = "Group name is required"
NAME_TOO_SHORT = f"Group name must be at least {GROUP_NAME_MIN_LENGTH} characters"
NAME_TOO_LONG = f"Group name must be less than {GROUP_NAME_MAX_LENGTH} characters"
NAME_NOT_UNIQUE = "Group name already exists"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GroupRegistry:
    """In-memory group map with write-through persistence and notifications."""

    def __init__(
        self,
        store: GroupStore,
        events: Optional[EventEmitter] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.events = events or EventEmitter()
        self._clock = clock or _utcnow
        self._rng = rng or random.Random()
        self._groups: Dict[str, Group] = {g.id: g for g in store.load()}
        logger.debug(f"Loaded {len(self._groups)} group(s)")

    def _new_id(self) -> str:
        millis = int(self._clock().timestamp() * 1000)
        return f"group_{millis}_{uuid.uuid4().hex[:9]}"

    def _commit(self) -> None:
        self.store.save(list(self._groups.values()))
        self.events.emit(GROUPS_CHANGED, self.list_groups())

    # =========================================================================
    # Validation
    # =========================================================================

    def is_name_unique(self, name: str, exclude_id: Optional[str] = None) -> bool:
        wanted = name.strip().lower()
        return not any(
            g.id != exclude_id and g.name.lower() == wanted
            for g in self._groups.values()
        )

    def validate_name(self, name: str, exclude_id: Optional[str] = None) -> ValidationResult:
        trimmed = name.strip()
        if not trimmed:
            return ValidationResult(valid=False, error=NAME_REQUIRED)
        if len(trimmed) < GROUP_NAME_MIN_LENGTH:
            return ValidationResult(valid=False, error=NAME_TOO_SHORT)
        if len(trimmed) > GROUP_NAME_MAX_LENGTH:
            return ValidationResult(valid=False, error=NAME_TOO_LONG)
        if not self.is_name_unique(trimmed, exclude_id):
            return ValidationResult(valid=False, error=NAME_NOT_UNIQUE)
        return ValidationResult(valid=True)

    # =========================================================================
    # CRUD
    # =========================================================================

    def create_group(
        self,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Result[Group, str]:
        check = self.validate_name(name)
        if not check.valid:
            return Err(check.error)

        now = self._clock()
        group = Group(
            id=self._new_id(),
            name=name.strip(),
            description=(description or "").strip() or None,
            color=color or self.next_available_color(),
            created_at=now,
            updated_at=now,
        )
        self._groups[group.id] = group
        self._commit()
        logger.info(f"Created group {group.name} ({group.id})")
        return Ok(group)

    def restore_group(self, group: Group) -> Result[Group, str]:
        """Insert a group with its original id, e.g. from an imported document."""
        if not self.is_name_unique(group.name, exclude_id=group.id):
            return Err(NAME_NOT_UNIQUE)
        self._groups[group.id] = group
        self._commit()
        return Ok(group)

    def import_groups(self, groups: Iterable[Group], replace: bool = True) -> List[Group]:
        """
        Load groups from a pipeline document, keeping their ids.

        With ``replace`` every current group is deleted first (observers see
        each deletion). Records whose name clashes with a group already in
        the registry are skipped. Returns the groups that were restored.
        """
        if replace:
            for group_id in list(self._groups):
                self.delete_group(group_id)

        restored = []
        for group in groups:
            result = self.restore_group(group)
            if result.is_err():
                logger.warning(f"Skipping imported group {group.id} ({group.name}): {result.error}")
                continue
            restored.append(result.unwrap())
        return restored

    def update_group(
        self,
        group_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> bool:
        group = self._groups.get(group_id)
        if group is None:
            return False

        updates = {"updated_at": self._clock()}
        if name is not None:
            check = self.validate_name(name, exclude_id=group_id)
            if not check.valid:
                logger.info(f"Rejected rename of {group_id}: {check.error}")
                return False
            updates["name"] = name.strip()
        if description is not None:
            updates["description"] = description.strip() or None
        if color is not None:
            updates["color"] = color

        self._groups[group_id] = group.model_copy(update=updates)
        self._commit()
        return True

    def delete_group(self, group_id: str) -> bool:
        if group_id not in self._groups:
            return False

        del self._groups[group_id]
        self._commit()
        self.events.emit(GROUP_DELETED, group_id)
        return True

    def get_group(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)

    def list_groups(self) -> List[Group]:
        return sorted(self._groups.values(), key=lambda g: g.name.lower())

    # =========================================================================
    # Colors
    # =========================================================================

    def available_colors(self) -> List[str]:
        used = {g.color for g in self._groups.values()}
        return [c for c in DEFAULT_GROUP_COLORS if c not in used]

    def next_available_color(self) -> str:
        """First unused palette color, then a random light HSL."""
        free = self.available_colors()
        if free:
            return free[0]
        return f"hsl({self._rng.randrange(360)}, 70%, 95%)"

    # =========================================================================
    # Membership & stats
    # =========================================================================

    def resolve_membership(self, node: Node) -> List[Group]:
        """Groups the node belongs to; ids of deleted groups are skipped."""
        return [self._groups[gid] for gid in node_group_ids(node) if gid in self._groups]

    def stats(self) -> Dict[str, object]:
        threshold = self._clock() - timedelta(days=RECENT_GROUP_DAYS)
        color_usage: Dict[str, int] = defaultdict(int)
        for group in self._groups.values():
            color_usage[group.color] += 1
        return {
            "total_groups": len(self._groups),
            "recent_groups": sum(1 for g in self._groups.values() if g.created_at > threshold),
            "color_usage": dict(color_usage),
        }


def node_group_ids(node: Node) -> List[str]:
    # Legacy ``groupId`` is already folded into group_ids at load time.
    return list(node.data.group_ids)


def nodes_in_group(nodes: Iterable[Node], group_id: str) -> List[Node]:
    return [n for n in nodes if group_id in n.data.group_ids]


def assign_group(nodes: Sequence[Node], node_ids: Iterable[str], group_id: str) -> List[Node]:
    """Copies of ``nodes`` with ``group_id`` added to the chosen ones."""
    chosen = set(node_ids)
    updated = []
    for node in nodes:
        if node.id in chosen and group_id not in node.data.group_ids:
            node = node.with_group_ids([*node.data.group_ids, group_id])
        updated.append(node)
    return updated


def remove_membership(nodes: Sequence[Node], group_id: str) -> List[Node]:
    """Copies of ``nodes`` with every reference to ``group_id`` dropped."""
    updated = []
    for node in nodes:
        if group_id in node.data.group_ids:
            node = node.with_group_ids([g for g in node.data.group_ids if g != group_id])
        updated.append(node)
    return updated
