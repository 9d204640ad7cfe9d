"""
Storage adapters for groups.

- JsonGroupStore: a JSON file, rewritten wholesale on every save
- MemoryGroupStore: ephemeral, for tests and embedding

Neither guards against concurrent writers; the owning process serializes
mutations.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from pydantic import ValidationError

from ..core.types import Group

logger = logging.getLogger(__name__)


class GroupStore(ABC):
    @abstractmethod
    def load(self) -> List[Group]:
        pass

    @abstractmethod
    def save(self, groups: List[Group]) -> None:
        pass


class MemoryGroupStore(GroupStore):
    def __init__(self, groups: List[Group] | None = None):
        self._groups: List[Group] = list(groups or [])
        self.save_count = 0

    def load(self) -> List[Group]:
        return list(self._groups)

    def save(self, groups: List[Group]) -> None:
        self._groups = list(groups)
        self.save_count += 1


class JsonGroupStore(GroupStore):
    """
    Groups persisted as a JSON array of camelCase records.

    Records without an id or name are skipped on load. A file that is not
    a JSON array is moved to ``<name>.bak`` and treated as empty, so the
    next save cannot overwrite what it held.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Group]:
        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text())
        except OSError as e:
            logger.warning(f"Failed to load groups from {self.path}: {e}")
            return []
        except ValueError as e:
            logger.warning(f"Failed to load groups from {self.path}: {e}")
            self._set_aside()
            return []

        if not isinstance(raw, list):
            logger.warning(f"Ignoring {self.path}: expected a JSON array of groups")
            self._set_aside()
            return []

        groups = []
        for record in raw:
            if not isinstance(record, dict) or not record.get("id") or not record.get("name"):
                continue
            try:
                groups.append(Group.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid group record {record.get('id')}: {e}")
        return groups

    def save(self, groups: List[Group]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [g.model_dump(mode="json", by_alias=True, exclude_none=True) for g in groups]
        self.path.write_text(json.dumps(payload, indent=2))

    def _set_aside(self) -> None:
        # Keep the unreadable file next to the store; the next save rewrites the path.
        backup = self.path.with_name(self.path.name + ".bak")
        try:
            self.path.replace(backup)
        except OSError as e:
            logger.error(f"Could not back up {self.path} to {backup}: {e}")
            return
        logger.warning(f"Moved unreadable group store to {backup}")
