"""
CLI Commands Package.

Each command is implemented in its own module for maintainability.
"""

from . import groups
from . import layout
from . import lineage
from . import slice
from . import stats

__all__ = [
    "groups",
    "layout",
    "lineage",
    "slice",
    "stats",
]
