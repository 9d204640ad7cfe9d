"""
Global Configuration and Defaults.

This module centralizes the layout spacing, simulation constants, palette
and file locations used across the engine. Projects can override any of the
engine settings in ``.flowgraph/config.yaml``; everything that is not set
there falls back to the defaults below.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# --- Locations ---
CONFIG_DIR = Path(".flowgraph")
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"
DEFAULT_GROUP_STORE_PATH = CONFIG_DIR / "groups.json"

# Overrides the config file location for every command
CONFIG_ENV_VAR = "FLOWGRAPH_CONFIG"

# --- Canvas ---
# Hierarchical layers are centered on a canvas at least this wide
MIN_CANVAS_WIDTH = 1200.0

# Fixed center for the circular layout
CIRCLE_CENTER_X = 600.0
CIRCLE_CENTER_Y = 400.0
# Extra inset from the padded edge to the circle
CIRCLE_INSET = 100.0

# --- Force simulation ---
FORCE_ITERATIONS = 100
FORCE_AREA_WIDTH = 800.0
FORCE_AREA_HEIGHT = 600.0
# Random initial positions are offset from the origin by this much
FORCE_AREA_MARGIN = 100.0

# --- Groups ---
GROUP_NAME_MIN_LENGTH = 2
GROUP_NAME_MAX_LENGTH = 50

DEFAULT_GROUP_COLORS: List[str] = [
    "#E3F2FD",  # Light Blue
    "#E8F5E8",  # Light Green
    "#FFF3E0",  # Light Orange
    "#F3E5F5",  # Light Purple
    "#E0F2F1",  # Light Teal
    "#FFF8E1",  # Light Yellow
    "#FFEBEE",  # Light Pink
    "#F1F8E9",  # Light Lime
]

# Groups created within this many days count as recent in registry stats
RECENT_GROUP_DAYS = 7

# --- Slicing ---
RUN_COMMAND_PREFIX = "pipeline run"


class LayoutConfig(BaseModel):
    """Node box size and spacing shared by the placement strategies."""
    node_width: float = 200.0
    node_height: float = 80.0
    horizontal_spacing: float = 60.0
    vertical_spacing: float = 120.0
    padding: float = 50.0
    min_canvas_width: float = MIN_CANVAS_WIDTH


class ForceConfig(BaseModel):
    iterations: int = Field(default=FORCE_ITERATIONS, ge=0)
    area_width: float = Field(default=FORCE_AREA_WIDTH, gt=0)
    area_height: float = Field(default=FORCE_AREA_HEIGHT, gt=0)
    area_margin: float = FORCE_AREA_MARGIN
    # Defaults to sqrt(area) / 10
    base_temperature: Optional[float] = None
    # Stop early once no node moves further than this; 0 disables the check
    tolerance: float = Field(default=0.0, ge=0)
    seed: Optional[int] = None


class SlicingConfig(BaseModel):
    command_prefix: str = RUN_COMMAND_PREFIX
    # Depth used by the CLI when --depth is not given; None means unbounded
    default_depth: Optional[int] = None


class GroupsConfig(BaseModel):
    store_path: Path = DEFAULT_GROUP_STORE_PATH


class EngineConfig(BaseModel):
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    force: ForceConfig = Field(default_factory=ForceConfig)
    slicing: SlicingConfig = Field(default_factory=SlicingConfig)
    groups: GroupsConfig = Field(default_factory=GroupsConfig)


DEFAULT_LAYOUT_CONFIG = LayoutConfig()


def resolve_config_path(explicit: Optional[str] = None) -> Path:
    """Pick the config file: explicit argument, then environment, then default."""
    if explicit:
        return Path(explicit)
    from_env = os.getenv(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    return DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> EngineConfig:
    """
    Load engine settings from YAML.

    A missing file yields the defaults. A file that is not valid YAML or does
    not match the schema raises ConfigError.
    """
    config_path = path or resolve_config_path()
    if not config_path.exists():
        logger.debug(f"No config at {config_path}, using defaults")
        return EngineConfig()

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    try:
        return EngineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e
