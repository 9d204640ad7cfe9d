"""
Core type definitions for flowgraph.

Field names are snake_case in Python and camelCase on the wire, so pipeline
documents exported by the editor (``groupIds``, ``transferType``,
``createdAt``) validate unchanged. All graph records are frozen: engine
functions hand back copies instead of mutating what they were given.
"""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NodeType(StrEnum):
    """Kinds of pipeline steps."""
    # Architecture
    DATA_LAKE = "data_lake"
    DATA_WAREHOUSE = "data_warehouse"
    DATA_MART = "data_mart"
    BI_TOOL = "bi_tool"
    # Inputs
    CSV_INPUT = "csv_input"
    JSON_INPUT = "json_input"
    PARQUET_INPUT = "parquet_input"
    DATABASE_INPUT = "database_input"
    API_INPUT = "api_input"
    # Processing
    PROCESS = "process"
    TRANSFORM = "transform"
    FILTER = "filter"
    AGGREGATE = "aggregate"
    JOIN = "join"
    SPLIT = "split"
    # ML
    MODEL_TRAIN = "model_train"
    MODEL_PREDICT = "model_predict"
    MODEL_EVALUATE = "model_evaluate"
    # Outputs
    CSV_OUTPUT = "csv_output"
    JSON_OUTPUT = "json_output"
    PARQUET_OUTPUT = "parquet_output"
    DATABASE_OUTPUT = "database_output"
    API_OUTPUT = "api_output"


ML_STAGE_TYPES = frozenset({
    NodeType.MODEL_TRAIN,
    NodeType.MODEL_PREDICT,
    NodeType.MODEL_EVALUATE,
})

CENTRAL_PROCESSING_TYPES = frozenset({
    NodeType.JOIN,
    NodeType.AGGREGATE,
    NodeType.TRANSFORM,
})


class TransferType(StrEnum):
    """How data moves along an edge."""
    BATCH = "batch"
    REALTIME = "realtime"


class LayoutStrategy(StrEnum):
    HIERARCHICAL = "hierarchical"
    FORCE = "force"
    CIRCULAR = "circular"
    GRID = "grid"


class LineageMode(StrEnum):
    """Named lineage questions about a seed node."""
    IMPACT = "impact"
    DEPENDENCY = "dependency"
    PATH = "path"
    CRITICAL = "critical"


class SliceMode(StrEnum):
    """How a node selection expands into a slice."""
    FROM = "from"
    TO = "to"
    BETWEEN = "between"
    AROUND = "around"


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class NodeData(BaseModel):
    """
    Editor payload attached to a node.

    Unknown keys (owner, dataset, updateFrequency, ...) are kept as extras so
    a load/save cycle does not lose them.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    label: str = ""
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    group_ids: List[str] = Field(default_factory=list, alias="groupIds")
    parameters: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _migrate_legacy_group(cls, values: Any) -> Any:
        # Older documents carry a single ``groupId``; fold it into the list form.
        if not isinstance(values, dict):
            return values
        values = dict(values)
        legacy = values.pop("groupId", None)
        legacy_snake = values.pop("group_id", None)
        legacy = legacy or legacy_snake

        current = values.get("groupIds", values.get("group_ids"))
        if not current and legacy:
            values.pop("group_ids", None)
            values["groupIds"] = [legacy]
        return values


class Node(BaseModel):
    """A typed pipeline step."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    type: NodeType
    position: Optional[Position] = None
    data: NodeData = Field(default_factory=NodeData)

    @property
    def label(self) -> str:
        return self.data.label or self.id

    def with_position(self, x: float, y: float) -> "Node":
        return self.model_copy(update={"position": Position(x=x, y=y)})

    def with_group_ids(self, group_ids: List[str]) -> "Node":
        data = self.data.model_copy(update={"group_ids": list(group_ids)})
        return self.model_copy(update={"data": data})


class EdgeData(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    transfer_type: TransferType = Field(default=TransferType.BATCH, alias="transferType")
    label: Optional[str] = None


class Edge(BaseModel):
    """
    Directed connection between two nodes.

    ``source``/``target`` should name existing nodes, but nothing enforces
    it here; the graph view drops edges whose endpoints are unknown.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = ""
    source: str
    target: str
    data: EdgeData = Field(default_factory=EdgeData)

    @model_validator(mode="before")
    @classmethod
    def _default_id(cls, values: Any) -> Any:
        if isinstance(values, dict) and not values.get("id"):
            values = dict(values)
            values["id"] = f"{values.get('source', '')}->{values.get('target', '')}"
        return values


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Group(BaseModel):
    """A named, colored label that nodes can belong to."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: Optional[str] = None
    color: str
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=_utcnow, alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None


class SliceResult(BaseModel):
    """A filtered view of a pipeline plus the run command that reproduces it."""
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    command: str = ""

    @property
    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]


class PipelineDocument(BaseModel):
    """On-disk pipeline format shared with the editor's JSON export."""
    model_config = ConfigDict(extra="ignore")

    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    groups: List[Group] = Field(default_factory=list)

    @field_validator("groups", mode="before")
    @classmethod
    def _drop_incomplete_groups(cls, value: Any) -> Any:
        # Group records without an id, name and color cannot be restored.
        if not isinstance(value, list):
            return value
        return [
            g for g in value
            if not isinstance(g, dict) or all(g.get(key) for key in ("id", "name", "color"))
        ]
