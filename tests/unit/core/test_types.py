"""Unit tests for the core pipeline models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from flowgraph.core.types import Edge, Group, Node, NodeData, NodeType, PipelineDocument, TransferType


class TestNodeData:
    def test_legacy_group_id_is_migrated(self):
        data = NodeData.model_validate({"label": "Load", "groupId": "g1"})
        assert data.group_ids == ["g1"]
        assert "groupId" not in (data.model_extra or {})

    def test_group_ids_take_precedence_over_legacy(self):
        data = NodeData.model_validate({"groupId": "old", "groupIds": ["a", "b"]})
        assert data.group_ids == ["a", "b"]

    def test_unknown_keys_survive_dump(self):
        data = NodeData.model_validate({"label": "Load", "owner": "data-eng"})
        dumped = data.model_dump(by_alias=True)
        assert dumped["owner"] == "data-eng"
        assert dumped["groupIds"] == []


class TestNode:
    def test_label_falls_back_to_id(self):
        node = Node(id="n1", type=NodeType.PROCESS)
        assert node.label == "n1"

    def test_with_position_returns_copy(self):
        node = Node(id="n1", type=NodeType.PROCESS)
        moved = node.with_position(10, 20)

        assert node.position is None
        assert moved.position.x == 10
        assert moved.position.y == 20

    def test_nodes_are_frozen(self):
        node = Node(id="n1", type=NodeType.PROCESS)
        with pytest.raises(ValidationError):
            node.id = "other"

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            Node(id="n1", type="teleporter")


class TestEdge:
    def test_default_id(self):
        edge = Edge(source="a", target="b")
        assert edge.id == "a->b"
        assert edge.data.transfer_type == TransferType.BATCH

    def test_camel_case_transfer_type(self):
        edge = Edge.model_validate({"source": "a", "target": "b", "data": {"transferType": "realtime"}})
        assert edge.data.transfer_type == TransferType.REALTIME


class TestGroup:
    def test_naive_timestamps_become_utc(self):
        group = Group(id="g", name="Team", color="#fff", created_at=datetime(2024, 1, 1))
        assert group.created_at.tzinfo == timezone.utc

    def test_camel_case_aliases(self):
        group = Group.model_validate({
            "id": "g", "name": "Team", "color": "#fff",
            "createdAt": "2024-01-01T00:00:00Z", "updatedAt": "2024-01-02T00:00:00Z",
        })
        assert group.updated_at.day == 2


def test_document_ignores_unknown_top_level_keys():
    doc = PipelineDocument.model_validate({"nodes": [], "edges": [], "viewport": {"zoom": 1}})
    assert doc.nodes == []


def test_document_skips_incomplete_group_records():
    doc = PipelineDocument.model_validate({
        "groups": [
            {"id": "g1", "name": "Team", "color": "#fff"},
            {"id": "g2", "name": "No color"},
            {"name": "No id", "color": "#000"},
        ],
    })
    assert [g.id for g in doc.groups] == ["g1"]
