"""Unit tests for pipeline document IO."""

import json

import pytest

from flowgraph.core.document import dump_document, load_document, parse_document, save_document
from flowgraph.core.exceptions import DocumentLoadError


SAMPLE = {
    "nodes": [
        {"id": "a", "type": "csv_input", "position": {"x": 1, "y": 2},
         "data": {"label": "A", "groupId": "g1", "owner": "ops"}},
        {"id": "b", "type": "transform", "data": {"label": "B", "tags": ["nightly"]}},
    ],
    "edges": [{"id": "e1", "source": "a", "target": "b", "data": {"transferType": "batch"}}],
    "groups": [{"id": "g1", "name": "Ingest", "color": "#E3F2FD"}],
}


class TestDocumentIO:
    def test_parse_migrates_legacy_membership(self):
        doc = parse_document(SAMPLE)
        assert doc.nodes[0].data.group_ids == ["g1"]
        assert doc.nodes[1].data.tags == ["nightly"]

    def test_dump_uses_camel_case(self):
        dumped = dump_document(parse_document(SAMPLE))
        node = dumped["nodes"][0]
        assert node["data"]["groupIds"] == ["g1"]
        assert node["data"]["owner"] == "ops"
        assert "groupId" not in node["data"]
        assert dumped["edges"][0]["data"]["transferType"] == "batch"
        assert "createdAt" in dumped["groups"][0]

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "out" / "pipeline.json"
        save_document(parse_document(SAMPLE), path)

        loaded = load_document(path)
        assert [n.id for n in loaded.nodes] == ["a", "b"]
        assert loaded.nodes[0].position.x == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError, match="file not found"):
            load_document(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(DocumentLoadError):
            load_document(path)

    def test_invalid_node_type(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"nodes": [{"id": "x", "type": "nope"}]}))
        with pytest.raises(DocumentLoadError) as exc:
            load_document(path)
        assert exc.value.path == str(path)

    def test_top_level_must_be_object(self):
        with pytest.raises(DocumentLoadError, match="must be an object"):
            parse_document([])
