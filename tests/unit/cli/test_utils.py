"""Unit tests for CLI utilities."""

import json

import pytest

from flowgraph.cli.utils import engine_config, exit_on_missing_node, load_pipeline, require_node, resolve_node_id
from flowgraph.config import EngineConfig
from flowgraph.core.exceptions import NodeNotFoundError
from flowgraph.core.graph import GraphModel
from flowgraph.core.types import Node, NodeData, NodeType


@pytest.fixture
def graph():
    nodes = [
        Node(id="load_orders", type=NodeType.CSV_INPUT, data=NodeData(label="Load Orders")),
        Node(id="clean_orders", type=NodeType.TRANSFORM, data=NodeData(label="Clean")),
        Node(id="orders_report", type=NodeType.CSV_OUTPUT, data=NodeData(label="Report")),
    ]
    return GraphModel(nodes, [])


class TestResolveNodeId:
    def test_exact_id(self, graph):
        assert resolve_node_id(graph, "clean_orders") == "clean_orders"

    def test_label(self, graph):
        assert resolve_node_id(graph, "load orders") == "load_orders"

    def test_prefers_suffix_match(self, graph):
        assert resolve_node_id(graph, "_orders") == "load_orders"

    def test_ambiguous_uses_first(self, graph, capsys):
        assert resolve_node_id(graph, "order") == "load_orders"
        assert "Ambiguous" in capsys.readouterr().out

    def test_missing(self, graph):
        assert resolve_node_id(graph, "nothing") is None

    def test_require_node_raises(self, graph):
        with pytest.raises(NodeNotFoundError) as exc:
            require_node(graph, "nothing")
        assert exc.value.node_ref == "nothing"

    def test_missing_node_exits(self, graph, capsys):
        @exit_on_missing_node
        def command():
            require_node(graph, "nothing")

        with pytest.raises(SystemExit) as exc:
            command()
        assert exc.value.code == 1
        assert "Node not found: nothing" in capsys.readouterr().err


class TestLoadPipeline:
    def test_valid(self, tmp_path):
        path = tmp_path / "pipeline.json"
        path.write_text(json.dumps({"nodes": [{"id": "a", "type": "process"}], "edges": []}))
        assert load_pipeline(str(path)).nodes[0].id == "a"

    def test_missing_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            load_pipeline(str(tmp_path / "missing.json"))
        assert "file not found" in capsys.readouterr().err


class TestEngineConfig:
    def test_passthrough(self):
        config = EngineConfig()
        assert engine_config(config) is config

    def test_loads_when_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert engine_config(None) == EngineConfig()

    def test_invalid_config_exits(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "config.yaml"
        path.write_text("force: {iterations: nope}")
        monkeypatch.setenv("FLOWGRAPH_CONFIG", str(path))

        with pytest.raises(SystemExit):
            engine_config(None)
        assert "Invalid configuration" in capsys.readouterr().err
