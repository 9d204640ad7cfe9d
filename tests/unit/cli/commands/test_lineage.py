"""Unit tests for the 'lineage' and 'related' commands."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from flowgraph.cli.commands.lineage import lineage, related

PIPELINE = {
    "nodes": [
        {"id": "src", "type": "csv_input"},
        {"id": "clean", "type": "transform", "data": {"label": "Clean Data"}},
        {"id": "train", "type": "model_train"},
        {"id": "out", "type": "csv_output"},
    ],
    "edges": [
        {"source": "src", "target": "clean"},
        {"source": "clean", "target": "train"},
        {"source": "train", "target": "out"},
    ],
}


@pytest.fixture
def pipeline(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "pipeline.json"
    path.write_text(json.dumps(PIPELINE))
    return str(path)


class TestLineageCommand:
    def test_impact_json(self, pipeline):
        result = CliRunner().invoke(lineage, [pipeline, "train", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["node_ids"] == ["out", "train"]
        assert data["count"] == 2
        assert data["breakdown"] == {"ml": ["train"], "output": ["out"]}

    def test_dependency_resolves_label(self, pipeline):
        result = CliRunner().invoke(lineage, [pipeline, "Clean Data", "-m", "dependency", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["node_ids"] == ["clean", "src"]

    def test_tree_output(self, pipeline):
        result = CliRunner().invoke(lineage, [pipeline, "train", "--mode", "path"])
        assert result.exit_code == 0
        assert "Path lineage" in result.output
        assert "seed" in result.output

    def test_unknown_node(self, pipeline):
        result = CliRunner().invoke(lineage, [pipeline, "ghost"])
        assert result.exit_code == 1
        assert "Node not found: ghost" in result.output

    @patch("flowgraph.cli.commands.lineage.LineageAnalyzer")
    def test_delegates_to_analyzer(self, mock_analyzer_cls, pipeline):
        analyzer = mock_analyzer_cls.return_value
        analyzer.lineage.return_value = {"train"}
        analyzer.breakdown.return_value = {"ml": ["train"]}

        result = CliRunner().invoke(lineage, [pipeline, "train", "-m", "critical", "--json"])

        assert result.exit_code == 0, result.output
        analyzer.lineage.assert_called_once_with("train", "critical")


class TestRelatedCommand:
    def test_upstream_only(self, pipeline):
        result = CliRunner().invoke(related, [pipeline, "train", "--no-downstream", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["node_ids"] == ["clean", "src", "train"]

    def test_max_depth(self, pipeline):
        result = CliRunner().invoke(related, [pipeline, "train", "--max-depth", "1", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["node_ids"] == ["clean", "out", "train"]
