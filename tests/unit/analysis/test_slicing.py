"""Unit tests for pipeline slicing."""

import pytest
from pydantic import ValidationError

from flowgraph.analysis.slicing import (
    SliceExtractor,
    SliceOptions,
    available_tags,
    available_types,
    slice_graph,
    slice_stats,
)
from flowgraph.core.graph import GraphModel
from flowgraph.core.types import Edge, Node, NodeData, NodeType, SliceMode


def _node(node_id, node_type=NodeType.PROCESS, tags=(), groups=()):
    return Node(id=node_id, type=node_type, data=NodeData(tags=list(tags), group_ids=list(groups)))


def _edges(*pairs):
    return [Edge(source=s, target=t) for s, t in pairs]


@pytest.fixture
def linear():
    nodes = [
        _node("A", NodeType.CSV_INPUT, tags=["ingest"], groups=["g1"]),
        _node("B", NodeType.TRANSFORM, tags=["ingest", "nightly"], groups=["g1"]),
        _node("C", NodeType.MODEL_TRAIN, tags=["nightly"]),
        _node("D", NodeType.CSV_OUTPUT),
    ]
    return nodes, _edges(("A", "B"), ("B", "C"), ("C", "D"))


class TestFilters:
    def test_type_filter_drops_dangling_edges(self, linear):
        nodes, edges = linear
        result = slice_graph(nodes, edges, SliceOptions(types=["model_train"]))
        assert result.node_ids == ["C"]
        assert result.edges == []

    def test_no_options_keeps_everything(self, linear):
        nodes, edges = linear
        result = slice_graph(nodes, edges)
        assert result.node_ids == ["A", "B", "C", "D"]
        assert len(result.edges) == 3
        assert result.command == "pipeline run"

    def test_tag_filter(self, linear):
        nodes, edges = linear
        result = slice_graph(nodes, edges, SliceOptions(tags=["nightly"]))
        assert result.node_ids == ["B", "C"]
        assert [e.id for e in result.edges] == ["B->C"]

    def test_group_filter(self, linear):
        nodes, edges = linear
        result = slice_graph(nodes, edges, SliceOptions(groups=["g1"]))
        assert result.node_ids == ["A", "B"]

    def test_filters_combine(self, linear):
        nodes, edges = linear
        result = slice_graph(nodes, edges, SliceOptions(tags=["ingest"], types=["transform"]))
        assert result.node_ids == ["B"]

    def test_idempotent(self, linear):
        nodes, edges = linear
        options = SliceOptions(tags=["nightly", "ingest"], types=["transform", "model_train"])
        once = slice_graph(nodes, edges, options)
        twice = slice_graph(once.nodes, once.edges, options)
        assert twice.nodes == once.nodes
        assert twice.edges == once.edges

    def test_inputs_untouched(self, linear):
        nodes, edges = linear
        slice_graph(nodes, edges, SliceOptions(types=["csv_output"]))
        assert len(nodes) == 4
        assert len(edges) == 3


class TestSelection:
    @pytest.fixture
    def branching(self):
        nodes = [_node(n) for n in "ABCDE"]
        return nodes, _edges(("A", "B"), ("B", "C"), ("C", "D"), ("E", "C"))

    def test_from(self, branching):
        nodes, edges = branching
        result = slice_graph(nodes, edges, SliceOptions(selection=["B"], mode=SliceMode.FROM))
        assert result.node_ids == ["B", "C", "D"]

    def test_to(self, branching):
        nodes, edges = branching
        result = slice_graph(nodes, edges, SliceOptions(selection=["C"], mode="to"))
        assert result.node_ids == ["A", "B", "C", "E"]

    def test_around_with_depth(self, branching):
        nodes, edges = branching
        result = slice_graph(nodes, edges, SliceOptions(selection=["C"], mode="around", depth=1))
        assert result.node_ids == ["B", "C", "D", "E"]

    def test_between(self, branching):
        nodes, edges = branching
        result = slice_graph(nodes, edges, SliceOptions(selection=["A", "D"], mode="between"))
        assert result.node_ids == ["A", "B", "C", "D"]

    def test_depth_bounds_walk(self, branching):
        nodes, edges = branching
        result = slice_graph(nodes, edges, SliceOptions(selection=["A"], depth=1))
        assert result.node_ids == ["A", "B"]

    def test_traversal_crosses_filtered_nodes(self, linear):
        nodes, edges = linear
        # B is filtered out by type, but A still reaches C and D through it.
        result = slice_graph(nodes, edges, SliceOptions(
            selection=["A"], types=["csv_input", "model_train", "csv_output"],
        ))
        assert result.node_ids == ["A", "C", "D"]
        assert [e.id for e in result.edges] == ["C->D"]

    def test_negative_depth_rejected(self):
        with pytest.raises(ValidationError):
            SliceOptions(depth=-1)


class TestCommand:
    def test_from_nodes(self):
        command = SliceExtractor().build_command(SliceOptions(selection=["a", "b", "a"]))
        assert command == "pipeline run --from-nodes=a,b"

    def test_between_emits_both(self):
        command = SliceExtractor().build_command(SliceOptions(selection=["a", "b"], mode="between"))
        assert command == "pipeline run --from-nodes=a,b --to-nodes=a,b"

    def test_full(self):
        options = SliceOptions(
            selection=["x"], mode="around", depth=2,
            tags=["nightly"], types=["transform", "join"], groups=["g1"],
        )
        assert SliceExtractor("kedro run").build_command(options) == (
            "kedro run --around-nodes=x --depth=2 --tags=nightly "
            "--node-types=transform,join --groups=g1"
        )

    def test_to_nodes(self):
        command = SliceExtractor().build_command(SliceOptions(selection=["x"], mode="to"))
        assert command == "pipeline run --to-nodes=x"


def test_edge_visibility_invariant(linear):
    nodes, edges = linear
    edges = edges + _edges(("A", "D"), ("D", "ghost"))
    for options in [
        SliceOptions(tags=["ingest"]),
        SliceOptions(types=["csv_input", "csv_output"]),
        SliceOptions(selection=["C"], mode="to"),
    ]:
        result = slice_graph(nodes, edges, options)
        kept = set(result.node_ids)
        for edge in result.edges:
            assert edge.source in kept
            assert edge.target in kept


def test_available_tags_and_types(linear):
    nodes, _ = linear
    assert available_tags(nodes) == ["ingest", "nightly"]
    assert available_types(nodes) == ["csv_input", "csv_output", "model_train", "transform"]


def test_slice_stats(linear):
    nodes, edges = linear
    result = slice_graph(nodes, edges, SliceOptions(tags=["nightly"]))
    stats = slice_stats(result, GraphModel(nodes, edges))
    assert stats == {"nodes": 2, "edges": 1, "total_nodes": 4, "coverage": 0.5}
