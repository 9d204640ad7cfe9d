"""Unit tests for the force-directed simulator."""

import math

import pytest

from flowgraph.config import ForceConfig
from flowgraph.core.exceptions import LayoutCancelledError
from flowgraph.core.types import Edge, Node, NodeType
from flowgraph.layout.force import ForceSimulator, force_directed_layout


def _nodes(*ids):
    return [Node(id=i, type=NodeType.PROCESS) for i in ids]


def _chain(*ids):
    return [Edge(source=a, target=b) for a, b in zip(ids, ids[1:])]


class TestForceSimulator:
    def test_seeded_runs_are_deterministic(self):
        config = ForceConfig(seed=42, iterations=30)
        nodes, edges = _nodes("a", "b", "c", "d"), _chain("a", "b", "c", "d")

        first = force_directed_layout(nodes, edges, config)
        second = force_directed_layout(nodes, edges, config)

        assert [n.position for n in first] == [n.position for n in second]

    def test_every_node_gets_finite_position(self):
        placed = force_directed_layout(_nodes("a", "b", "c"), _chain("a", "b"), ForceConfig(seed=1))
        for node in placed:
            assert math.isfinite(node.position.x)
            assert math.isfinite(node.position.y)

    def test_coincident_nodes_are_separated(self):
        nodes = [n.with_position(100, 100) for n in _nodes("a", "b")]
        placed = force_directed_layout(nodes, [], ForceConfig(seed=3, iterations=10))
        assert placed[0].position != placed[1].position

    def test_connected_nodes_end_closer_than_unconnected(self):
        config = ForceConfig(seed=7, iterations=200)
        nodes = _nodes("a", "b", "c")
        placed = {n.id: n.position for n in force_directed_layout(nodes, _chain("a", "b"), config)}

        def dist(p, q):
            return math.hypot(p.x - q.x, p.y - q.y)

        assert dist(placed["a"], placed["b"]) < dist(placed["a"], placed["c"])

    def test_zero_iterations_keeps_existing_positions(self):
        nodes = [n.with_position(5, 6) for n in _nodes("a")]
        placed = ForceSimulator(ForceConfig(iterations=0)).run(nodes, [])
        assert placed[0].position.x == 5
        assert placed[0].position.y == 6

    def test_tolerance_stops_early(self):
        ticks = []
        config = ForceConfig(seed=5, iterations=500, tolerance=1e9)
        ForceSimulator(config).run(_nodes("a", "b"), [], progress=ticks.append)
        assert ticks == [0]

    def test_empty(self):
        assert ForceSimulator().run([], []) == []


class TestCooling:
    """
    Two nodes 2px apart in a 1000x1000 area repel with k²/d ≈ 250000, far
    above any temperature used here, so every round moves each node by
    exactly the current temperature cap along the x axis.
    """

    @pytest.fixture
    def pair(self):
        return [_nodes("a")[0].with_position(0, 0), _nodes("b")[0].with_position(2, 0)]

    @staticmethod
    def _config(**kwargs):
        return ForceConfig(area_width=1000, area_height=1000, tolerance=0, **kwargs)

    def test_first_round_moves_by_base_temperature(self, pair):
        placed = ForceSimulator(self._config(base_temperature=10)).run(pair, [], iterations=1)

        assert placed[0].position.x == pytest.approx(-10)
        assert placed[1].position.x == pytest.approx(12)
        assert placed[0].position.y == pytest.approx(0)

    def test_temperature_decays_linearly(self, pair):
        # Rounds cap at 10, 8, 6, 4, 2.
        placed = ForceSimulator(self._config(base_temperature=10)).run(pair, [], iterations=5)

        assert placed[0].position.x == pytest.approx(-30)
        assert placed[1].position.x == pytest.approx(32)

    @pytest.mark.parametrize("rounds,expected", [
        (1, -8),
        (2, -8 - 4),
        (4, -8 - 6 - 4 - 2),
    ])
    def test_schedule_spans_the_run(self, pair, rounds, expected):
        placed = ForceSimulator(self._config(base_temperature=8)).run(pair, [], iterations=rounds)
        assert placed[0].position.x == pytest.approx(expected)

    def test_default_base_temperature_scales_with_area(self, pair):
        placed = ForceSimulator(self._config()).run(pair, [], iterations=1)
        # sqrt(1000 * 1000) / 10
        assert placed[0].position.x == pytest.approx(-100)


class TestCancellation:
    def test_start_cancels_previous_token(self):
        sim = ForceSimulator()
        first = sim.start()
        second = sim.start()

        assert first.cancelled
        assert not second.cancelled
        assert second.generation == first.generation + 1
        assert sim.generation == 2

    def test_superseded_run_raises(self):
        sim = ForceSimulator(ForceConfig(seed=1, iterations=50))

        def supersede(iteration):
            if iteration == 3:
                sim.start()

        with pytest.raises(LayoutCancelledError) as exc:
            sim.run(_nodes("a", "b", "c"), [], progress=supersede)
        assert exc.value.generation == 1

    def test_pre_cancelled_token(self):
        sim = ForceSimulator()
        token = sim.start()
        token.cancel()
        with pytest.raises(LayoutCancelledError):
            sim.run(_nodes("a"), [], token=token)
