"""
Force-directed layout.

A Fruchterman-Reingold style simulation: every pair of nodes repels with
``k² / d``, every edge pulls its endpoints together with ``d² / k``, and a
linear cooling schedule caps how far a node may move each round so the
layout settles instead of oscillating.

Each run is tied to a CancellationToken. Starting a new run on the same
simulator cancels the previous token, and a cancelled run stops at the next
iteration boundary with LayoutCancelledError.
"""

import logging
import math
import random
from typing import Callable, List, Optional, Sequence

from ..config import ForceConfig
from ..core.exceptions import LayoutCancelledError
from ..core.graph import GraphModel
from ..core.types import Edge, Node

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class CancellationToken:
    """Generation-stamped flag checked once per simulation round."""

    def __init__(self, generation: int):
        self.generation = generation
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ForceSimulator:
    """
    Iterative spring/repulsion simulation.

    Cost is O(n² · iterations); this is the only layout expensive enough to
    notice on large graphs.
    """

    def __init__(self, config: Optional[ForceConfig] = None):
        self.config = config or ForceConfig()
        self._generation = 0
        self._active: Optional[CancellationToken] = None

    @property
    def generation(self) -> int:
        return self._generation

    def start(self) -> CancellationToken:
        """Issue a token for a new run, cancelling the one still in flight."""
        if self._active is not None:
            self._active.cancel()
        self._generation += 1
        self._active = CancellationToken(self._generation)
        return self._active

    def run(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        iterations: Optional[int] = None,
        token: Optional[CancellationToken] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> List[Node]:
        """Return copies of ``nodes`` with simulated positions."""
        token = token or self.start()
        if not nodes:
            return []

        cfg = self.config
        rounds = cfg.iterations if iterations is None else iterations
        rng = random.Random(cfg.seed)
        n = len(nodes)

        xs: List[float] = []
        ys: List[float] = []
        for node in nodes:
            if node.position is None:
                xs.append(rng.random() * cfg.area_width + cfg.area_margin)
                ys.append(rng.random() * cfg.area_height + cfg.area_margin)
            else:
                xs.append(node.position.x)
                ys.append(node.position.y)

        area = cfg.area_width * cfg.area_height
        k = math.sqrt(area / n)
        base_temperature = cfg.base_temperature
        if base_temperature is None:
            base_temperature = math.sqrt(area) / 10

        graph = GraphModel(nodes, edges)
        index = {}
        for i, node in enumerate(nodes):
            index.setdefault(node.id, i)
        springs = [(index[e.source], index[e.target]) for e in graph.iter_edges()]

        for iteration in range(rounds):
            if token.cancelled:
                logger.debug(f"Force layout run {token.generation} cancelled at iteration {iteration}")
                raise LayoutCancelledError(token.generation)

            vx = [0.0] * n
            vy = [0.0] * n

            # Repulsion: each unordered pair once, applied to both sides.
            for i in range(n):
                for j in range(i + 1, n):
                    dx = xs[i] - xs[j]
                    dy = ys[i] - ys[j]
                    raw = math.hypot(dx, dy)
                    if raw == 0.0:
                        # Coincident nodes get a random push direction.
                        angle = rng.random() * 2 * math.pi
                        dx, dy = math.cos(angle), math.sin(angle)
                        raw = 1.0
                    distance = max(raw, 1.0)
                    force = (k * k) / distance
                    fx = (dx / raw) * force
                    fy = (dy / raw) * force
                    vx[i] += fx
                    vy[i] += fy
                    vx[j] -= fx
                    vy[j] -= fy

            # Attraction along edges.
            for s, t in springs:
                dx = xs[t] - xs[s]
                dy = ys[t] - ys[s]
                raw = math.hypot(dx, dy)
                if raw == 0.0:
                    continue
                distance = max(raw, 1.0)
                force = (distance * distance) / k
                fx = (dx / raw) * force
                fy = (dy / raw) * force
                vx[s] += fx
                vy[s] += fy
                vx[t] -= fx
                vy[t] -= fy

            temperature = base_temperature * (1 - iteration / rounds)
            largest_step = 0.0
            for i in range(n):
                speed = math.hypot(vx[i], vy[i])
                if speed > 0:
                    step = min(speed, temperature)
                    xs[i] += (vx[i] / speed) * step
                    ys[i] += (vy[i] / speed) * step
                    largest_step = max(largest_step, step)

            if progress is not None:
                progress(iteration)

            if cfg.tolerance > 0 and largest_step < cfg.tolerance:
                logger.debug(f"Force layout converged after {iteration + 1} iterations")
                break

        return [node.with_position(xs[i], ys[i]) for i, node in enumerate(nodes)]


def force_directed_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    config: Optional[ForceConfig] = None,
    iterations: Optional[int] = None,
) -> List[Node]:
    return ForceSimulator(config).run(nodes, edges, iterations=iterations)
