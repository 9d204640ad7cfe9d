"""
Transition frames between two layouts.

Callers that animate a re-layout step through the frames this module
produces; the engine itself never sleeps or schedules anything.
"""

from typing import Dict, Iterator, List, Sequence

from ..core.types import Node, Position


def ease_out_cubic(progress: float) -> float:
    clamped = min(max(progress, 0.0), 1.0)
    return 1 - (1 - clamped) ** 3


def interpolate_positions(
    current: Sequence[Node],
    target: Sequence[Node],
    progress: float,
) -> List[Node]:
    """
    Blend ``current`` toward ``target`` at eased ``progress`` in [0, 1].

    Nodes absent from ``target`` (or without a position on either side) are
    returned unchanged.
    """
    eased = ease_out_cubic(progress)
    goals: Dict[str, Position] = {
        node.id: node.position for node in target if node.position is not None
    }

    frame = []
    for node in current:
        goal = goals.get(node.id)
        start = node.position
        if goal is None or start is None:
            frame.append(node)
            continue
        frame.append(node.with_position(
            start.x + (goal.x - start.x) * eased,
            start.y + (goal.y - start.y) * eased,
        ))
    return frame


def transition_frames(
    current: Sequence[Node],
    target: Sequence[Node],
    steps: int = 30,
) -> Iterator[List[Node]]:
    """Yield ``steps`` frames; the last one sits exactly on ``target``."""
    steps = max(steps, 1)
    for step in range(1, steps + 1):
        yield interpolate_positions(current, target, step / steps)
