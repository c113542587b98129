"""Geometry and collision helpers.

Line-of-sight is a sampling heuristic: the segment is probed every
``step`` pixels against the obstacle rectangles.  Detection timing of the
AI depends on this quantization, so it is not replaced by an exact
segment/rectangle intersection.
"""

from __future__ import annotations

import math
from typing import Iterable

from shadow_ai.core.models import Rect

DEFAULT_LOS_STEP = 3.0


def rects_overlap(a: Rect, b: Rect) -> bool:
    """True iff *a* and *b* intersect.  Touching edges do not count."""
    return a.x < b.x + b.width and a.x + a.width > b.x and a.y < b.y + b.height and a.y + a.height > b.y


def point_in_rect(px: float, py: float, r: Rect) -> bool:
    return r.contains_point(px, py)


def segment_clear_of_obstacles(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    obstacles: Iterable[Rect],
    step: float = DEFAULT_LOS_STEP,
) -> bool:
    """Return False if any sample along the segment lies inside an obstacle.

    Samples ``i = 1..steps`` with ``steps = floor(length / step)``; the
    start point itself is not tested.  Zero-step segments are clear.
    """
    dx = x2 - x1
    dy = y2 - y1
    steps = int(math.hypot(dx, dy) // step)
    if steps == 0:
        return True
    obstacles = tuple(obstacles)
    sx = dx / steps
    sy = dy / steps
    for i in range(1, steps + 1):
        px = x1 + sx * i
        py = y1 + sy * i
        for o in obstacles:
            if point_in_rect(px, py, o):
                return False
    return True
