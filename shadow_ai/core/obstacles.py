"""Static obstacle field for one level."""

from __future__ import annotations

from typing import Iterable, Iterator

from shadow_ai.core.geometry import DEFAULT_LOS_STEP, rects_overlap, segment_clear_of_obstacles
from shadow_ai.core.models import Rect, Vector2


class ObstacleField:
    """Immutable set of wall rectangles plus the play-area bounds.

    Shared read-only by every agent within a frame.
    """

    __slots__ = ("_obstacles", "width", "height")

    def __init__(self, obstacles: Iterable[Rect], width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Play area must be positive, got {width}x{height}")
        self._obstacles: tuple[Rect, ...] = tuple(obstacles)
        self.width = width
        self.height = height

    @property
    def obstacles(self) -> tuple[Rect, ...]:
        return self._obstacles

    def __iter__(self) -> Iterator[Rect]:
        return iter(self._obstacles)

    def __len__(self) -> int:
        return len(self._obstacles)

    # -- queries --

    def overlaps_any(self, rect: Rect) -> bool:
        for o in self._obstacles:
            if rects_overlap(rect, o):
                return True
        return False

    def segment_clear(self, x1: float, y1: float, x2: float, y2: float,
                      step: float = DEFAULT_LOS_STEP) -> bool:
        return segment_clear_of_obstacles(x1, y1, x2, y2, self._obstacles, step)

    def clamp_position(self, pos: Vector2, width: float, height: float, margin: float) -> Vector2:
        """Clamp a box's top-left so the box stays *margin* inside the play area."""
        x = max(margin, min(pos.x, self.width - margin - width))
        y = max(margin, min(pos.y, self.height - margin - height))
        return Vector2(x, y)
