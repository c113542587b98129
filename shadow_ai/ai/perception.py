"""Perception — what an agent can see of the target.

All methods are stateless and read only the obstacle field and the
target; nothing here mutates agent state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shadow_ai.core.models import Agent, Target, Vector2

if TYPE_CHECKING:
    from shadow_ai.core.obstacles import ObstacleField


class Perception:
    """Stateless perception utilities."""

    __slots__ = ()

    # ------------------------------------------------------------------
    # Distance
    # ------------------------------------------------------------------

    @staticmethod
    def distance_to_target(agent: Agent, target: Target | None) -> float:
        """Top-left to top-left distance; infinite when there is no target."""
        if target is None:
            return float("inf")
        return agent.pos.distance(target.pos)

    # ------------------------------------------------------------------
    # Line of sight
    # ------------------------------------------------------------------

    @staticmethod
    def has_line_of_sight(agent: Agent, target: Target | None, field: ObstacleField, step: float) -> bool:
        """Center-to-center sampled ray from *agent* to *target*."""
        if target is None:
            return False
        a = agent.center
        t = target.center
        return field.segment_clear(a.x, a.y, t.x, t.y, step)

    @staticmethod
    def line_of_sight_between(a: Vector2, b: Vector2, field: ObstacleField, step: float) -> bool:
        return field.segment_clear(a.x, a.y, b.x, b.y, step)

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    @staticmethod
    def detects(
        agent: Agent,
        target: Target | None,
        field: ObstacleField,
        detection_range: float,
        step: float,
    ) -> bool:
        """Target is closer than *detection_range* and not hidden behind a wall."""
        if target is None:
            return False
        if agent.pos.distance(target.pos) >= detection_range:
            return False
        return Perception.has_line_of_sight(agent, target, field, step)

    # ------------------------------------------------------------------
    # Direction helpers
    # ------------------------------------------------------------------

    @staticmethod
    def direction_toward(origin: Vector2, target: Vector2, speed: float) -> Vector2:
        """Displacement of length *speed* from *origin* toward *target*."""
        delta = target - origin
        dist = delta.length()
        if dist == 0:
            return Vector2(0.0, 0.0)
        return Vector2(delta.x / dist * speed, delta.y / dist * speed)
