"""Navigator — goal-directed steering over a cached A* path.

Each agent owns one PathCache.  The navigator decides when that cache
is stale, recomputes it through the Pathfinder, and converts the next
waypoint into a per-frame displacement.  When the pathfinder has no
route the agent falls back to the straight vector toward its goal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shadow_ai.ai.perception import Perception
from shadow_ai.core.models import Agent, Vector2

if TYPE_CHECKING:
    from shadow_ai.ai.pathfinding import Pathfinder
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.models import PathCache

logger = logging.getLogger(__name__)


def capped_toward(origin: Vector2, goal: Vector2, step: float) -> Vector2:
    """Displacement toward *goal* of at most *step* pixels (never overshoots)."""
    dist = origin.distance(goal)
    if dist == 0:
        return Vector2(0.0, 0.0)
    return Perception.direction_toward(origin, goal, min(step, dist))


class Navigator:
    """Path-cache policy plus waypoint following."""

    __slots__ = ("_pathfinder", "_config")

    def __init__(self, pathfinder: Pathfinder, config: SimulationConfig) -> None:
        self._pathfinder = pathfinder
        self._config = config

    @property
    def pathfinder(self) -> Pathfinder:
        return self._pathfinder

    def needs_refresh(self, cache: PathCache, goal: Vector2, now_ms: float, chase: bool) -> bool:
        cfg = self._config
        if cache.goal is None:
            return True
        refresh_ms = cfg.path_refresh_chase_ms if chase else cfg.path_refresh_ms
        if now_ms - cache.computed_at_ms >= refresh_ms:
            return True
        if cache.waypoints and cache.exhausted:
            return True
        if chase and cache.goal.distance(goal) > cfg.target_moved_dist:
            return True
        return False

    def steer(
        self,
        agent: Agent,
        goal: Vector2,
        step: float,
        now_ms: float,
        chase: bool = False,
    ) -> tuple[Vector2, bool]:
        """Return ``(displacement, following_path)`` for one frame.

        *step* is the distance the agent may cover this frame.  A failed
        search is remembered until the refresh interval runs out, so an
        unreachable goal costs one A* query per interval, not per frame.
        """
        cfg = self._config
        pos = agent.pos
        if pos.distance(goal) <= cfg.direct_approach_dist:
            return capped_toward(pos, goal, step), False

        cache = agent.path
        if self.needs_refresh(cache, goal, now_ms, chase):
            cache.waypoints = self._pathfinder.find_path(pos, goal)
            cache.index = 0
            cache.goal = goal
            cache.computed_at_ms = now_ms
            if not cache.waypoints:
                logger.debug("Agent %d: no path %s -> %s, steering directly", agent.id, pos, goal)

        while not cache.exhausted and pos.distance(cache.waypoints[cache.index]) <= cfg.waypoint_reached_dist:
            cache.index += 1

        if cache.exhausted:
            return capped_toward(pos, goal, step), False
        return capped_toward(pos, cache.waypoints[cache.index], step), True
