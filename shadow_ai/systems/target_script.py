"""TargetScript — a scripted stand-in for the player in headless runs.

Walks the target to every key (nearest first), then to the exit, then
roams between RNG-picked points.  Movement goes through the same
Navigator and MovementResolver the agents use, so the target obeys the
walls exactly like they do.  A goal the target makes no progress on for
``_GIVE_UP_MS`` is skipped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shadow_ai.actions.move import MovementResolver
from shadow_ai.ai.navigator import Navigator
from shadow_ai.ai.pathfinding import Pathfinder
from shadow_ai.core.enums import BehaviorKind, Domain
from shadow_ai.core.models import Rect, Vector2, make_agent

if TYPE_CHECKING:
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.world_state import WorldState
    from shadow_ai.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

_GIVE_UP_MS = 3000.0
_ROAM_ARRIVE_DIST = 10.0
_ROAM_INSET = 40.0


class TargetScript:
    """Drives ``world.target`` one frame at a time."""

    __slots__ = ("_config", "_rng", "_navigator", "_resolver", "_body",
                 "_goal", "_roaming", "_skipped", "_roam_count", "_stalled_ms")

    def __init__(
        self,
        config: SimulationConfig,
        rng: DeterministicRNG,
        world: WorldState,
        pathfinder: Pathfinder | None = None,
    ) -> None:
        self._config = config
        self._rng = rng
        self._navigator = Navigator(pathfinder or Pathfinder(world.field, config), config)
        self._resolver = MovementResolver(world.field, config)
        start = world.target.pos if world.target is not None else Vector2()
        # The target is steered as a waypoint-less body through the agent machinery
        self._body = make_agent(0, BehaviorKind.PATROL, start,
                                size=config.target_size, speed=config.target_speed)
        self._goal: Vector2 | None = None
        self._roaming = False
        self._skipped: set[Rect] = set()
        self._roam_count = 0
        self._stalled_ms = 0.0

    @property
    def goal(self) -> Vector2 | None:
        return self._goal

    def advance(self, world: WorldState, dt_ms: float) -> None:
        target = world.target
        if target is None:
            return
        body = self._body
        body.pos = target.pos

        goal = self._choose_goal(world)
        if goal != self._goal:
            body.path.clear()
            self._goal = goal
            self._stalled_ms = 0.0

        step = body.speed * dt_ms / 1000.0
        disp, following = self._navigator.steer(body, goal, step, world.elapsed_ms)
        result = self._resolver.resolve(body, disp, dt_ms)
        if result.collided and following:
            body.path.clear()

        if result.pos.distance(target.pos) < step * 0.25:
            self._stalled_ms += dt_ms
        else:
            self._stalled_ms = 0.0
        body.pos = result.pos
        target.pos = result.pos

        if self._stalled_ms >= _GIVE_UP_MS:
            self._give_up(world)

    # -- goal selection --

    def _choose_goal(self, world: WorldState) -> Vector2:
        target = world.target
        half = Vector2(target.width / 2, target.height / 2)

        keys = [k for k in world.keys if k not in self._skipped]
        if keys:
            nearest = min(keys, key=lambda k: k.center.distance(target.center))
            return nearest.center - half

        if world.exit is not None and not world.escaped and world.exit not in self._skipped:
            return world.exit.center - half

        if (not self._roaming or self._goal is None
                or target.pos.distance(self._goal) <= _ROAM_ARRIVE_DIST):
            self._roaming = True
            return self._roam_point(world)
        return self._goal

    def _roam_point(self, world: WorldState) -> Vector2:
        field = world.field
        size = self._config.target_size
        n = self._roam_count
        self._roam_count += 1
        x = self._rng.next_range(Domain.TARGET_SCRIPT, 0, n * 2, _ROAM_INSET, field.width - _ROAM_INSET - size)
        y = self._rng.next_range(Domain.TARGET_SCRIPT, 0, n * 2 + 1, _ROAM_INSET, field.height - _ROAM_INSET - size)
        return Vector2(x, y)

    def _give_up(self, world: WorldState) -> None:
        self._stalled_ms = 0.0
        half = Vector2(world.target.width / 2, world.target.height / 2)
        for rect in list(world.keys) + ([world.exit] if world.exit is not None else []):
            if rect.center - half == self._goal:
                self._skipped.add(rect)
                logger.debug("Target script skipping unreachable goal %s", self._goal)
                return
        # Roam point: drop it and pick another next frame
        self._goal = None
