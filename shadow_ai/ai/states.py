"""AI state handlers — one class per behavior variant.

Architecture:
  - AIContext bundles everything a handler needs for one agent and one
    frame (agent, world, config, navigator, frame delta).
  - Each handler implements ``handle`` and returns a MoveIntent.  It may
    update the agent's mind and path cache; it never writes positions
    except for the chase anchor snap.
  - Handlers are registered in STATE_HANDLERS by BehaviorKind.

Patrol:
  walks its waypoint loop forever, ignoring the target.

Guard:
  IDLE → HUNTING (target detected)
  HUNTING → HUNTING (grace countdown, standing still) → RETURNING
  RETURNING → HUNTING (detected) | IDLE (at anchor)

Chase:
  any → HUNTING (target detected)
  HUNTING → SEARCHING (reached last-known) | RETURNING (hunt expired)
  SEARCHING → RETURNING (hunt expired)
  RETURNING → IDLE (grace elapsed, snapped onto anchor)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shadow_ai.actions.base import MoveIntent
from shadow_ai.ai.perception import Perception
from shadow_ai.core.enums import BehaviorKind, HuntState
from shadow_ai.core.models import Agent, ChaseMind, GuardMind, PatrolMind, Vector2

if TYPE_CHECKING:
    from shadow_ai.ai.navigator import Navigator
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.models import Target
    from shadow_ai.core.world_state import WorldState

logger = logging.getLogger(__name__)


# =====================================================================
# AI Context: single object passed to every handler
# =====================================================================

@dataclass(slots=True)
class AIContext:
    """All data a state handler might need for one agent and one frame."""

    agent: Agent
    world: WorldState
    config: SimulationConfig
    navigator: Navigator
    dt_ms: float

    @property
    def target(self) -> Target | None:
        return self.world.target

    @property
    def now_ms(self) -> float:
        return self.world.elapsed_ms

    def step(self, mult: float) -> float:
        """Pixels the agent may cover this frame at ``speed * mult``."""
        return self.agent.speed * mult * self.dt_ms / 1000.0

    def steer(self, goal: Vector2, mult: float, reason: str, chase: bool = False) -> MoveIntent:
        disp, following = self.navigator.steer(self.agent, goal, self.step(mult), self.now_ms, chase)
        return MoveIntent(
            agent_id=self.agent.id,
            displacement=disp,
            hunt_state=self.agent.hunt_state,
            reason=reason,
            following_path=following,
        )

    def still(self, reason: str) -> MoveIntent:
        return MoveIntent(agent_id=self.agent.id, hunt_state=self.agent.hunt_state, reason=reason)

    def detects_target(self, detection_range: float) -> bool:
        return Perception.detects(self.agent, self.world.target, self.world.field,
                                  detection_range, self.config.los_step)


# =====================================================================
# Shared helpers
# =====================================================================

def flank_candidates(target_pos: Vector2, config: SimulationConfig,
                     width: float, height: float) -> list[Vector2]:
    """Eight positions around *target_pos*, clamped inside the play area."""
    o = config.flank_orthogonal
    d = config.flank_diagonal
    m = config.flank_margin
    offsets = ((o, 0), (-o, 0), (0, o), (0, -o), (d, d), (-d, d), (d, -d), (-d, -d))
    return [
        Vector2(max(m, min(width - m, target_pos.x + ox)),
                max(m, min(height - m, target_pos.y + oy)))
        for ox, oy in offsets
    ]


def search_ring(center: Vector2, config: SimulationConfig,
                width: float, height: float) -> tuple[Vector2, ...]:
    """Eight search points around a last-known position."""
    o = config.search_orthogonal
    d = config.search_diagonal
    m = config.flank_margin
    offsets = ((o, 0), (d, d), (0, o), (-d, d), (-o, 0), (-d, -d), (0, -o), (d, -d))
    return tuple(
        Vector2(max(m, min(width - m, center.x + ox)),
                max(m, min(height - m, center.y + oy)))
        for ox, oy in offsets
    )


def best_flank_point(ctx: AIContext) -> Vector2:
    """Highest-scoring flank candidate; ties keep the first seen."""
    agent = ctx.agent
    target = ctx.target
    cfg = ctx.config
    field = ctx.world.field
    half = Vector2(agent.width / 2, agent.height / 2)
    best = target.pos
    best_score = float("-inf")
    for candidate in flank_candidates(target.pos, cfg, field.width, field.height):
        score = cfg.flank_proximity_base - agent.pos.distance(candidate)
        if Perception.line_of_sight_between(candidate + half, target.center, field, cfg.los_step):
            score += cfg.flank_los_bonus
        if score > best_score:
            best, best_score = candidate, score
    return best


# =====================================================================
# Handler base
# =====================================================================

class StateHandler(ABC):
    """Base class for behavior handlers."""

    @abstractmethod
    def handle(self, ctx: AIContext) -> MoveIntent:
        ...


# =====================================================================
# Patrol
# =====================================================================

class PatrolHandler(StateHandler):
    """Walk the waypoint loop; the target is ignored."""

    def handle(self, ctx: AIContext) -> MoveIntent:
        agent = ctx.agent
        mind: PatrolMind = agent.mind
        if not mind.waypoints:
            return ctx.still("patrol: no route")

        waypoint = mind.waypoints[mind.index]
        if agent.pos.distance(waypoint) < ctx.config.patrol_arrive_dist:
            mind.index = (mind.index + 1) % len(mind.waypoints)
            agent.path.clear()
            return ctx.still(f"patrol: reached waypoint, next {mind.index}")

        return ctx.steer(waypoint, 1.0, f"patrol: to waypoint {mind.index}")


# =====================================================================
# Guard
# =====================================================================

class GuardHandler(StateHandler):
    """Hold the anchor; pursue on sight, wait out the grace period, return."""

    def handle(self, ctx: AIContext) -> MoveIntent:
        agent = ctx.agent
        cfg = ctx.config
        mind: GuardMind = agent.mind

        if ctx.detects_target(mind.detection_range):
            if mind.hunt_state != HuntState.HUNTING:
                agent.path.clear()
                logger.debug("Guard %d spotted target", agent.id)
            mind.hunt_state = HuntState.HUNTING
            mind.return_armed = False
            mind.return_delay_ms = 0.0
            return ctx.steer(ctx.target.pos, cfg.guard_pursuit_speed_mult, "guard: pursuing")

        if mind.hunt_state == HuntState.IDLE:
            return ctx.still("guard: holding")

        if mind.hunt_state == HuntState.HUNTING:
            # Grace countdown is armed once per loss of sight
            if not mind.return_armed:
                mind.return_armed = True
                mind.return_delay_ms = cfg.return_delay_ms
            mind.return_delay_ms -= ctx.dt_ms
            if mind.return_delay_ms > 0:
                return ctx.still("guard: lost target, waiting")
            mind.hunt_state = HuntState.RETURNING
            agent.path.clear()

        if agent.pos.distance(agent.anchor) <= cfg.guard_arrive_dist:
            mind.hunt_state = HuntState.IDLE
            mind.return_armed = False
            mind.return_delay_ms = 0.0
            agent.path.clear()
            return ctx.still("guard: back at post")
        return ctx.steer(agent.anchor, cfg.guard_return_speed_mult, "guard: returning")


# =====================================================================
# Chase
# =====================================================================

class ChaseHandler(StateHandler):
    """Hunt the target, flank around walls, search, and return home."""

    def handle(self, ctx: AIContext) -> MoveIntent:
        agent = ctx.agent
        cfg = ctx.config
        mind: ChaseMind = agent.mind
        target = ctx.target

        dist = Perception.distance_to_target(agent, target)
        visible = Perception.has_line_of_sight(agent, target, ctx.world.field, cfg.los_step)

        if dist < mind.detection_range and visible:
            if mind.hunt_state != HuntState.HUNTING:
                agent.path.clear()
                logger.debug("Chaser %d spotted target from %s", agent.id, mind.hunt_state.name)
            mind.hunt_state = HuntState.HUNTING
            mind.last_known = target.pos
            mind.hunt_ms = cfg.hunt_duration_ms
            mind.return_armed = False
            mind.return_delay_ms = 0.0
            mind.search_points = ()
            mind.search_index = 0
            return ctx.steer(target.pos, cfg.chase_speed_mult, "chase: pursuing", chase=True)

        if mind.hunt_state in (HuntState.HUNTING, HuntState.SEARCHING):
            mind.hunt_ms -= ctx.dt_ms
            if mind.hunt_ms <= 0:
                self._begin_return(ctx)
            elif mind.hunt_state == HuntState.HUNTING:
                return self._hunt(ctx, dist, visible)
            else:
                return self._search(ctx)

        if mind.hunt_state == HuntState.RETURNING:
            return self._return(ctx)
        return ctx.still("chase: idle")

    # -- sub-states --

    def _hunt(self, ctx: AIContext, dist: float, visible: bool) -> MoveIntent:
        agent = ctx.agent
        cfg = ctx.config
        mind: ChaseMind = agent.mind
        target = ctx.target

        if visible and dist < mind.detection_range * cfg.extended_range_mult:
            mind.last_known = target.pos
            mind.hunt_ms = max(mind.hunt_ms, cfg.hunt_refresh_ms)
            return ctx.steer(target.pos, cfg.chase_speed_mult, "chase: tracking", chase=True)

        if target is not None and dist < mind.detection_range:
            flank = best_flank_point(ctx)
            mind.last_known = flank
            return ctx.steer(flank, cfg.flank_speed_mult, "chase: flanking", chase=True)

        if agent.pos.distance(mind.last_known) > cfg.last_known_arrive_dist:
            return ctx.steer(mind.last_known, cfg.last_known_speed_mult,
                             "chase: to last known", chase=True)

        field = ctx.world.field
        mind.hunt_state = HuntState.SEARCHING
        mind.search_points = search_ring(mind.last_known, cfg, field.width, field.height)
        mind.search_index = 0
        mind.search_dwell_ms = cfg.search_dwell_ms
        agent.path.clear()
        logger.debug("Chaser %d searching around %s", agent.id, mind.last_known)
        return self._search(ctx)

    def _search(self, ctx: AIContext) -> MoveIntent:
        agent = ctx.agent
        cfg = ctx.config
        mind: ChaseMind = agent.mind
        if not mind.search_points:
            return ctx.still("chase: nothing to search")

        mind.search_dwell_ms -= ctx.dt_ms
        if mind.search_dwell_ms <= 0:
            mind.search_index = (mind.search_index + 1) % len(mind.search_points)
            mind.search_dwell_ms = cfg.search_dwell_ms
            agent.path.clear()
        point = mind.search_points[mind.search_index]
        return ctx.steer(point, cfg.search_speed_mult, f"chase: searching point {mind.search_index}")

    def _begin_return(self, ctx: AIContext) -> None:
        agent = ctx.agent
        mind: ChaseMind = agent.mind
        mind.hunt_state = HuntState.RETURNING
        mind.hunt_ms = 0.0
        mind.search_points = ()
        mind.search_index = 0
        mind.return_armed = False
        agent.path.clear()
        logger.debug("Chaser %d gave up the hunt", agent.id)

    def _return(self, ctx: AIContext) -> MoveIntent:
        agent = ctx.agent
        cfg = ctx.config
        mind: ChaseMind = agent.mind

        if not mind.return_armed:
            mind.return_armed = True
            mind.return_delay_ms = cfg.return_delay_ms
        if mind.return_delay_ms > 0:
            mind.return_delay_ms -= ctx.dt_ms
            if mind.return_delay_ms > 0:
                return ctx.still("chase: lost target, waiting")

        if agent.pos.distance(agent.anchor) <= cfg.chase_arrive_dist:
            agent.pos = agent.anchor
            mind.hunt_state = HuntState.IDLE
            mind.return_armed = False
            mind.last_known = agent.anchor
            agent.path.clear()
            return ctx.still("chase: back at post")
        return ctx.steer(agent.anchor, cfg.chase_return_speed_mult, "chase: returning")


# =====================================================================
# Handler Registry: add new behaviors here
# =====================================================================

STATE_HANDLERS: dict[BehaviorKind, StateHandler] = {
    BehaviorKind.PATROL: PatrolHandler(),
    BehaviorKind.GUARD: GuardHandler(),
    BehaviorKind.CHASE: ChaseHandler(),
}
