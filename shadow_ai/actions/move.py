"""MovementResolver — applies intended displacements against the walls.

Resolution order per frame:
  1. Embedded in a wall → wall escape (probe sweep, anchor nudge, or revert)
  2. Full displacement
  3. Axis-decomposed slide (X first, then Y from the X result)
  4. Pursuers only: alternate-angle probes to work out of concave corners
The returned position never overlaps a wall unless ``escaping`` is set.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from shadow_ai.actions.base import MoveResult
from shadow_ai.ai.perception import Perception
from shadow_ai.core.models import Agent, Rect, Vector2

if TYPE_CHECKING:
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.obstacles import ObstacleField

logger = logging.getLogger(__name__)


def rotate(v: Vector2, degrees: float) -> Vector2:
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    return Vector2(v.x * c - v.y * s, v.x * s + v.y * c)


def escape_probes(distances: tuple[float, ...]) -> tuple[Vector2, ...]:
    """Probe offsets: for each magnitude, the four cardinals then the four diagonals."""
    probes: list[Vector2] = []
    for d in distances:
        probes.extend((Vector2(d, 0), Vector2(-d, 0), Vector2(0, d), Vector2(0, -d)))
        probes.extend((Vector2(d, d), Vector2(-d, d), Vector2(d, -d), Vector2(-d, -d)))
    return tuple(probes)


class MovementResolver:
    """Collision-aware movement integration for agents."""

    __slots__ = ("_field", "_config", "_probes")

    def __init__(self, field: ObstacleField, config: SimulationConfig) -> None:
        self._field = field
        self._config = config
        self._probes = escape_probes(tuple(config.escape_probe_distances))

    # -- queries --

    def blocked(self, agent: Agent, pos: Vector2) -> bool:
        return self._field.overlaps_any(Rect(pos.x, pos.y, agent.width, agent.height))

    def is_embedded(self, agent: Agent) -> bool:
        return self.blocked(agent, agent.pos)

    def _clamp(self, agent: Agent, pos: Vector2) -> Vector2:
        return self._field.clamp_position(pos, agent.width, agent.height, self._config.bounds_margin)

    # -- resolution --

    def resolve(
        self,
        agent: Agent,
        displacement: Vector2,
        dt_ms: float,
        pursuit: bool = False,
    ) -> MoveResult:
        """Resolve *displacement* for *agent*; does not write ``agent.pos``."""
        origin = agent.pos
        if self.blocked(agent, origin):
            return self._escape(agent, dt_ms)

        stuck = agent.stuck
        stuck.escaping = False
        stuck.escape_cooldown_ms = 0.0

        dx, dy = displacement.x, displacement.y
        if dx == 0 and dy == 0:
            return MoveResult(pos=origin)

        full = self._clamp(agent, origin + displacement)
        if not self.blocked(agent, full):
            return MoveResult(pos=full, moved=full != origin)

        # Slide along walls: X first, then Y from wherever X left us
        pos = origin
        x_ok = False
        if dx != 0:
            x_only = self._clamp(agent, Vector2(origin.x + dx, origin.y))
            if not self.blocked(agent, x_only):
                pos = x_only
                x_ok = True
        y_ok = False
        if dy != 0:
            y_try = self._clamp(agent, Vector2(pos.x, origin.y + dy))
            if not self.blocked(agent, y_try):
                pos = y_try
                y_ok = True
        if x_ok or y_ok:
            return MoveResult(pos=pos, moved=pos != origin, collided=True)

        if pursuit:
            for angle in self._config.pursuit_probe_angles:
                candidate = self._clamp(agent, origin + rotate(displacement, angle))
                if candidate != origin and not self.blocked(agent, candidate):
                    return MoveResult(pos=candidate, moved=True, collided=True)

        return MoveResult(pos=origin, collided=True)

    def _escape(self, agent: Agent, dt_ms: float) -> MoveResult:
        """Bounded recovery for an agent found overlapping a wall."""
        stuck = agent.stuck
        origin = agent.pos

        # Rate limit: hold still while the retry cooldown runs
        if stuck.escape_cooldown_ms > 0:
            stuck.escape_cooldown_ms = max(0.0, stuck.escape_cooldown_ms - dt_ms)
            stuck.escaping = True
            return MoveResult(pos=origin, escaping=True)

        for offset in self._probes:
            candidate = self._clamp(agent, origin + offset)
            if not self.blocked(agent, candidate):
                return self._escaped(agent, candidate)

        nudge = Perception.direction_toward(origin, agent.anchor, self._config.escape_anchor_step)
        candidate = self._clamp(agent, origin + nudge)
        if candidate != origin and not self.blocked(agent, candidate):
            return self._escaped(agent, candidate)

        stuck.escaping = True
        stuck.escape_cooldown_ms = self._config.escape_retry_ms
        logger.debug("Agent %d embedded at %s, escape exhausted; retry in %.0f ms",
                     agent.id, origin, self._config.escape_retry_ms)
        return MoveResult(pos=origin, escaping=True)

    @staticmethod
    def _escaped(agent: Agent, pos: Vector2) -> MoveResult:
        stuck = agent.stuck
        stuck.escaping = False
        stuck.escape_cooldown_ms = 0.0
        stuck.escapes += 1
        logger.debug("Agent %d escaped wall overlap %s -> %s", agent.id, agent.pos, pos)
        return MoveResult(pos=pos, moved=True, escaped=True)
