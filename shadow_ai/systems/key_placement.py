"""Key placement — constraint satisfaction over random candidates.

A key is valid when it does not touch a wall, keeps its distance from
the player, every agent and the keys already placed, and the player can
plausibly walk to it (straight segment sampled every 10 px is clear).
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Sequence

from shadow_ai.core.enums import Domain
from shadow_ai.core.geometry import segment_clear_of_obstacles
from shadow_ai.core.models import Rect, Vector2

if TYPE_CHECKING:
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.obstacles import ObstacleField
    from shadow_ai.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

FALLBACK_POSITIONS: tuple[Vector2, ...] = (
    Vector2(50, 50),
    Vector2(700, 50),
    Vector2(50, 500),
    Vector2(700, 500),
    Vector2(400, 300),
)

_EDGE_INSET = 30.0


class KeyPlacer:
    """Places keys for a level using the deterministic RNG."""

    __slots__ = ("_config", "_rng", "_field")

    def __init__(self, config: SimulationConfig, rng: DeterministicRNG, field: ObstacleField) -> None:
        self._config = config
        self._rng = rng
        self._field = field

    def place(self, player: Rect, agents: Sequence[Vector2], count: int | None = None) -> list[Rect]:
        """Return *count* key rectangles (default ``config.key_count``)."""
        cfg = self._config
        n = cfg.key_count if count is None else count
        keys: list[Rect] = []
        for key_idx in range(n):
            pos = self.find_position(key_idx, player, agents, keys)
            keys.append(Rect(pos.x, pos.y, cfg.key_size, cfg.key_size))
        return keys

    def find_position(
        self,
        key_idx: int,
        player: Rect,
        agents: Sequence[Vector2],
        placed: Sequence[Rect],
    ) -> Vector2:
        cfg = self._config
        size = cfg.key_size
        max_x = self._field.width - 2 * _EDGE_INSET - size
        max_y = self._field.height - 2 * _EDGE_INSET - size
        for attempt in range(cfg.key_max_attempts):
            x = _EDGE_INSET + self._rng.next_float(Domain.KEY_PLACEMENT, key_idx, attempt * 2) * max_x
            y = _EDGE_INSET + self._rng.next_float(Domain.KEY_PLACEMENT, key_idx, attempt * 2 + 1) * max_y
            if self.is_valid(x, y, player, agents, placed,
                             cfg.key_min_dist_player, cfg.key_min_dist_agents, cfg.key_min_dist_keys):
                return Vector2(x, y)

        logger.debug("Key %d: random placement exhausted, trying fallbacks", key_idx)
        for fb in FALLBACK_POSITIONS:
            if self.is_valid(fb.x, fb.y, player, agents, placed, 60.0, 40.0, cfg.key_min_dist_keys):
                return fb
        logger.warning("Key %d: no valid fallback, using %s", key_idx, FALLBACK_POSITIONS[0])
        return FALLBACK_POSITIONS[0]

    def is_valid(
        self,
        x: float,
        y: float,
        player: Rect,
        agents: Sequence[Vector2],
        placed: Sequence[Rect],
        min_player: float,
        min_agents: float,
        min_keys: float,
    ) -> bool:
        size = self._config.key_size
        if self._field.overlaps_any(Rect(x, y, size, size)):
            return False
        if math.hypot(x - player.x, y - player.y) < min_player:
            return False
        for a in agents:
            if math.hypot(x - a.x, y - a.y) < min_agents:
                return False
        for k in placed:
            if math.hypot(x - k.x, y - k.y) < min_keys:
                return False
        return self.reachable_from(player, x + size / 2, y + size / 2)

    def reachable_from(self, player: Rect, tx: float, ty: float) -> bool:
        c = player.center
        return segment_clear_of_obstacles(
            c.x, c.y, tx, ty, self._field.obstacles, self._config.key_reach_step)
