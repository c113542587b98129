"""build_world — turns a level layout into a ready-to-run WorldState.

Usage::

    world = build_world(2, config, DeterministicRNG(config.world_seed))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shadow_ai.core.levels import get_level
from shadow_ai.core.models import Rect, Target, make_agent
from shadow_ai.core.obstacles import ObstacleField
from shadow_ai.core.world_state import WorldState
from shadow_ai.systems.key_placement import KeyPlacer
from shadow_ai.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    from shadow_ai.config import SimulationConfig

logger = logging.getLogger(__name__)

EXIT_SIZE = 30.0


def build_world(level: int, config: SimulationConfig, rng: DeterministicRNG | None = None) -> WorldState:
    """Build the world for *level*: walls, agents, target, keys and exit.

    Raises ``ValueError`` for an unknown level number.
    """
    layout = get_level(level)
    rng = rng or DeterministicRNG(config.world_seed)

    field = ObstacleField(layout.walls, layout.width, layout.height)
    target = Target(layout.player_spawn, config.target_size, config.target_size)
    world = WorldState(seed=rng.seed, field=field, level=layout.number, target=target)

    for spawn in layout.spawns:
        world.add_agent(make_agent(
            world.allocate_agent_id(),
            spawn.kind,
            spawn.pos,
            patrol_points=spawn.patrol_points,
            detection_range=config.detection_range,
            size=config.agent_size,
            speed=config.agent_speed,
        ))

    placer = KeyPlacer(config, rng, field)
    world.keys = placer.place(target.rect, [a.pos for a in world.ordered_agents()])
    world.exit = Rect(layout.exit_pos.x, layout.exit_pos.y, EXIT_SIZE, EXIT_SIZE)

    logger.info("Level %d (%s) loaded: %d walls, %d agents, %d keys",
                layout.number, layout.name, len(field), len(world.agents), len(world.keys))
    return world
