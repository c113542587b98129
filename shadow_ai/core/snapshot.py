"""Immutable snapshot of the world state for API readers."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from shadow_ai.core.models import Agent, Rect, Target
from shadow_ai.core.obstacles import ObstacleField
from shadow_ai.core.world_state import WorldState


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of the world, safe to share across threads.

    Agents and the target are copied and the agent dict is wrapped in a
    MappingProxyType, so the simulation thread can keep mutating the live
    world while readers serialize this one.
    """

    frame: int
    elapsed_ms: float
    seed: int
    level: int
    agents: Mapping[int, Agent]
    target: Target | None
    field: ObstacleField
    keys: tuple[Rect, ...]
    keys_collected: int
    exit: Rect | None
    escaped: bool

    @classmethod
    def from_world(cls, world: WorldState) -> Snapshot:
        target = world.target
        return cls(
            frame=world.frame,
            elapsed_ms=world.elapsed_ms,
            seed=world.seed,
            level=world.level,
            agents=MappingProxyType({aid: a.copy() for aid, a in world.agents.items()}),
            target=None if target is None else Target(target.pos, target.width, target.height),
            field=world.field,  # immutable for the lifetime of a level
            keys=tuple(world.keys),
            keys_collected=world.keys_collected,
            exit=world.exit,
            escaped=world.escaped,
        )

    def ordered_agents(self) -> list[Agent]:
        return [self.agents[aid] for aid in sorted(self.agents)]
