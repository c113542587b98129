"""Mutable authoritative world state — only mutated by the WorldLoop."""

from __future__ import annotations

from shadow_ai.core.models import Agent, Rect, Target
from shadow_ai.core.obstacles import ObstacleField


class WorldState:
    """The single source of truth for the simulation."""

    __slots__ = ("frame", "elapsed_ms", "seed", "level", "field", "agents",
                 "target", "keys", "keys_collected", "exit", "escaped", "_next_agent_id")

    def __init__(
        self,
        seed: int,
        field: ObstacleField,
        level: int = 1,
        target: Target | None = None,
    ) -> None:
        self.frame: int = 0
        self.elapsed_ms: float = 0.0
        self.seed: int = seed
        self.level: int = level
        self.field: ObstacleField = field
        self.agents: dict[int, Agent] = {}
        self.target: Target | None = target
        self.keys: list[Rect] = []
        self.keys_collected: int = 0
        self.exit: Rect | None = None
        self.escaped: bool = False
        self._next_agent_id: int = 1

    def allocate_agent_id(self) -> int:
        aid = self._next_agent_id
        self._next_agent_id += 1
        return aid

    def add_agent(self, agent: Agent) -> None:
        self.agents[agent.id] = agent
        if agent.id >= self._next_agent_id:
            self._next_agent_id = agent.id + 1

    def ordered_agents(self) -> list[Agent]:
        """Agents in iteration order (ascending id)."""
        return [self.agents[aid] for aid in sorted(self.agents)]

    @property
    def exit_unlocked(self) -> bool:
        return not self.keys
