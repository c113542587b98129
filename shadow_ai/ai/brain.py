"""AIBrain — single-dispatch decision engine over the behavior variants.

Looks up the handler for ``agent.kind`` in STATE_HANDLERS, builds the
per-frame AIContext and returns the handler's MoveIntent.  Holds no
per-agent state of its own; everything mutable lives on the agent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shadow_ai.ai.states import AIContext, STATE_HANDLERS

if TYPE_CHECKING:
    from shadow_ai.actions.base import MoveIntent
    from shadow_ai.ai.navigator import Navigator
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.models import Agent
    from shadow_ai.core.world_state import WorldState


class AIBrain:
    """Dispatches agent AI decisions based on their behavior kind."""

    __slots__ = ("_config", "_navigator")

    def __init__(self, config: SimulationConfig, navigator: Navigator) -> None:
        self._config = config
        self._navigator = navigator

    @property
    def navigator(self) -> Navigator:
        return self._navigator

    def decide(self, agent: Agent, world: WorldState, dt_ms: float | None = None) -> MoveIntent:
        """Run the AI for *agent* for one frame of *dt_ms* (default: nominal frame)."""
        ctx = AIContext(
            agent=agent,
            world=world,
            config=self._config,
            navigator=self._navigator,
            dt_ms=self._config.frame_ms if dt_ms is None else dt_ms,
        )
        return STATE_HANDLERS[agent.kind].handle(ctx)
