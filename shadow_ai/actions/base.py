"""MoveIntent — the universal currency between the AI and the world loop."""

from __future__ import annotations

from dataclasses import dataclass

from shadow_ai.core.enums import HuntState
from shadow_ai.core.models import ZERO, Vector2


@dataclass(frozen=True, slots=True)
class MoveIntent:
    """An agent's intended displacement for one frame.

    The WorldLoop hands it to the MovementResolver, which decides how much
    of it survives contact with the walls.
    """

    agent_id: int
    displacement: Vector2 = ZERO
    hunt_state: HuntState = HuntState.IDLE
    reason: str = ""
    following_path: bool = False

    @property
    def is_still(self) -> bool:
        return self.displacement.x == 0 and self.displacement.y == 0

    def __repr__(self) -> str:
        return (f"Intent(agent={self.agent_id}, d={self.displacement}, "
                f"state={self.hunt_state.name}, reason={self.reason!r})")


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of resolving a MoveIntent against the obstacle field."""

    pos: Vector2
    moved: bool = False
    collided: bool = False
    escaping: bool = False
    escaped: bool = False
