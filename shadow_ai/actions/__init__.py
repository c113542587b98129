"""Movement system: intents and collision resolution."""

from shadow_ai.actions.base import MoveIntent, MoveResult
from shadow_ai.actions.move import MovementResolver

__all__ = ["MoveIntent", "MoveResult", "MovementResolver"]
