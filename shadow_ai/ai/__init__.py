"""AI layer: perception, pathfinding, navigation and behavior state machines."""

from shadow_ai.ai.brain import AIBrain
from shadow_ai.ai.navigator import Navigator
from shadow_ai.ai.pathfinding import NavGrid, Pathfinder
from shadow_ai.ai.perception import Perception

__all__ = ["AIBrain", "NavGrid", "Navigator", "Pathfinder", "Perception"]
