"""Core data models and world representation."""

from shadow_ai.core.enums import BehaviorKind, Domain, HuntState
from shadow_ai.core.models import Agent, Rect, Target, Vector2
from shadow_ai.core.obstacles import ObstacleField
from shadow_ai.core.world_state import WorldState
from shadow_ai.core.snapshot import Snapshot

__all__ = [
    "Agent",
    "BehaviorKind",
    "Domain",
    "HuntState",
    "ObstacleField",
    "Rect",
    "Snapshot",
    "Target",
    "Vector2",
    "WorldState",
]
