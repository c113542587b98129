"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class BehaviorKind(IntEnum):
    """Behavior variant of an agent; selects its state handler."""

    PATROL = 0
    CHASE = 1
    GUARD = 2


@unique
class HuntState(IntEnum):
    """Pursuit sub-state, exposed to the renderer for the alert glow."""

    IDLE = 0
    HUNTING = 1
    SEARCHING = 2
    RETURNING = 3


@unique
class Domain(IntEnum):
    """RNG domain separation keys."""

    KEY_PLACEMENT = 0
    TARGET_SCRIPT = 1
