"""Engine systems: RNG, key placement, scripted target."""

from shadow_ai.systems.rng import DeterministicRNG
from shadow_ai.systems.key_placement import KeyPlacer

__all__ = ["DeterministicRNG", "KeyPlacer"]
