"""Domain-separated deterministic RNG using xxhash.

Every draw is a pure function of (WorldSeed, Domain, EntityID, Tick), so a
level built with the same seed always places keys and scripted target
routes identically.

Formula: RNG_Value = Hash(WorldSeed, Domain, EntityID, Tick)
"""

from __future__ import annotations

import struct

import xxhash

from shadow_ai.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator."""

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, entity_id: int, tick: int) -> int:
        payload = struct.pack("<qiqi", self._seed, domain.value, entity_id, tick)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, entity_id: int, tick: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, entity_id, tick) / (self._MAX_UINT64 + 1)

    def next_range(self, domain: Domain, entity_id: int, tick: int, low: float, high: float) -> float:
        """Return a deterministic float in [low, high)."""
        return low + self.next_float(domain, entity_id, tick) * (high - low)
