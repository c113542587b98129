"""Replay serialization — per-frame agent positions and hunt states."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from shadow_ai.core.world_state import WorldState
    from shadow_ai.utils.event_log import SimEvent

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates frames and flushes them to a JSON replay file."""

    __slots__ = ("_path", "_frames", "_seed", "_level")

    def __init__(self, path: str | Path, seed: int, level: int = 1) -> None:
        self._path = Path(path)
        self._seed = seed
        self._level = level
        self._frames: list[dict[str, Any]] = []

    @property
    def frames(self) -> list[dict[str, Any]]:
        return self._frames

    def record_frame(self, world: WorldState, events: Sequence[SimEvent] = ()) -> None:
        target = world.target
        self._frames.append({
            "frame": world.frame,
            "elapsed_ms": round(world.elapsed_ms, 3),
            "target": None if target is None else [round(target.pos.x, 3), round(target.pos.y, 3)],
            "agents": [
                {
                    "id": a.id,
                    "kind": a.kind.name,
                    "pos": [round(a.pos.x, 3), round(a.pos.y, 3)],
                    "state": a.hunt_state.name,
                }
                for a in world.ordered_agents()
            ],
            "events": [
                {"category": e.category, "message": e.message, "agents": list(e.agent_ids)}
                for e in events
            ],
        })

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": "1.0",
            "seed": self._seed,
            "level": self._level,
            "total_frames": len(self._frames),
            "frames": self._frames,
        }

    def flush(self) -> None:
        """Write accumulated data to disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d frames)", self._path, len(self._frames))
