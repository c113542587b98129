"""EngineManager — runs the WorldLoop on a background thread.

The API reads from an atomically-swapped immutable Snapshot; the WorldLoop
mutates WorldState exclusively on its own thread.  Requests that change
the world (target override, level switch) are handed over to that
thread instead of touching WorldState directly.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from shadow_ai.core.levels import get_level
from shadow_ai.core.snapshot import Snapshot
from shadow_ai.core.world_builder import build_world
from shadow_ai.engine.world_loop import WorldLoop
from shadow_ai.systems.rng import DeterministicRNG
from shadow_ai.systems.target_script import TargetScript
from shadow_ai.utils.event_log import EventLog, SimEvent

if TYPE_CHECKING:
    from shadow_ai.ai.pathfinding import Pathfinder
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.models import Vector2

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages the simulation lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded ring buffer)
      - control commands (start / pause / resume / step / reset)
      - target override (applied by the engine thread on its next frame)
    """

    def __init__(self, config: SimulationConfig, level: int | None = None, scripted_target: bool = True) -> None:
        self.config = config
        self._level = config.level if level is None else level
        self._scripted_target = scripted_target
        self._tick_rate: float = config.tick_rate

        self._loop: WorldLoop | None = None

        # Thread-safe shared state
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: Snapshot | None = None
        self._event_log = EventLog()
        self._target_lock = threading.Lock()
        self._pending_target: Vector2 | None = None

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def level(self) -> int:
        return self._level

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.001, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def pathfinder(self) -> Pathfinder:
        assert self._loop is not None
        return self._loop.pathfinder

    # -- snapshot access --

    def get_snapshot(self) -> Snapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self, paused: bool = False) -> None:
        """Launch the engine thread; with *paused* it waits for a step or resume."""
        if self._running.is_set():
            return
        self._stop_requested.clear()
        if paused:
            self._paused.set()
        else:
            self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="engine-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at frame %d", self._current_frame())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at frame %d", self._current_frame())

    def step(self) -> None:
        """Execute exactly one frame (must be paused)."""
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        # set_target writes the world directly once this is clear
        self._running.clear()
        if self._apply_pending_target() is not None:
            self._publish_snapshot_and_events()
        logger.info("EngineManager stopped.")

    def reset(self, level: int | None = None) -> None:
        """Stop, rebuild (optionally on another level), ready to start.

        Raises ``ValueError`` for an unknown level; the current world is
        left untouched in that case.
        """
        if level is not None:
            get_level(level)  # validate before tearing anything down
        self.stop()
        if level is not None:
            self._level = level
        self._event_log.clear()
        with self._target_lock:
            self._pending_target = None
        self._build()
        self._event_log.append(SimEvent(frame=0, category="system", message=f"Reset to level {self._level}"))
        logger.info("EngineManager reset (level=%d).", self._level)

    # -- target control --

    def set_target(self, pos: Vector2) -> None:
        """Hand the target over to manual control and move it to *pos*.

        Applied on the engine thread's next frame, or immediately (with a
        fresh snapshot) when the engine thread is not running.
        """
        with self._target_lock:
            self._pending_target = pos
        if not self._running.is_set():
            self._apply_pending_target()
            self._publish_snapshot_and_events()

    # -- internals --

    def _build(self) -> None:
        """Construct the world and loop for the current level."""
        cfg = self.config
        rng = DeterministicRNG(cfg.world_seed)
        world = build_world(self._level, cfg, rng)
        loop = WorldLoop(cfg, world)
        if self._scripted_target:
            loop.target_script = TargetScript(cfg, rng, world, loop.pathfinder)
        self._loop = loop
        self._publish_snapshot_and_events()

    def _apply_pending_target(self) -> Vector2 | None:
        with self._target_lock:
            pos, self._pending_target = self._pending_target, None
        if pos is not None and self._loop is not None:
            self._loop.target_script = None
            if self._loop.world.target is not None:
                self._loop.world.target.pos = pos
            logger.info("Target moved to %s under manual control", pos)
        return pos

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Engine thread started.")
        assert self._loop is not None

        while not self._stop_requested.is_set():
            # Handle pause
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            self._apply_pending_target()
            can_continue = self._loop.tick_once()
            self._publish_snapshot_and_events()

            if not can_continue:
                logger.info("Simulation ended at frame %d.", self._loop.world.frame)
                break

            # Rate limiting
            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Engine thread exited.")

    def _publish_snapshot_and_events(self) -> None:
        """Swap snapshot + push the last frame's events."""
        assert self._loop is not None
        snap = self._loop.create_snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap

        events: list[SimEvent] = self._loop.frame_events
        if events:
            self._event_log.append_many(events)
            self._loop.frame_events.clear()

    def _current_frame(self) -> int:
        if self._loop:
            return self._loop.world.frame
        return 0
