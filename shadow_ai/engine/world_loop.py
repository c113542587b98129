"""WorldLoop — the authoritative per-frame simulation driver.

Frame cycle:
  1. Advance the clock (delta clamped to ``max_frame_ms``)
  2. Move the target (override position or scripted target)
  3. Key pickup and exit checks for the target
  4. For each agent in ascending id order:
     decide → resolve → stuck tracking → alert events → contact events
  5. Record the frame for replay
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from shadow_ai.actions.move import MovementResolver
from shadow_ai.ai.brain import AIBrain
from shadow_ai.ai.navigator import Navigator
from shadow_ai.ai.pathfinding import Pathfinder
from shadow_ai.core.snapshot import Snapshot
from shadow_ai.utils.event_log import SimEvent

if TYPE_CHECKING:
    from shadow_ai.actions.base import MoveIntent, MoveResult
    from shadow_ai.config import SimulationConfig
    from shadow_ai.core.models import Agent, Vector2
    from shadow_ai.core.world_state import WorldState
    from shadow_ai.systems.target_script import TargetScript
    from shadow_ai.utils.replay import ReplayRecorder

logger = logging.getLogger(__name__)


class WorldLoop:
    """The heartbeat of the simulation.

    Single-threaded mutation of WorldState.  Agents are processed
    sequentially in id order, so every run with the same inputs and the
    same frame deltas produces the same trajectories.
    """

    __slots__ = (
        "_config",
        "_world",
        "_pathfinder",
        "_brain",
        "_resolver",
        "_recorder",
        "_target_script",
        "_frame_events",
    )

    def __init__(
        self,
        config: SimulationConfig,
        world: WorldState,
        recorder: ReplayRecorder | None = None,
        target_script: TargetScript | None = None,
        pathfinder: Pathfinder | None = None,
    ) -> None:
        self._config = config
        self._world = world
        # The field never changes within a level, so one grid serves every query
        self._pathfinder = pathfinder or Pathfinder(world.field, config)
        self._brain = AIBrain(config, Navigator(self._pathfinder, config))
        self._resolver = MovementResolver(world.field, config)
        self._recorder = recorder
        self._target_script = target_script
        self._frame_events: list[SimEvent] = []

    @property
    def world(self) -> WorldState:
        return self._world

    @property
    def pathfinder(self) -> Pathfinder:
        return self._pathfinder

    @property
    def resolver(self) -> MovementResolver:
        return self._resolver

    @property
    def target_script(self) -> TargetScript | None:
        return self._target_script

    @target_script.setter
    def target_script(self, script: TargetScript | None) -> None:
        self._target_script = script

    @property
    def frame_events(self) -> list[SimEvent]:
        """Events emitted during the most recent frame."""
        return self._frame_events

    def _emit(self, category: str, message: str, agent_ids: tuple[int, ...] = ()) -> None:
        self._frame_events.append(SimEvent(
            frame=self._world.frame,
            category=category,
            message=message,
            agent_ids=agent_ids,
        ))

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------

    def step(self, delta_ms: float | None = None, target: Vector2 | None = None) -> list[SimEvent]:
        """Advance one frame; returns the events it produced.

        *target*, when given, teleports the target to that position
        before the agents think (interactive input or tests).  Otherwise
        an attached TargetScript moves it.
        """
        cfg = self._config
        world = self._world
        dt = cfg.frame_ms if delta_ms is None else delta_ms
        dt = max(0.0, min(dt, cfg.max_frame_ms))

        self._frame_events = []
        world.frame += 1
        world.elapsed_ms += dt

        if target is not None and world.target is not None:
            world.target.pos = target
        elif self._target_script is not None:
            self._target_script.advance(world, dt)
        self._check_pickups()

        for agent in world.ordered_agents():
            self._step_agent(agent, dt)

        if self._recorder is not None:
            self._recorder.record_frame(world, self._frame_events)
        return self._frame_events

    def tick_once(self, delta_ms: float | None = None) -> bool:
        """Execute a single frame. Returns False if the session should stop."""
        world = self._world
        if world.frame >= self._config.max_frames:
            logger.info("Frame %d: max frames reached.", world.frame)
            return False
        if world.escaped:
            logger.info("Frame %d: target escaped.", world.frame)
            return False
        self.step(delta_ms)
        return True

    def run(self, frames: int | None = None, delta_ms: float | None = None) -> None:
        """Run headless for *frames* frames (default: until ``max_frames`` or escape)."""
        limit = self._config.max_frames if frames is None else frames
        world = self._world
        logger.info("=== Simulation started (level=%d, seed=%d) ===", world.level, world.seed)

        for _ in range(limit):
            if not self.tick_once(delta_ms):
                break
            if world.frame % 600 == 0:
                logger.info(
                    "Frame %d: %s",
                    world.frame,
                    ", ".join(f"#{a.id} {a.hunt_state.name}" for a in world.ordered_agents()),
                )

        logger.info("=== Simulation finished at frame %d ===", world.frame)
        if self._recorder is not None:
            self._recorder.flush()

    def create_snapshot(self) -> Snapshot:
        """Create an immutable snapshot of the current world state."""
        return Snapshot.from_world(self._world)

    # ------------------------------------------------------------------
    # Per-agent update
    # ------------------------------------------------------------------

    def _step_agent(self, agent: Agent, dt: float) -> None:
        before = agent.hunt_state
        intent = self._brain.decide(agent, self._world, dt)
        result = self._resolver.resolve(agent, intent.displacement, dt, pursuit=agent.is_pursuer)
        agent.pos = result.pos

        if result.collided and intent.following_path:
            agent.path.clear()
        self._track_progress(agent, intent, result, dt)

        after = agent.hunt_state
        if after != before:
            self._emit("alert", f"Agent {agent.id} {before.name} -> {after.name}", (agent.id,))

        self._check_contact(agent, dt)

    def _track_progress(self, agent: Agent, intent: MoveIntent, result: MoveResult, dt: float) -> None:
        """Invalidate the path of an agent that wants to move but cannot."""
        cfg = self._config
        stuck = agent.stuck
        if intent.is_still or result.escaping:
            stuck.still_ms = 0.0
            stuck.last_pos = agent.pos
            return
        if agent.pos.distance(stuck.last_pos) >= cfg.stuck_move_epsilon:
            stuck.still_ms = 0.0
            stuck.last_pos = agent.pos
            return
        stuck.still_ms += dt
        if stuck.still_ms >= cfg.stuck_window_ms:
            logger.debug("Agent %d stuck at %s for %.0f ms, dropping path",
                         agent.id, agent.pos, stuck.still_ms)
            agent.path.clear()
            stuck.still_ms = 0.0

    def _check_contact(self, agent: Agent, dt: float) -> None:
        if agent.contact_cooldown_ms > 0:
            agent.contact_cooldown_ms = max(0.0, agent.contact_cooldown_ms - dt)
        target = self._world.target
        if target is None or agent.contact_cooldown_ms > 0:
            return
        if agent.rect.overlaps(target.rect):
            agent.contact_cooldown_ms = self._config.contact_cooldown_ms
            self._emit("contact", f"Agent {agent.id} caught the target", (agent.id,))

    # ------------------------------------------------------------------
    # Target pickups
    # ------------------------------------------------------------------

    def _check_pickups(self) -> None:
        world = self._world
        target = world.target
        if target is None:
            return
        rect = target.rect
        remaining = []
        for key in world.keys:
            if rect.overlaps(key):
                world.keys_collected += 1
                self._emit("key", f"Key collected ({world.keys_collected} so far)")
            else:
                remaining.append(key)
        world.keys = remaining

        if (not world.escaped and world.exit is not None
                and world.exit_unlocked and rect.overlaps(world.exit)):
            world.escaped = True
            self._emit("exit", "Target reached the exit")
            logger.info("Frame %d: target reached the exit", world.frame)
