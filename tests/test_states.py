"""Tests for the patrol, guard and chase behavior state machines."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shadow_ai.ai.brain import AIBrain
from shadow_ai.ai.navigator import Navigator
from shadow_ai.ai.pathfinding import Pathfinder
from shadow_ai.ai.states import STATE_HANDLERS, flank_candidates, search_ring
from shadow_ai.config import SimulationConfig
from shadow_ai.core.enums import BehaviorKind, HuntState
from shadow_ai.core.models import Vector2
from tests.helpers.arena import Arena

CFG = SimulationConfig()
DT = 1000.0 / 60.0


def _brain(arena: Arena) -> AIBrain:
    return AIBrain(CFG, Navigator(Pathfinder(arena.world.field, CFG), CFG))


class TestRegistry:
    def test_every_kind_has_a_handler(self):
        assert set(STATE_HANDLERS) == set(BehaviorKind)


# ---------------------------------------------------------------------------
# Patrol
# ---------------------------------------------------------------------------

class TestPatrol:
    def test_advances_and_wraps_waypoints(self):
        arena = Arena()
        aid = arena.add_patrol((100, 100), [(100, 100), (200, 100)])
        mind = arena.agent(aid).mind

        arena.run_frames(1)
        assert mind.index == 1, "Standing on waypoint 0 should advance immediately"
        assert arena.run_until(lambda: mind.index == 0, 400) > 0
        assert arena.agent(aid).pos.distance(Vector2(200, 100)) < CFG.patrol_arrive_dist

    def test_ignores_target(self):
        arena = Arena()
        aid = arena.add_patrol((100, 100), [(100, 100), (200, 100)])
        arena.place_target(140, 100)
        arena.run_frames(30)
        assert arena.state(aid) == HuntState.IDLE
        assert not arena.events_of("alert")

    def test_no_waypoints_stands_still(self):
        arena = Arena()
        aid = arena.add_patrol((100, 100), [])
        arena.run_frames(20)
        assert arena.agent(aid).pos == Vector2(100, 100)


# ---------------------------------------------------------------------------
# Guard
# ---------------------------------------------------------------------------

class TestGuard:
    def test_detects_and_pursues(self):
        arena = Arena()
        aid = arena.add_guard((300, 300))
        arena.place_target(380, 300)
        arena.run_frames(1)
        assert arena.state(aid) == HuntState.HUNTING
        assert arena.agent(aid).pos.x > 300
        assert len(arena.events_of("alert")) == 1

    def test_wall_blocks_detection(self):
        arena = Arena(walls=[(340, 250, 10, 100)])
        aid = arena.add_guard((300, 300))
        arena.place_target(380, 300)
        arena.run_frames(10)
        assert arena.state(aid) == HuntState.IDLE
        assert arena.agent(aid).pos == Vector2(300, 300)

    def test_out_of_range_not_detected(self):
        arena = Arena()
        aid = arena.add_guard((300, 300))
        arena.place_target(410, 300)
        arena.run_frames(10)
        assert arena.state(aid) == HuntState.IDLE

    def test_grace_period_then_return(self):
        arena = Arena()
        aid = arena.add_guard((300, 300))
        arena.place_target(380, 300)
        arena.run_frames(60)
        assert arena.state(aid) == HuntState.HUNTING

        arena.hide_target()
        held = arena.agent(aid).pos
        arena.run_frames(100)  # ~1667 ms, inside the 2000 ms grace period
        assert arena.state(aid) == HuntState.HUNTING
        assert arena.agent(aid).pos == held, "Guard must hold position during the grace period"

        assert arena.run_until(lambda: arena.state(aid) != HuntState.HUNTING, 40) > 0
        assert arena.state(aid) == HuntState.RETURNING

        assert arena.run_until(lambda: arena.state(aid) == HuntState.IDLE, 600) > 0
        assert arena.agent(aid).pos.distance(Vector2(300, 300)) <= CFG.guard_arrive_dist

    def test_grace_countdown_is_not_rearmed(self):
        arena = Arena()
        aid = arena.add_guard((300, 300))
        arena.place_target(380, 300)
        arena.run_frames(60)
        arena.hide_target()
        frames = arena.run_until(lambda: arena.state(aid) != HuntState.HUNTING, 300)
        assert 110 <= frames <= 125


# ---------------------------------------------------------------------------
# Chase
# ---------------------------------------------------------------------------

class TestChase:
    def test_detects_within_one_frame(self):
        arena = Arena()
        aid = arena.add_chaser((300, 300))
        assert arena.state(aid) == HuntState.IDLE
        arena.place_target(370, 300)
        arena.run_frames(1)
        mind = arena.agent(aid).mind
        assert arena.state(aid) == HuntState.HUNTING
        assert mind.hunt_ms == CFG.hunt_duration_ms
        assert mind.last_known == Vector2(370, 300)

    def test_full_state_cycle(self):
        arena = Arena()
        aid = arena.add_chaser((300, 300))
        arena.place_target(370, 300)
        arena.run_frames(5)
        assert arena.state(aid) == HuntState.HUNTING

        arena.hide_target()
        seen = [HuntState.HUNTING]
        for _ in range(1500):
            arena.run_frames(1)
            state = arena.state(aid)
            if state != seen[-1]:
                seen.append(state)
            if state == HuntState.IDLE:
                break

        assert seen == [HuntState.HUNTING, HuntState.SEARCHING, HuntState.RETURNING, HuntState.IDLE]
        assert arena.agent(aid).pos == Vector2(300, 300), "Chaser snaps exactly onto its anchor"
        assert [e.message for e in arena.events_of("alert")] == [
            f"Agent {aid} IDLE -> HUNTING",
            f"Agent {aid} HUNTING -> SEARCHING",
            f"Agent {aid} SEARCHING -> RETURNING",
            f"Agent {aid} RETURNING -> IDLE",
        ]

    def test_redetection_while_searching(self):
        arena = Arena()
        aid = arena.add_chaser((300, 300))
        arena.place_target(370, 300)
        arena.run_frames(5)
        arena.hide_target()
        assert arena.run_until(lambda: arena.state(aid) == HuntState.SEARCHING, 300) > 0

        agent = arena.agent(aid)
        arena.place_target(agent.pos.x + 50, agent.pos.y)
        arena.run_frames(1)
        assert arena.state(aid) == HuntState.HUNTING
        assert agent.mind.hunt_ms == CFG.hunt_duration_ms
        assert agent.mind.search_points == ()

    def test_extended_range_refreshes_hunt(self):
        arena = Arena()
        aid = arena.add_chaser((300, 300))
        agent = arena.agent(aid)
        agent.mind.hunt_state = HuntState.HUNTING
        agent.mind.hunt_ms = 1000.0
        arena.place_target(410, 300)  # 110 px: outside range, inside 1.2x range

        intent = _brain(arena).decide(agent, arena.world, DT)
        assert intent.reason == "chase: tracking"
        assert agent.mind.hunt_ms == CFG.hunt_refresh_ms
        assert agent.mind.last_known == Vector2(410, 300)

    def test_extended_range_never_raises_above_full_hunt(self):
        arena = Arena()
        aid = arena.add_chaser((300, 300))
        agent = arena.agent(aid)
        agent.mind.hunt_state = HuntState.HUNTING
        agent.mind.hunt_ms = 4000.0
        arena.place_target(410, 300)
        _brain(arena).decide(agent, arena.world, DT)
        assert agent.mind.hunt_ms == pytest.approx(4000.0 - DT)

    def test_flanks_around_wall(self):
        arena = Arena(walls=[(340, 260, 10, 80)])
        aid = arena.add_chaser((300, 300))
        agent = arena.agent(aid)
        agent.mind.hunt_state = HuntState.HUNTING
        agent.mind.hunt_ms = CFG.hunt_duration_ms
        arena.place_target(380, 300)

        intent = _brain(arena).decide(agent, arena.world, DT)
        assert intent.reason == "chase: flanking"
        assert agent.mind.last_known in flank_candidates(Vector2(380, 300), CFG, 800, 600)
        # Closest candidate with a clear view of the target; ties keep the first
        assert agent.mind.last_known == Vector2(345, 335)

    def test_missing_target_is_not_visible(self):
        arena = Arena()
        aid = arena.add_chaser((300, 300))
        agent = arena.agent(aid)
        agent.mind.hunt_state = HuntState.HUNTING
        agent.mind.hunt_ms = CFG.hunt_duration_ms
        agent.mind.last_known = Vector2(400, 300)
        arena.world.target = None

        intent = _brain(arena).decide(agent, arena.world, DT)
        assert intent.reason == "chase: to last known"

    def test_idle_without_target_stays_put(self):
        arena = Arena()
        aid = arena.add_chaser((300, 300))
        arena.world.target = None
        arena.run_frames(30)
        assert arena.state(aid) == HuntState.IDLE
        assert arena.agent(aid).pos == Vector2(300, 300)


class TestFlankGeometry:
    def test_candidates_clamped_to_play_area(self):
        cands = flank_candidates(Vector2(10, 10), CFG, 800, 600)
        assert len(cands) == 8
        for c in cands:
            assert CFG.flank_margin <= c.x <= 800 - CFG.flank_margin
            assert CFG.flank_margin <= c.y <= 600 - CFG.flank_margin

    def test_search_ring_offsets(self):
        ring = search_ring(Vector2(400, 300), CFG, 800, 600)
        assert len(ring) == 8
        assert Vector2(440, 300) in ring
        assert Vector2(370, 270) in ring
