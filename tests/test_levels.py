"""Tests for level layouts and world construction."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shadow_ai.config import SimulationConfig
from shadow_ai.core.enums import BehaviorKind, HuntState
from shadow_ai.core.levels import LEVELS, get_level
from shadow_ai.core.models import Rect
from shadow_ai.core.obstacles import ObstacleField
from shadow_ai.core.world_builder import EXIT_SIZE, build_world
from shadow_ai.systems.rng import DeterministicRNG

CFG = SimulationConfig()


class TestLayouts:
    def test_three_levels(self):
        assert sorted(LEVELS) == [1, 2, 3]

    def test_unknown_level_raises(self):
        with pytest.raises(ValueError):
            get_level(4)
        with pytest.raises(ValueError):
            build_world(0, CFG)

    @pytest.mark.parametrize("level", sorted(LEVELS))
    def test_spawns_are_clear_of_walls(self, level):
        layout = get_level(level)
        field = ObstacleField(layout.walls, layout.width, layout.height)
        size = CFG.agent_size
        for spawn in layout.spawns:
            assert not field.overlaps_any(Rect(spawn.pos.x, spawn.pos.y, size, size)), spawn
        assert not field.overlaps_any(Rect(layout.player_spawn.x, layout.player_spawn.y,
                                           CFG.target_size, CFG.target_size))

    @pytest.mark.parametrize("level", sorted(LEVELS))
    def test_only_patrols_have_waypoints(self, level):
        for spawn in get_level(level).spawns:
            if spawn.kind == BehaviorKind.PATROL:
                assert spawn.patrol_points
            else:
                assert spawn.patrol_points == ()

    def test_escalating_threat(self):
        counts = [len(get_level(n).spawns) for n in (1, 2, 3)]
        assert counts == sorted(counts)
        assert all(s.kind == BehaviorKind.PATROL for s in get_level(1).spawns)


class TestBuildWorld:
    @pytest.mark.parametrize("level", sorted(LEVELS))
    def test_world_matches_layout(self, level):
        layout = get_level(level)
        world = build_world(level, CFG, DeterministicRNG(5))
        assert world.level == level
        assert world.seed == 5
        assert len(world.field) == len(layout.walls)
        assert len(world.agents) == len(layout.spawns)
        assert world.target.pos == layout.player_spawn
        assert world.exit == Rect(layout.exit_pos.x, layout.exit_pos.y, EXIT_SIZE, EXIT_SIZE)
        assert not world.exit_unlocked

    def test_agents_start_idle_at_anchor(self):
        world = build_world(3, CFG)
        for agent in world.ordered_agents():
            assert agent.hunt_state == HuntState.IDLE
            assert agent.pos == agent.anchor
            assert agent.width == CFG.agent_size
            assert agent.speed == CFG.agent_speed

    def test_stuck_tracking_starts_at_spawn(self):
        world = build_world(3, CFG)
        for agent in world.ordered_agents():
            assert agent.stuck.last_pos == agent.pos
            assert agent.stuck.still_ms == 0.0
            assert not agent.stuck.escaping
            clone = agent.copy()
            clone.stuck.still_ms = 250.0
            assert agent.stuck.still_ms == 0.0

    def test_agent_ids_follow_spawn_order(self):
        world = build_world(2, CFG)
        kinds = [a.kind for a in world.ordered_agents()]
        assert kinds == [s.kind for s in get_level(2).spawns]
        assert [a.id for a in world.ordered_agents()] == [1, 2, 3, 4]

    def test_default_rng_uses_config_seed(self):
        assert build_world(1, CFG).keys == build_world(1, CFG, DeterministicRNG(CFG.world_seed)).keys
