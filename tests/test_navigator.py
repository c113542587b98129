"""Tests for the Navigator path-cache policy and waypoint following."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shadow_ai.ai.navigator import Navigator, capped_toward
from shadow_ai.ai.pathfinding import Pathfinder
from shadow_ai.config import SimulationConfig
from shadow_ai.core.enums import BehaviorKind
from shadow_ai.core.models import PathCache, Rect, Vector2, make_agent
from shadow_ai.core.obstacles import ObstacleField

CFG = SimulationConfig()


class CountingPathfinder(Pathfinder):
    """Pathfinder that records how often it was asked for a route."""

    def __init__(self, field, config):
        super().__init__(field, config)
        self.calls = 0

    def find_path(self, start, goal):
        self.calls += 1
        return super().find_path(start, goal)


def _nav(*walls) -> tuple[Navigator, CountingPathfinder]:
    pf = CountingPathfinder(ObstacleField([Rect(*w) for w in walls], 800, 600), CFG)
    return Navigator(pf, CFG), pf


def _agent(x: float, y: float):
    return make_agent(1, BehaviorKind.CHASE, Vector2(x, y))


class TestCappedToward:
    def test_never_overshoots(self):
        d = capped_toward(Vector2(0, 0), Vector2(3, 4), 10.0)
        assert d == Vector2(3, 4)

    def test_caps_to_step(self):
        d = capped_toward(Vector2(0, 0), Vector2(30, 40), 5.0)
        assert d.length() == pytest.approx(5.0)

    def test_zero_at_goal(self):
        assert capped_toward(Vector2(7, 7), Vector2(7, 7), 5.0) == Vector2(0, 0)


class TestRefreshPolicy:
    def test_empty_cache_needs_refresh(self):
        nav, _ = _nav()
        assert nav.needs_refresh(PathCache(), Vector2(10, 10), 0.0, chase=False)

    def test_interval_depends_on_mode(self):
        nav, _ = _nav()
        cache = PathCache(waypoints=[Vector2(0, 0), Vector2(15, 0)], computed_at_ms=0.0,
                          goal=Vector2(300, 300))
        assert not nav.needs_refresh(cache, Vector2(300, 300), 299.0, chase=True)
        assert nav.needs_refresh(cache, Vector2(300, 300), 300.0, chase=True)
        assert not nav.needs_refresh(cache, Vector2(300, 300), 499.0, chase=False)
        assert nav.needs_refresh(cache, Vector2(300, 300), 500.0, chase=False)

    def test_exhausted_waypoints_need_refresh(self):
        nav, _ = _nav()
        cache = PathCache(waypoints=[Vector2(0, 0)], index=1, computed_at_ms=0.0,
                          goal=Vector2(300, 300))
        assert nav.needs_refresh(cache, Vector2(300, 300), 10.0, chase=False)

    def test_moved_goal_only_matters_when_chasing(self):
        nav, _ = _nav()
        cache = PathCache(waypoints=[Vector2(0, 0), Vector2(15, 0)], computed_at_ms=0.0,
                          goal=Vector2(300, 300))
        moved = Vector2(340, 300)
        assert nav.needs_refresh(cache, moved, 10.0, chase=True)
        assert not nav.needs_refresh(cache, moved, 10.0, chase=False)
        assert not nav.needs_refresh(cache, Vector2(320, 300), 10.0, chase=True)


class TestSteer:
    def test_direct_approach_skips_pathfinding(self):
        nav, pf = _nav()
        agent = _agent(100, 100)
        disp, following = nav.steer(agent, Vector2(120, 100), 2.0, 0.0)
        assert disp == Vector2(2, 0)
        assert not following
        assert pf.calls == 0

    def test_follows_path_and_caches_it(self):
        nav, pf = _nav()
        agent = _agent(100, 100)
        disp, following = nav.steer(agent, Vector2(400, 100), 2.0, 0.0)
        assert following
        assert disp.length() == pytest.approx(2.0)
        assert pf.calls == 1
        assert agent.path.goal == Vector2(400, 100)

        nav.steer(agent, Vector2(400, 100), 2.0, 100.0)
        assert pf.calls == 1, "Cached path must be reused inside the refresh interval"

        nav.steer(agent, Vector2(400, 100), 2.0, 600.0)
        assert pf.calls == 2

    def test_consumes_reached_waypoints(self):
        nav, _ = _nav()
        agent = _agent(100, 100)
        nav.steer(agent, Vector2(400, 100), 2.0, 0.0)
        # Start cell center (97.5, 97.5) is within reach and skipped at once
        assert agent.path.index >= 1
        assert agent.path.waypoints[0] == Vector2(97.5, 97.5)

    def test_failed_search_is_remembered(self):
        nav, pf = _nav((400, 300, 40, 40))
        agent = _agent(100, 100)
        goal = Vector2(410, 310)
        disp, following = nav.steer(agent, goal, 2.0, 0.0)
        assert not following
        assert disp.length() == pytest.approx(2.0)
        for t in (16.0, 100.0, 400.0):
            nav.steer(agent, goal, 2.0, t)
        assert pf.calls == 1
        nav.steer(agent, goal, 2.0, 500.0)
        assert pf.calls == 2

    def test_fallback_points_straight_at_goal(self):
        nav, _ = _nav((400, 300, 40, 40))
        agent = _agent(100, 300)
        disp, _ = nav.steer(agent, Vector2(410, 300), 3.0, 0.0)
        assert disp.x == pytest.approx(3.0)
        assert disp.y == pytest.approx(0.0)
