"""Level layout tables: walls, enemy spawns, player spawn and exit.

Every level sits in an 800x600 play area framed by 20 px outer walls.
"""

from __future__ import annotations

from dataclasses import dataclass

from shadow_ai.core.enums import BehaviorKind
from shadow_ai.core.models import Rect, Vector2


@dataclass(frozen=True, slots=True)
class AgentSpawn:
    kind: BehaviorKind
    pos: Vector2
    patrol_points: tuple[Vector2, ...] = ()


@dataclass(frozen=True, slots=True)
class LevelLayout:
    number: int
    name: str
    walls: tuple[Rect, ...]
    spawns: tuple[AgentSpawn, ...]
    player_spawn: Vector2
    exit_pos: Vector2
    width: int = 800
    height: int = 600


_OUTER_WALLS = (
    Rect(0, 0, 800, 20),
    Rect(0, 580, 800, 20),
    Rect(0, 0, 20, 600),
    Rect(780, 0, 20, 600),
)


def _patrol(x: float, y: float, *points: tuple[float, float]) -> AgentSpawn:
    return AgentSpawn(BehaviorKind.PATROL, Vector2(x, y), tuple(Vector2(px, py) for px, py in points))


def _chase(x: float, y: float) -> AgentSpawn:
    return AgentSpawn(BehaviorKind.CHASE, Vector2(x, y))


def _guard(x: float, y: float) -> AgentSpawn:
    return AgentSpawn(BehaviorKind.GUARD, Vector2(x, y))


LEVELS: dict[int, LevelLayout] = {
    1: LevelLayout(
        number=1,
        name="Office",
        walls=_OUTER_WALLS + (
            Rect(200, 150, 150, 20),
            Rect(450, 150, 150, 20),
            Rect(200, 300, 150, 20),
            Rect(450, 300, 150, 20),
            Rect(300, 450, 200, 20),
        ),
        spawns=(
            _patrol(400, 200, (350, 200), (450, 200)),
            _patrol(300, 400, (250, 400), (350, 400)),
        ),
        player_spawn=Vector2(100, 100),
        exit_pos=Vector2(700, 500),
    ),
    2: LevelLayout(
        number=2,
        name="Hospital",
        walls=_OUTER_WALLS + (
            Rect(150, 100, 20, 200),
            Rect(300, 80, 20, 150),
            Rect(450, 120, 20, 180),
            Rect(600, 100, 20, 200),
            Rect(100, 350, 200, 20),
            Rect(400, 380, 200, 20),
            Rect(250, 480, 300, 20),
        ),
        spawns=(
            _chase(200, 150),
            _patrol(350, 250, (320, 250), (380, 250)),
            _guard(500, 180),
            _chase(400, 450),
        ),
        player_spawn=Vector2(100, 100),
        exit_pos=Vector2(700, 50),
    ),
    3: LevelLayout(
        number=3,
        name="Underground",
        walls=_OUTER_WALLS + (
            Rect(140, 140, 60, 20),
            Rect(300, 200, 20, 60),
            Rect(400, 120, 60, 20),
            Rect(540, 160, 20, 100),
            Rect(640, 240, 60, 20),
            Rect(200, 340, 100, 20),
            Rect(440, 400, 20, 60),
            Rect(600, 440, 100, 20),
            Rect(240, 520, 140, 20),
        ),
        spawns=(
            _chase(180, 180),
            _chase(460, 240),
            _patrol(340, 400, (320, 400), (360, 400)),
            _guard(670, 340),
            _chase(300, 540),
            _chase(700, 540),
        ),
        player_spawn=Vector2(100, 100),
        exit_pos=Vector2(60, 60),
    ),
}


def get_level(number: int) -> LevelLayout:
    layout = LEVELS.get(number)
    if layout is None:
        raise ValueError(f"Unknown level {number}; available: {sorted(LEVELS)}")
    return layout
