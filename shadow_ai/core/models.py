"""Core data models: Vector2, Rect, Target, Agent and its per-variant state."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from shadow_ai.core.enums import BehaviorKind, HuntState


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D world coordinate in pixels."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Vector2:
        return Vector2(self.x * k, self.y * k)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: Vector2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def normalized(self) -> Vector2:
        n = self.length()
        if n == 0:
            return Vector2(0.0, 0.0)
        return Vector2(self.x / n, self.y / n)

    def __repr__(self) -> str:
        return f"({self.x:.1f}, {self.y:.1f})"


ZERO = Vector2(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class Rect:
    """Immutable axis-aligned rectangle; (x, y) is the top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Vector2:
        return Vector2(self.x + self.width / 2, self.y + self.height / 2)

    def contains_point(self, px: float, py: float) -> bool:
        """Inclusive containment; a point on the edge is inside."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def overlaps(self, other: Rect) -> bool:
        """Strict overlap; rectangles sharing only an edge do not overlap."""
        return (
            self.x < other.right
            and self.right > other.x
            and self.y < other.bottom
            and self.bottom > other.y
        )


@dataclass(slots=True)
class Target:
    """The pursued entity (the player). Agents only read it."""

    pos: Vector2
    width: float = 20.0
    height: float = 20.0

    @property
    def rect(self) -> Rect:
        return Rect(self.pos.x, self.pos.y, self.width, self.height)

    @property
    def center(self) -> Vector2:
        return Vector2(self.pos.x + self.width / 2, self.pos.y + self.height / 2)


# ---------------------------------------------------------------------------
# Per-agent state structs
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class PathCache:
    """One cached path per agent, plus what it was computed for."""

    waypoints: list[Vector2] = field(default_factory=list)
    index: int = 0
    computed_at_ms: float = -math.inf
    goal: Vector2 | None = None

    @property
    def exhausted(self) -> bool:
        return self.index >= len(self.waypoints)

    def clear(self) -> None:
        self.waypoints = []
        self.index = 0
        self.goal = None
        self.computed_at_ms = -math.inf

    def copy(self) -> PathCache:
        return PathCache(list(self.waypoints), self.index, self.computed_at_ms, self.goal)


@dataclass(slots=True)
class StuckTracker:
    last_pos: Vector2
    still_ms: float = 0.0
    escape_cooldown_ms: float = 0.0
    escaping: bool = False
    escapes: int = 0

    def copy(self) -> StuckTracker:
        return StuckTracker(self.last_pos, self.still_ms, self.escape_cooldown_ms,
                            self.escaping, self.escapes)


@dataclass(slots=True)
class PatrolMind:
    waypoints: tuple[Vector2, ...]
    index: int = 0

    @property
    def hunt_state(self) -> HuntState:
        return HuntState.IDLE

    def copy(self) -> PatrolMind:
        return PatrolMind(self.waypoints, self.index)


@dataclass(slots=True)
class GuardMind:
    detection_range: float
    hunt_state: HuntState = HuntState.IDLE
    return_delay_ms: float = 0.0
    return_armed: bool = False

    def copy(self) -> GuardMind:
        return GuardMind(self.detection_range, self.hunt_state,
                         self.return_delay_ms, self.return_armed)


@dataclass(slots=True)
class ChaseMind:
    detection_range: float
    last_known: Vector2
    hunt_state: HuntState = HuntState.IDLE
    hunt_ms: float = 0.0
    return_delay_ms: float = 0.0
    return_armed: bool = False
    search_points: tuple[Vector2, ...] = ()
    search_index: int = 0
    search_dwell_ms: float = 0.0

    def copy(self) -> ChaseMind:
        return ChaseMind(
            detection_range=self.detection_range,
            last_known=self.last_known,
            hunt_state=self.hunt_state,
            hunt_ms=self.hunt_ms,
            return_delay_ms=self.return_delay_ms,
            return_armed=self.return_armed,
            search_points=self.search_points,
            search_index=self.search_index,
            search_dwell_ms=self.search_dwell_ms,
        )


Mind = PatrolMind | GuardMind | ChaseMind


@dataclass(slots=True)
class Agent:
    """An enemy governed by the behavior state machine.

    ``pos`` is the top-left corner of the bounding box.  ``mind`` holds
    the variant-specific state and always matches ``kind``.
    """

    id: int
    kind: BehaviorKind
    pos: Vector2
    anchor: Vector2
    mind: Mind
    stuck: StuckTracker
    width: float = 18.0
    height: float = 18.0
    speed: float = 50.0
    path: PathCache = field(default_factory=PathCache)
    contact_cooldown_ms: float = 0.0

    def __post_init__(self) -> None:
        expected = _MIND_TYPES[self.kind]
        if not isinstance(self.mind, expected):
            raise ValueError(
                f"Agent {self.id}: {self.kind.name} requires {expected.__name__}, "
                f"got {type(self.mind).__name__}")

    @property
    def rect(self) -> Rect:
        return Rect(self.pos.x, self.pos.y, self.width, self.height)

    @property
    def center(self) -> Vector2:
        return Vector2(self.pos.x + self.width / 2, self.pos.y + self.height / 2)

    @property
    def hunt_state(self) -> HuntState:
        return self.mind.hunt_state

    @property
    def is_pursuer(self) -> bool:
        return self.kind == BehaviorKind.CHASE

    def copy(self) -> Agent:
        """Deep copy for snapshot generation."""
        return Agent(
            id=self.id,
            kind=self.kind,
            pos=self.pos,
            anchor=self.anchor,
            mind=self.mind.copy(),
            stuck=self.stuck.copy(),
            width=self.width,
            height=self.height,
            speed=self.speed,
            path=self.path.copy(),
            contact_cooldown_ms=self.contact_cooldown_ms,
        )


_MIND_TYPES: dict[BehaviorKind, type] = {
    BehaviorKind.PATROL: PatrolMind,
    BehaviorKind.CHASE: ChaseMind,
    BehaviorKind.GUARD: GuardMind,
}


def make_agent(
    agent_id: int,
    kind: BehaviorKind,
    pos: Vector2,
    *,
    patrol_points: tuple[Vector2, ...] = (),
    detection_range: float = 100.0,
    size: float = 18.0,
    speed: float = 50.0,
) -> Agent:
    """Build a fully-initialized agent for *kind* spawned at *pos*."""
    if kind == BehaviorKind.PATROL:
        mind: Mind = PatrolMind(waypoints=tuple(patrol_points))
    elif kind == BehaviorKind.GUARD:
        mind = GuardMind(detection_range=detection_range)
    elif kind == BehaviorKind.CHASE:
        mind = ChaseMind(detection_range=detection_range, last_known=pos)
    else:
        raise ValueError(f"Unknown behavior kind: {kind!r}")
    return Agent(
        id=agent_id, kind=kind, pos=pos, anchor=pos, mind=mind,
        stuck=StuckTracker(last_pos=pos),
        width=size, height=size, speed=speed,
    )
