"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Geometry ---

class PointSchema(BaseModel):
    x: float
    y: float


class RectSchema(BaseModel):
    x: float
    y: float
    width: float
    height: float


# --- State ---

class AgentSchema(BaseModel):
    id: int
    kind: str
    x: float
    y: float
    width: float
    height: float
    anchor_x: float
    anchor_y: float
    hunt_state: str
    speed: float
    detection_range: float | None = None
    path: list[PointSchema] = Field(default_factory=list)
    escaping: bool = False


class TargetSchema(BaseModel):
    x: float
    y: float
    width: float
    height: float


class EventSchema(BaseModel):
    frame: int
    category: str
    message: str
    agent_ids: list[int] = Field(default_factory=list)


class WorldStateResponse(BaseModel):
    frame: int
    elapsed_ms: float
    level: int
    running: bool
    paused: bool
    agents: list[AgentSchema]
    target: TargetSchema | None = None
    keys: list[RectSchema] = Field(default_factory=list)
    keys_collected: int = 0
    exit_unlocked: bool = False
    escaped: bool = False
    events: list[EventSchema] = Field(default_factory=list)


# --- Map ---

class MapResponse(BaseModel):
    level: int
    width: float
    height: float
    walls: list[RectSchema]
    exit: RectSchema | None = None
    cell_size: int
    cols: int
    rows: int
    walkable_cells: int


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    frame: int = 0


# --- Target / path ---

class TargetRequest(BaseModel):
    x: float = Field(..., ge=0.0, le=10_000.0)
    y: float = Field(..., ge=0.0, le=10_000.0)


class PathRequest(BaseModel):
    start: PointSchema
    goal: PointSchema


class PathResponse(BaseModel):
    found: bool
    length: float
    waypoints: list[PointSchema]


# --- Config ---

class SimulationConfigResponse(BaseModel):
    world_seed: int
    world_width: int
    world_height: int
    level: int
    frame_ms: float
    max_frames: int
    agent_size: float
    agent_speed: float
    detection_range: float
    hunt_duration_ms: float
    return_delay_ms: float
    search_dwell_ms: float
    cell_size: int
    max_open_nodes: int
    tick_rate: float
