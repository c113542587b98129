"""POST /api/v1/path — debug A* query against the current level."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shadow_ai.api.dependencies import get_engine_manager
from shadow_ai.api.engine_manager import EngineManager
from shadow_ai.api.schemas import PathRequest, PathResponse, PointSchema
from shadow_ai.core.models import Vector2

router = APIRouter()


@router.post("/path", response_model=PathResponse)
def find_path(
    body: PathRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> PathResponse:
    # The pathfinder holds no per-query state, so sharing it with the engine thread is safe
    path = manager.pathfinder.find_path(Vector2(body.start.x, body.start.y),
                                        Vector2(body.goal.x, body.goal.y))
    length = sum(a.distance(b) for a, b in zip(path, path[1:]))
    return PathResponse(
        found=bool(path),
        length=length,
        waypoints=[PointSchema(x=p.x, y=p.y) for p in path],
    )
