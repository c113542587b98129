"""GET /api/v1/map — static level layout (fetch once per level)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from shadow_ai.api.dependencies import get_engine_manager
from shadow_ai.api.engine_manager import EngineManager
from shadow_ai.api.schemas import MapResponse, RectSchema

router = APIRouter()


@router.get("/map", response_model=MapResponse)
def get_map(manager: EngineManager = Depends(get_engine_manager)) -> MapResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Simulation not initialized yet.")

    field = snapshot.field
    grid = manager.pathfinder.grid
    exit_rect = snapshot.exit
    return MapResponse(
        level=snapshot.level,
        width=field.width,
        height=field.height,
        walls=[RectSchema(x=o.x, y=o.y, width=o.width, height=o.height) for o in field],
        exit=None if exit_rect is None else RectSchema(
            x=exit_rect.x, y=exit_rect.y, width=exit_rect.width, height=exit_rect.height),
        cell_size=grid.cell_size,
        cols=grid.cols,
        rows=grid.rows,
        walkable_cells=grid.walkable_count(),
    )
