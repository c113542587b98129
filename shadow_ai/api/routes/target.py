"""PUT /api/v1/target — move the target by hand (disables the script)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from shadow_ai.api.dependencies import get_engine_manager
from shadow_ai.api.engine_manager import EngineManager
from shadow_ai.api.schemas import ControlResponse, TargetRequest
from shadow_ai.core.models import Vector2

router = APIRouter()


@router.put("/target", response_model=ControlResponse)
def put_target(
    body: TargetRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Simulation not initialized yet.")
    field = snapshot.field
    if body.x > field.width or body.y > field.height:
        raise HTTPException(status_code=422, detail="Target position outside the play area.")
    manager.set_target(Vector2(body.x, body.y))
    return ControlResponse(status="ok", message=f"Target set to ({body.x:.1f}, {body.y:.1f}).",
                           frame=snapshot.frame)
