"""POST /api/v1/control/{action} — simulation lifecycle controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query

from shadow_ai.api.dependencies import get_engine_manager
from shadow_ai.api.engine_manager import EngineManager
from shadow_ai.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _frame(manager: EngineManager) -> int:
    snapshot = manager.get_snapshot()
    return snapshot.frame if snapshot else 0


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    level: int | None = Query(None, ge=1, description="Level to load on reset"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    frame = _frame(manager)

    match action:
        case ControlAction.start:
            if manager.running:
                return ControlResponse(status="noop", message="Already running.", frame=frame)
            manager.start()
            return ControlResponse(status="ok", message="Simulation started.", frame=frame)

        case ControlAction.pause:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", frame=frame)
            manager.pause()
            return ControlResponse(status="ok", message="Simulation paused.", frame=frame)

        case ControlAction.resume:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", frame=frame)
            manager.resume()
            return ControlResponse(status="ok", message="Simulation resumed.", frame=frame)

        case ControlAction.step:
            if not manager.running:
                manager.start(paused=True)
            manager.step()
            return ControlResponse(status="ok", message="Single frame executed.", frame=frame)

        case ControlAction.reset:
            try:
                manager.reset(level)
            except ValueError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
            return ControlResponse(status="ok", message=f"Simulation reset (level {manager.level}).",
                                   frame=_frame(manager))


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    fps: float = Query(60.0, gt=0.5, le=1000.0, description="Frames per second"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.tick_rate = 1.0 / fps
    return ControlResponse(status="ok", message=f"Speed set to {fps:.1f} fps.", frame=_frame(manager))
