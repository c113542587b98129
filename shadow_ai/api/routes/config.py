"""GET /api/v1/config — expose simulation configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from shadow_ai.api.dependencies import get_engine_manager
from shadow_ai.api.engine_manager import EngineManager
from shadow_ai.api.schemas import SimulationConfigResponse

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationConfigResponse:
    cfg = manager.config
    return SimulationConfigResponse(
        world_seed=cfg.world_seed,
        world_width=cfg.world_width,
        world_height=cfg.world_height,
        level=manager.level,
        frame_ms=cfg.frame_ms,
        max_frames=cfg.max_frames,
        agent_size=cfg.agent_size,
        agent_speed=cfg.agent_speed,
        detection_range=cfg.detection_range,
        hunt_duration_ms=cfg.hunt_duration_ms,
        return_delay_ms=cfg.return_delay_ms,
        search_dwell_ms=cfg.search_dwell_ms,
        cell_size=cfg.cell_size,
        max_open_nodes=cfg.max_open_nodes,
        tick_rate=manager.tick_rate,
    )
