"""GET /api/v1/state — dynamic agent, target and event data (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from shadow_ai.api.dependencies import get_engine_manager
from shadow_ai.api.engine_manager import EngineManager
from shadow_ai.api.schemas import (
    AgentSchema,
    EventSchema,
    PointSchema,
    RectSchema,
    TargetSchema,
    WorldStateResponse,
)
from shadow_ai.core.models import Agent

router = APIRouter()


def _serialize_agent(a: Agent, include_paths: bool) -> AgentSchema:
    path: list[PointSchema] = []
    if include_paths:
        path = [PointSchema(x=p.x, y=p.y) for p in a.path.waypoints[a.path.index:]]
    return AgentSchema(
        id=a.id,
        kind=a.kind.name.lower(),
        x=a.pos.x,
        y=a.pos.y,
        width=a.width,
        height=a.height,
        anchor_x=a.anchor.x,
        anchor_y=a.anchor.y,
        hunt_state=a.hunt_state.name.lower(),
        speed=a.speed,
        detection_range=getattr(a.mind, "detection_range", None),
        path=path,
        escaping=a.stuck.escaping,
    )


@router.get("/state", response_model=WorldStateResponse)
def get_state(
    since_frame: int = Query(0, ge=0, description="Only return events from this frame onward"),
    include_paths: bool = Query(False, description="Include each agent's remaining path"),
    manager: EngineManager = Depends(get_engine_manager),
) -> WorldStateResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Simulation not initialized yet.")

    target = snapshot.target
    return WorldStateResponse(
        frame=snapshot.frame,
        elapsed_ms=snapshot.elapsed_ms,
        level=snapshot.level,
        running=manager.running,
        paused=manager.paused,
        agents=[_serialize_agent(a, include_paths) for a in snapshot.ordered_agents()],
        target=None if target is None else TargetSchema(
            x=target.pos.x, y=target.pos.y, width=target.width, height=target.height),
        keys=[RectSchema(x=k.x, y=k.y, width=k.width, height=k.height) for k in snapshot.keys],
        keys_collected=snapshot.keys_collected,
        exit_unlocked=not snapshot.keys,
        escaped=snapshot.escaped,
        events=[
            EventSchema(frame=ev.frame, category=ev.category, message=ev.message,
                        agent_ids=list(ev.agent_ids))
            for ev in manager.event_log.since_frame(since_frame)
        ],
    )
