"""Versioned API route modules."""

from fastapi import APIRouter

from shadow_ai.api.routes.config import router as config_router
from shadow_ai.api.routes.control import router as control_router
from shadow_ai.api.routes.map import router as map_router
from shadow_ai.api.routes.path import router as path_router
from shadow_ai.api.routes.state import router as state_router
from shadow_ai.api.routes.target import router as target_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(map_router, tags=["Map"])
api_router.include_router(state_router, tags=["State"])
api_router.include_router(control_router, tags=["Control"])
api_router.include_router(target_router, tags=["Target"])
api_router.include_router(path_router, tags=["Debug"])
api_router.include_router(config_router, tags=["Config"])

__all__ = ["api_router"]
