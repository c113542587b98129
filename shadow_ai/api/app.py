"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shadow_ai.api.dependencies import set_engine_manager
from shadow_ai.api.engine_manager import EngineManager
from shadow_ai.api.routes import api_router
from shadow_ai.config import SimulationConfig
from shadow_ai.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SimulationConfig | None = None, autostart: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    if config is None:
        config = SimulationConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started (level %d).", manager.level)
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Shadow Escape Enemy AI",
        description=(
            "Enemy navigation and pursuit simulation — visualization and control API.\n\n"
            "## API Groups\n\n"
            "- **State** — Live agent positions, hunt states, target, keys and events\n"
            "- **Map** — Static level layout and navigation grid summary\n"
            "- **Control** — Simulation lifecycle: start, pause, resume, step, reset, speed\n"
            "- **Target** — Manual target placement\n"
            "- **Debug** — Ad-hoc A* path queries\n"
            "- **Config** — Read-only simulation configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
