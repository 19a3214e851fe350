"""
FastAPI application entry point for the to-do backend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from todo_backend.config import get_settings
from todo_backend.dependencies import reset_dependencies
from todo_backend.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Release every session's auth-state subscription on shutdown.
    reset_dependencies()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    app = FastAPI(title="To-Do Lists Backend", version="0.1.0", lifespan=lifespan)
    app.include_router(router, prefix=settings.api_prefix)
    logger.info("Using refresh policy %s", settings.refresh_policy)
    return app


app = create_app()
