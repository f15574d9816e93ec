"""FastAPI application for the task board service."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ..config import ServiceConfig
from ..core.service import BoardService
from ..storage.container import Container
from .project_api import create_project_router


def create_app(
    project_dir: Optional[Path] = None,
    enable_cors: bool = True,
    config: Optional[ServiceConfig] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        project_dir: Directory holding the `.taskboard/` state root.
        enable_cors: Whether to enable CORS.
        config: Overrides the config loaded from the state root.

    Returns:
        Configured FastAPI app.
    """
    app = FastAPI(
        title="Taskboard",
        description="Projects with Kanban-ordered tasks",
        version="1.0.0",
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    container = Container(project_dir or Path.cwd(), config=config)
    app.state.container = container
    logger.info("Serving board state from {}", container.state_root)

    def _get_service() -> BoardService:
        return app.state.container.service

    app.include_router(create_project_router(_get_service))
    return app
