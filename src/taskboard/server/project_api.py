"""Project, task and board endpoints.

Routes keep the paths of the board client (``/project/{id}/task``,
``/project/{id}/todo``). Validation happens in the pydantic models; the
:class:`BoardService` errors are translated to HTTP status codes here.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from fastapi import APIRouter, HTTPException, Query
from loguru import logger

from ..core.service import BoardService
from ..domain.errors import (
    DuplicateTitle,
    ProjectNotFound,
    StoreUnavailable,
    TaskboardError,
    TaskNotFound,
    ValidationFailure,
)
from .models import (
    BoardColumn,
    BoardResponse,
    DeleteResponse,
    ProjectRequest,
    ProjectResponse,
    TaskRequest,
    TaskResponse,
)


def _http_error(exc: TaskboardError) -> HTTPException:
    if isinstance(exc, (ValidationFailure, DuplicateTitle)):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, (ProjectNotFound, TaskNotFound)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, StoreUnavailable):
        logger.error("Store failure: {}", exc)
    else:
        logger.exception("Unexpected board error")
    return HTTPException(status_code=500, detail="server error")


def create_project_router(get_service: Callable[[], BoardService]) -> APIRouter:
    """Create the board API router.

    Parameters
    ----------
    get_service:
        A callable returning the :class:`BoardService` for the current app.
    """
    router = APIRouter(tags=["projects"])

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    @router.get("/projects")
    async def list_projects(userId: Optional[str] = Query(None)) -> list[dict[str, Any]]:
        try:
            projects = get_service().list_projects(userId)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return [p.to_wire(include_tasks=False) for p in projects]

    @router.get("/project/{project_id}")
    async def get_project(project_id: str) -> list[dict[str, Any]]:
        try:
            project = get_service().get_project(project_id)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return [project.to_wire()]

    @router.post("/project", response_model=ProjectResponse, status_code=201)
    async def create_project(body: ProjectRequest) -> ProjectResponse:
        try:
            project = get_service().create_project(body.userId, body.title, body.description)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return ProjectResponse(data=project.to_wire(include_tasks=False))

    @router.put("/project/{project_id}", response_model=ProjectResponse)
    async def update_project(project_id: str, body: ProjectRequest) -> ProjectResponse:
        try:
            project = get_service().update_project(project_id, body.userId, body.title, body.description)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return ProjectResponse(data=project.to_wire(include_tasks=False))

    @router.delete("/project/{project_id}", response_model=DeleteResponse)
    async def delete_project(project_id: str) -> DeleteResponse:
        try:
            removed = get_service().delete_project(project_id)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return DeleteResponse(deletedCount=removed)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    @router.post("/project/{project_id}/task", response_model=TaskResponse, status_code=201)
    async def create_task(project_id: str, body: TaskRequest) -> TaskResponse:
        try:
            task = get_service().create_task(project_id, body.title, body.description)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return TaskResponse(task=task.to_wire())

    @router.get("/project/{project_id}/task/{task_id}", response_model=TaskResponse)
    async def get_task(project_id: str, task_id: str) -> TaskResponse:
        try:
            task = get_service().get_task(project_id, task_id)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return TaskResponse(task=task.to_wire())

    @router.put("/project/{project_id}/task/{task_id}", response_model=TaskResponse)
    async def update_task(project_id: str, task_id: str, body: TaskRequest) -> TaskResponse:
        try:
            task = get_service().update_task(project_id, task_id, body.title, body.description)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return TaskResponse(task=task.to_wire())

    @router.delete("/project/{project_id}/task/{task_id}", response_model=DeleteResponse)
    async def remove_task(project_id: str, task_id: str) -> DeleteResponse:
        try:
            removed = get_service().remove_task(project_id, task_id)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return DeleteResponse(deletedCount=removed)

    # ------------------------------------------------------------------
    # Board
    # ------------------------------------------------------------------

    @router.get("/project/{project_id}/board", response_model=BoardResponse)
    async def get_board(project_id: str) -> BoardResponse:
        try:
            columns = get_service().get_board(project_id)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return BoardResponse(columns={stage: [t.to_wire() for t in tasks] for stage, tasks in columns.items()})

    @router.put("/project/{project_id}/todo")
    async def reorder_board(
        project_id: str,
        board: dict[str, BoardColumn],
        strict: bool = Query(False),
    ) -> list[dict[str, Any]]:
        columns = [(column.name, [item.id for item in column.items]) for column in board.values()]
        try:
            updates = get_service().reorder_board(project_id, columns, strict=strict)
        except TaskboardError as exc:
            raise _http_error(exc) from exc
        return [u.to_wire() for u in updates]

    return router
