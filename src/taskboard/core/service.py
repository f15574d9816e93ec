"""Board service: the operations the request layer and CLI call.

Wraps a :class:`ProjectStore` with task creation (index allocation), board
reorder, and the project and task CRUD that surrounds them. Store errors are
never caught here; they reach the caller exactly as the store raised them.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Mapping, Optional

from loguru import logger

from ..config import ServiceConfig
from ..constants import TITLE_MAX_LENGTH, TITLE_MIN_LENGTH
from ..domain.errors import ProjectNotFound, TaskNotFound, ValidationFailure
from ..domain.models import Project, Task, TaskUpdate
from ..storage.interfaces import ProjectStore
from .allocator import next_task_index
from .locks import ProjectLockRegistry
from .reorder import Board, apply_reorder, flatten_board_payload, plan_reorder


def _check_title(title: Any) -> str:
    if not isinstance(title, str):
        raise ValidationFailure('"title" must be a string')
    if not TITLE_MIN_LENGTH <= len(title) <= TITLE_MAX_LENGTH:
        raise ValidationFailure(
            f'"title" length must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters'
        )
    return title


def _check_text(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationFailure(f'"{name}" is required')
    return value


class BoardService:
    """Project/task operations over a document store.

    Parameters
    ----------
    store:
        The document store adapter.
    config:
        Service knobs; see :class:`ServiceConfig`.
    locks:
        Per-project lock registry used when ``config.serialize_creation`` is on.
    """

    def __init__(
        self,
        store: ProjectStore,
        config: Optional[ServiceConfig] = None,
        locks: Optional[ProjectLockRegistry] = None,
    ) -> None:
        self.store = store
        self.config = config or ServiceConfig()
        self.locks = locks or ProjectLockRegistry()

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def create_project(self, user_id: str, title: str, description: str) -> Project:
        project = Project(
            user_id=_check_text("userId", user_id),
            title=_check_title(title),
            description=_check_text("description", description),
        )
        created = self.store.create_project(project)
        logger.info("Created project {}: {}", created.id, created.title)
        return created

    def list_projects(self, user_id: Optional[str]) -> list[Project]:
        return self.store.list_projects(user_id)

    def get_project(self, project_id: str) -> Project:
        project = self.store.get_project(project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        return project

    def update_project(self, project_id: str, user_id: str, title: str, description: str) -> Project:
        fields = {
            "user_id": _check_text("userId", user_id),
            "title": _check_title(title),
            "description": _check_text("description", description),
        }
        if not self.store.update_project(project_id, fields):
            raise ProjectNotFound(project_id)
        return self.get_project(project_id)

    def delete_project(self, project_id: str) -> int:
        removed = self.store.delete_project(project_id)
        if removed:
            self.locks.discard(project_id)
            logger.info("Deleted project {}", project_id)
        return removed

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def create_task(self, project_id: str, title: str, description: str) -> Task:
        """Append a task in the default stage with freshly allocated order/index.

        Without ``serialize_creation`` the snapshot read and the append are two
        separate store calls, so concurrent creations may allocate the same
        order/index pair.
        """
        task = Task(
            title=_check_title(title),
            description=_check_text("description", description),
            stage=self.config.default_stage,
        )
        guard = self.locks.hold(project_id) if self.config.serialize_creation else nullcontext()
        with guard:
            existing = self.store.find_tasks_by_project(project_id)
            stage = task.stage if self.config.stage_aware_order else None
            task.order, task.index = next_task_index(existing, stage=stage)
            task.id = self.store.append_task(project_id, task)
        logger.info("Created task {} in project {} (order={}, index={})", task.id, project_id, task.order, task.index)
        return task

    def get_task(self, project_id: str, task_id: str) -> Task:
        task = self.store.get_task(project_id, task_id)
        if task is None:
            raise TaskNotFound(project_id, task_id)
        return task

    def update_task(self, project_id: str, task_id: str, title: str, description: str) -> Task:
        """Edit a task's title and description; stage and position are left alone."""
        fields = {
            "title": _check_title(title),
            "description": _check_text("description", description),
        }
        if not self.store.apply_task_update(project_id, task_id, fields):
            raise TaskNotFound(project_id, task_id)
        return self.get_task(project_id, task_id)

    def remove_task(self, project_id: str, task_id: str) -> int:
        """Remove a task. Its stage keeps the gap in ``order`` until the next reorder."""
        removed = self.store.remove_task(project_id, task_id)
        if removed:
            logger.info("Removed task {} from project {}", task_id, project_id)
        return removed

    # ------------------------------------------------------------------
    # Board
    # ------------------------------------------------------------------

    def get_board(self, project_id: str) -> dict[str, list[Task]]:
        """Tasks grouped by stage, each column sorted by ``order`` then ``index``."""
        columns: dict[str, list[Task]] = {}
        for task in self.store.find_tasks_by_project(project_id):
            columns.setdefault(task.stage, []).append(task)
        for tasks in columns.values():
            tasks.sort(key=lambda t: (t.order, t.index if t.index is not None else 0))
        return columns

    def reorder_board(self, project_id: str, board: Board, *, strict: bool = False) -> list[TaskUpdate]:
        """Place every referenced task at its submitted stage and position.

        Each task is written separately. With ``strict`` a reference to a task
        absent from the project raises :class:`TaskNotFound` once the other
        updates have been written.
        """
        updates = plan_reorder(board)
        applied, missing = apply_reorder(self.store, project_id, updates)
        if missing:
            logger.warning("Reorder of project {} skipped unknown tasks: {}", project_id, missing)
            if strict:
                raise TaskNotFound(project_id, missing)
        logger.debug("Reordered project {}: {} task(s) placed", project_id, len(applied))
        return updates

    def reorder_board_payload(self, project_id: str, payload: Mapping[str, Any], *, strict: bool = False) -> list[TaskUpdate]:
        """:meth:`reorder_board` for the wire shape ``{key: {"name", "items"}}``."""
        return self.reorder_board(project_id, flatten_board_payload(payload), strict=strict)
