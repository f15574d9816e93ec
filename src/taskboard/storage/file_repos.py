from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

from loguru import logger

from ..constants import SCHEMA_VERSION
from ..domain.errors import DuplicateTitle, ProjectNotFound, StoreUnavailable
from ..domain.models import Project, Task, new_id
from ..io_utils import FileLock, _atomic_write_yaml, _load_data_with_error
from .interfaces import ProjectStore

_TASK_FIELDS = {"title", "description", "stage", "order", "index"}
_PROJECT_FIELDS = {"user_id", "title", "description"}


class FileProjectStore(ProjectStore):
    """All project documents in one YAML file.

    Every public call takes the thread lock and the file lock, loads the file,
    mutates at most one project, and writes it back atomically.
    """

    def __init__(self, path: Path, lock_path: Path) -> None:
        self._path = path
        self._lock = FileLock(lock_path)
        self._thread_lock = threading.RLock()

    # -- low level --------------------------------------------------------

    def _load(self) -> list[Project]:
        data, err = _load_data_with_error(self._path, {})
        if err:
            raise StoreUnavailable(err)
        items = data.get("projects", [])
        if not isinstance(items, list):
            raise StoreUnavailable(f"{self._path.name}: 'projects' must be a list, got {type(items).__name__}")
        projects = [Project.from_dict(item) for item in items if isinstance(item, dict)]
        for position, project in enumerate(projects):
            if not project.id:
                raise StoreUnavailable(f"{self._path.name}: project #{position} has no id")
        return projects

    def _save(self, projects: list[Project]) -> None:
        payload = {"version": SCHEMA_VERSION, "projects": [p.to_dict() for p in projects]}
        try:
            _atomic_write_yaml(self._path, payload)
        except OSError as exc:
            raise StoreUnavailable(f"{self._path.name}: {exc.__class__.__name__}: {exc}") from exc

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            with self._thread_lock:
                with self._lock:
                    yield
        except OSError as exc:
            raise StoreUnavailable(f"{self._path.name}: {exc.__class__.__name__}: {exc}") from exc

    @staticmethod
    def _find(projects: list[Project], project_id: str) -> Optional[Project]:
        for project in projects:
            if project.id == project_id:
                return project
        return None

    def _require(self, projects: list[Project], project_id: str) -> Project:
        project = self._find(projects, project_id)
        if project is None:
            raise ProjectNotFound(project_id)
        return project

    @staticmethod
    def _check_title(projects: list[Project], title: str, *, exclude_id: Optional[str] = None) -> None:
        for other in projects:
            if other.title == title and other.id != exclude_id:
                raise DuplicateTitle(title)

    # -- tasks ------------------------------------------------------------

    def find_tasks_by_project(self, project_id: str) -> list[Task]:
        with self._locked():
            project = self._require(self._load(), project_id)
        return sorted(project.tasks, key=lambda t: (t.index is None, t.index or 0))

    def get_task(self, project_id: str, task_id: str) -> Optional[Task]:
        with self._locked():
            project = self._require(self._load(), project_id)
        return project.find_task(task_id)

    def apply_task_update(self, project_id: str, task_id: str, fields: dict[str, Any]) -> bool:
        with self._locked():
            projects = self._load()
            project = self._require(projects, project_id)
            task = project.find_task(task_id)
            if task is None:
                return False
            for key, value in fields.items():
                if key in _TASK_FIELDS:
                    setattr(task, key, value)
            project.touch()
            self._save(projects)
        return True

    def append_task(self, project_id: str, task: Task) -> str:
        with self._locked():
            projects = self._load()
            project = self._require(projects, project_id)
            task.id = task.id or new_id()
            project.tasks.append(task)
            project.touch()
            self._save(projects)
        logger.debug("Appended task {} to project {}", task.id, project_id)
        return task.id

    def remove_task(self, project_id: str, task_id: str) -> int:
        with self._locked():
            projects = self._load()
            project = self._require(projects, project_id)
            keep = [t for t in project.tasks if t.id != task_id]
            removed = len(project.tasks) - len(keep)
            if removed:
                project.tasks = keep
                project.touch()
                self._save(projects)
        return removed

    # -- projects ---------------------------------------------------------

    def create_project(self, project: Project) -> Project:
        with self._locked():
            projects = self._load()
            self._check_title(projects, project.title)
            while self._find(projects, project.id) is not None:
                project.id = new_id()
            project.touch()
            projects.append(project)
            self._save(projects)
        return project

    def get_project(self, project_id: str) -> Optional[Project]:
        with self._locked():
            return self._find(self._load(), project_id)

    def list_projects(self, user_id: Optional[str] = None) -> list[Project]:
        with self._locked():
            projects = self._load()
        if user_id is None:
            return projects
        return [p for p in projects if p.user_id == user_id]

    def update_project(self, project_id: str, fields: dict[str, Any]) -> bool:
        with self._locked():
            projects = self._load()
            project = self._find(projects, project_id)
            if project is None:
                return False
            if "title" in fields:
                self._check_title(projects, fields["title"], exclude_id=project_id)
            for key, value in fields.items():
                if key in _PROJECT_FIELDS:
                    setattr(project, key, value)
            project.touch()
            self._save(projects)
        return True

    def delete_project(self, project_id: str) -> int:
        with self._locked():
            projects = self._load()
            keep = [p for p in projects if p.id != project_id]
            removed = len(projects) - len(keep)
            if removed:
                self._save(keep)
        return removed
