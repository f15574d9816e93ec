from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..domain.models import Project, Task


class ProjectStore(ABC):
    """Document store holding projects with their tasks embedded.

    Each call is atomic for the one project document it touches. Nothing spans
    documents, and nothing spans two calls.
    """

    # -- tasks ------------------------------------------------------------

    @abstractmethod
    def find_tasks_by_project(self, project_id: str) -> list[Task]:
        raise NotImplementedError

    @abstractmethod
    def get_task(self, project_id: str, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    @abstractmethod
    def apply_task_update(self, project_id: str, task_id: str, fields: dict[str, Any]) -> bool:
        """Set ``fields`` on one embedded task. False when the task is absent."""
        raise NotImplementedError

    @abstractmethod
    def append_task(self, project_id: str, task: Task) -> str:
        """Append ``task`` and return the id assigned to it."""
        raise NotImplementedError

    @abstractmethod
    def remove_task(self, project_id: str, task_id: str) -> int:
        raise NotImplementedError

    # -- projects ---------------------------------------------------------

    @abstractmethod
    def create_project(self, project: Project) -> Project:
        raise NotImplementedError

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        raise NotImplementedError

    @abstractmethod
    def list_projects(self, user_id: Optional[str] = None) -> list[Project]:
        raise NotImplementedError

    @abstractmethod
    def update_project(self, project_id: str, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    @abstractmethod
    def delete_project(self, project_id: str) -> int:
        raise NotImplementedError
