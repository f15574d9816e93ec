"""Error kinds surfaced by the board service.

The store raises these, the service lets them through untouched, and the
request layer maps them onto HTTP status codes.
"""


class TaskboardError(Exception):
    """Base exception for all taskboard errors."""


class ValidationFailure(TaskboardError):
    """Input failed title/description/owner checks."""

    def __init__(self, message: str):
        super().__init__(message)


class ProjectNotFound(TaskboardError):
    """Project with given ID doesn't exist."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project {project_id} not found")


class TaskNotFound(TaskboardError):
    """Task ID absent from the project."""

    def __init__(self, project_id: str, task_ids: list[str] | str):
        self.project_id = project_id
        self.task_ids = [task_ids] if isinstance(task_ids, str) else list(task_ids)
        super().__init__(f"Task(s) {', '.join(self.task_ids)} not found in project {project_id}")


class DuplicateTitle(TaskboardError):
    """Another project already uses this title."""

    def __init__(self, title: str):
        self.title = title
        super().__init__("title must be unique")


class StoreUnavailable(TaskboardError):
    """Any other failure of the document store."""
