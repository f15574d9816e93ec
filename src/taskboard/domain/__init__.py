from .errors import (
    DuplicateTitle,
    ProjectNotFound,
    StoreUnavailable,
    TaskboardError,
    TaskNotFound,
    ValidationFailure,
)
from .models import Project, Task, TaskUpdate, new_id, now_iso

__all__ = [
    "DuplicateTitle",
    "Project",
    "ProjectNotFound",
    "StoreUnavailable",
    "Task",
    "TaskNotFound",
    "TaskUpdate",
    "TaskboardError",
    "ValidationFailure",
    "new_id",
    "now_iso",
]
