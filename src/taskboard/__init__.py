"""Provide the public `taskboard` package exports."""

from __future__ import annotations

from .core import BoardService, apply_reorder, flatten_board_payload, next_task_index, plan_reorder
from .domain import Project, Task, TaskUpdate

__all__ = [
    "BoardService",
    "Project",
    "Task",
    "TaskUpdate",
    "apply_reorder",
    "flatten_board_payload",
    "next_task_index",
    "plan_reorder",
]
