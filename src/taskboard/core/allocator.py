"""Position numbers for a task about to be appended to a project."""

from __future__ import annotations

from typing import Optional, Sequence

from ..domain.models import Task


def _usable_index(value: object) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def next_task_index(existing: Sequence[Task], *, stage: Optional[str] = None) -> tuple[int, int]:
    """Return ``(next_order, next_index)`` for a new task.

    ``next_order`` is the number of tasks in the project, or the number of
    tasks already in ``stage`` when one is given. ``next_index`` is one past
    the largest index seen. An empty project yields ``(0, 1)``; a project whose
    tasks carry no usable index falls back to the task count.

    The result describes the snapshot it was computed from. Appending it
    safely under concurrent creation is the caller's job.
    """
    if stage is None:
        next_order = len(existing)
    else:
        next_order = sum(1 for task in existing if task.stage == stage)

    indices = [i for i in (_usable_index(task.index) for task in existing) if i is not None]
    if indices:
        next_index = max(indices) + 1
    elif existing:
        next_index = len(existing)
    else:
        next_index = 1
    return next_order, next_index
