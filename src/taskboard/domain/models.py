"""Project and task documents.

A project embeds its tasks inline; there is no separate task collection.
Dataclass field names are snake_case; ``to_wire()`` renders the public JSON
shape (``_id``, ``userId``, ``updatedAt``) the board client expects.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from ..constants import DEFAULT_STAGE


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    """24 hex characters, the same width as a document-store object id."""
    return uuid.uuid4().hex[:24]


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class Task:
    id: str = ""
    title: str = ""
    description: str = ""
    stage: str = DEFAULT_STAGE
    order: int = 0
    index: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_wire(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "stage": self.stage,
            "order": self.order,
            "index": self.index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            stage=DEFAULT_STAGE if data.get("stage") is None else str(data["stage"]),
            order=_int_or_none(data.get("order")) or 0,
            index=_int_or_none(data.get("index")),
        )


@dataclass
class Project:
    id: str = field(default_factory=new_id)
    user_id: str = ""
    title: str = ""
    description: str = ""
    tasks: list[Task] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    def touch(self) -> None:
        self.updated_at = now_iso()

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["tasks"] = [t.to_dict() for t in self.tasks]
        return data

    def to_wire(self, *, include_tasks: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "_id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "updatedAt": self.updated_at,
        }
        if include_tasks:
            data["task"] = [t.to_wire() for t in sorted(self.tasks, key=lambda t: t.order)]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        tasks = [Task.from_dict(t) for t in list(data.get("tasks") or []) if isinstance(t, dict)]
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            user_id=str(data.get("user_id") or ""),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            tasks=tasks,
            created_at=str(data.get("created_at") or now_iso()),
            updated_at=str(data.get("updated_at") or now_iso()),
        )


@dataclass(frozen=True)
class TaskUpdate:
    """New placement for one task produced by a board reorder."""

    task_id: str
    stage: str
    order: int

    def fields(self) -> dict[str, Any]:
        return {"stage": self.stage, "order": self.order}

    def to_wire(self) -> dict[str, Any]:
        return {"name": self.task_id, "stage": self.stage, "order": self.order}
