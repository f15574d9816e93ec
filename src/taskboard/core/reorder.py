"""Board reorder: flatten a submitted board into per-task placements.

A board maps each stage label to the ordered task references in that column.
Every reference becomes one :class:`TaskUpdate` carrying the stage and its
zero-based position. Updates are applied one task at a time; there is no
cross-task transaction, so a half-applied board converges once the client
submits the full board again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence, Union

from ..domain.errors import ValidationFailure
from ..domain.models import TaskUpdate

if TYPE_CHECKING:
    from ..storage.interfaces import ProjectStore

TaskRef = Any
Board = Union[Mapping[str, Sequence[TaskRef]], Iterable[tuple[str, Sequence[TaskRef]]]]


def task_ref_id(ref: TaskRef) -> str:
    """Resolve a task reference (id string, ``{"_id": ...}`` mapping, or object) to its id."""
    if isinstance(ref, str):
        return ref
    if isinstance(ref, Mapping):
        value = ref.get("_id", ref.get("id"))
    else:
        value = getattr(ref, "id", None)
    if value is None:
        raise ValidationFailure(f"Task reference has no id: {ref!r}")
    return str(value)


def flatten_board_payload(payload: Mapping[str, Any]) -> list[tuple[str, list[TaskRef]]]:
    """Turn ``{key: {"name": label, "items": [...]}}`` into ``(label, items)`` pairs.

    The stage label comes from each column's ``name``; the key only fixes the
    column's position in the payload. Pairs are kept as a list so two columns
    sharing a label both survive.
    """
    columns: list[tuple[str, list[TaskRef]]] = []
    for key, column in payload.items():
        if isinstance(column, Mapping):
            name = column.get("name", key)
            items = column.get("items") or []
        else:
            name = getattr(column, "name", key)
            items = getattr(column, "items", None) or []
        columns.append((str(name), list(items)))
    return columns


def plan_reorder(board: Board) -> list[TaskUpdate]:
    """One update per referenced task, in stage order then position order.

    Tasks missing from every column get no update. A task listed twice gets two
    updates and the last one applied wins; the board is not validated.
    """
    columns = board.items() if isinstance(board, Mapping) else board
    updates: list[TaskUpdate] = []
    for stage, refs in columns:
        for position, ref in enumerate(refs):
            updates.append(TaskUpdate(task_id=task_ref_id(ref), stage=stage, order=position))
    return updates


def apply_reorder(
    store: ProjectStore,
    project_id: str,
    updates: Sequence[TaskUpdate],
) -> tuple[list[TaskUpdate], list[str]]:
    """Write each update through the store independently.

    Returns ``(applied, missing_task_ids)``. A task absent from the project
    does not stop the remaining updates. Store errors propagate as raised;
    updates written before the failure stay written.
    """
    applied: list[TaskUpdate] = []
    missing: list[str] = []
    for update in updates:
        if store.apply_task_update(project_id, update.task_id, update.fields()):
            applied.append(update)
        else:
            missing.append(update.task_id)
    return applied, missing
