"""Tests for BoardService: task creation, board reorder, CRUD glue."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from taskboard.config import ServiceConfig
from taskboard.core.service import BoardService
from taskboard.domain.errors import DuplicateTitle, ProjectNotFound, TaskNotFound, ValidationFailure
from taskboard.domain.models import Task
from taskboard.storage.file_repos import FileProjectStore


@pytest.fixture
def project_id(service: BoardService) -> str:
    return service.create_project("u1", "Website", "Relaunch").id


def _placements(service: BoardService, project_id: str) -> dict[str, tuple[str, int]]:
    return {t.id: (t.stage, t.order) for t in service.store.find_tasks_by_project(project_id)}


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class TestProjects:
    def test_title_length_validated(self, service: BoardService) -> None:
        with pytest.raises(ValidationFailure):
            service.create_project("u1", "ab", "desc")
        with pytest.raises(ValidationFailure):
            service.create_project("u1", "x" * 31, "desc")

    def test_description_required(self, service: BoardService) -> None:
        with pytest.raises(ValidationFailure):
            service.create_project("u1", "Website", "")

    def test_duplicate_title_surfaces_unchanged(self, service: BoardService, project_id: str) -> None:
        with pytest.raises(DuplicateTitle):
            service.create_project("u2", "Website", "Another")

    def test_update_and_get(self, service: BoardService, project_id: str) -> None:
        updated = service.update_project(project_id, "u1", "Website v2", "Relaunch again")
        assert updated.title == "Website v2"
        assert service.get_project(project_id).description == "Relaunch again"

    def test_update_missing(self, service: BoardService) -> None:
        with pytest.raises(ProjectNotFound):
            service.update_project("nope", "u1", "Website", "desc")

    def test_get_missing(self, service: BoardService) -> None:
        with pytest.raises(ProjectNotFound):
            service.get_project("nope")

    def test_delete(self, service: BoardService, project_id: str) -> None:
        assert service.delete_project(project_id) == 1
        assert service.list_projects("u1") == []


# ---------------------------------------------------------------------------
# Task creation
# ---------------------------------------------------------------------------

class TestCreateTask:
    def test_first_task(self, service: BoardService, project_id: str) -> None:
        task = service.create_task(project_id, "Write copy", "Landing page")
        assert task.id
        assert (task.stage, task.order, task.index) == ("Requested", 0, 1)

    def test_sequential_creation_is_dense(self, service: BoardService, project_id: str) -> None:
        tasks = [service.create_task(project_id, f"Task {n}", "d") for n in range(5)]
        assert [t.index for t in tasks] == [1, 2, 3, 4, 5]
        assert [t.order for t in tasks] == [0, 1, 2, 3, 4]
        stored = service.store.find_tasks_by_project(project_id)
        assert sorted(t.index for t in stored) == [1, 2, 3, 4, 5]

    def test_index_not_reused_after_removal(self, service: BoardService, project_id: str) -> None:
        a = service.create_task(project_id, "Task A", "d")
        b = service.create_task(project_id, "Task B", "d")
        service.remove_task(project_id, b.id)
        c = service.create_task(project_id, "Task C", "d")
        assert (a.index, c.index) == (1, 2)
        service.remove_task(project_id, a.id)
        d = service.create_task(project_id, "Task D", "d")
        assert d.index == 3

    def test_global_order_ignores_stage(self, service: BoardService, project_id: str) -> None:
        a = service.create_task(project_id, "Task A", "d")
        b = service.create_task(project_id, "Task B", "d")
        service.reorder_board(project_id, {"Requested": [a.id], "Done": [b.id]})
        c = service.create_task(project_id, "Task C", "d")
        # One task sits in Requested, yet the new one lands at the project-wide count.
        assert (c.stage, c.order) == ("Requested", 2)

    def test_stage_order_counts_target_stage(self, store: FileProjectStore) -> None:
        service = BoardService(store, ServiceConfig(order_on_create="stage"))
        pid = service.create_project("u1", "Website", "Relaunch").id
        a = service.create_task(pid, "Task A", "d")
        b = service.create_task(pid, "Task B", "d")
        service.reorder_board(pid, {"Requested": [a.id], "Done": [b.id]})
        c = service.create_task(pid, "Task C", "d")
        assert (c.stage, c.order, c.index) == ("Requested", 1, 3)

    def test_default_stage_from_config(self, store: FileProjectStore) -> None:
        service = BoardService(store, ServiceConfig(default_stage="Inbox"))
        pid = service.create_project("u1", "Website", "Relaunch").id
        assert service.create_task(pid, "Task A", "d").stage == "Inbox"

    def test_missing_project(self, service: BoardService) -> None:
        with pytest.raises(ProjectNotFound):
            service.create_task("nope", "Task A", "d")

    def test_invalid_title(self, service: BoardService, project_id: str) -> None:
        with pytest.raises(ValidationFailure):
            service.create_task(project_id, "no", "d")
        assert service.store.find_tasks_by_project(project_id) == []


# ---------------------------------------------------------------------------
# Task edits and removal
# ---------------------------------------------------------------------------

class TestTaskEdits:
    def test_update_changes_text_only(self, service: BoardService, project_id: str) -> None:
        a = service.create_task(project_id, "Task A", "d")
        service.reorder_board(project_id, {"Review": [a.id]})
        updated = service.update_task(project_id, a.id, "Task A2", "new text")
        assert (updated.title, updated.description) == ("Task A2", "new text")
        assert (updated.stage, updated.order, updated.index) == ("Review", 0, 1)

    def test_update_missing_task(self, service: BoardService, project_id: str) -> None:
        with pytest.raises(TaskNotFound):
            service.update_task(project_id, "missing", "Task A", "d")

    def test_get_missing_task(self, service: BoardService, project_id: str) -> None:
        with pytest.raises(TaskNotFound):
            service.get_task(project_id, "missing")

    def test_remove_leaves_gap_in_order(self, service: BoardService, project_id: str) -> None:
        tasks = [service.create_task(project_id, f"Task {n}", "d") for n in range(3)]
        assert service.remove_task(project_id, tasks[1].id) == 1
        orders = [t.order for t in service.get_board(project_id)["Requested"]]
        assert orders == [0, 2]

    def test_remove_missing_task(self, service: BoardService, project_id: str) -> None:
        assert service.remove_task(project_id, "missing") == 0


# ---------------------------------------------------------------------------
# Board reorder
# ---------------------------------------------------------------------------

class TestReorderBoard:
    def test_places_tasks(self, service: BoardService, project_id: str) -> None:
        t1, t2, t3 = (service.create_task(project_id, f"Task {n}", "d") for n in range(3))
        updates = service.reorder_board(project_id, {"A": [t1.id, t2.id], "B": [t3.id]})
        assert [(u.task_id, u.stage, u.order) for u in updates] == [
            (t1.id, "A", 0),
            (t2.id, "A", 1),
            (t3.id, "B", 0),
        ]
        assert _placements(service, project_id) == {t1.id: ("A", 0), t2.id: ("A", 1), t3.id: ("B", 0)}

    def test_unlisted_task_untouched(self, service: BoardService, project_id: str) -> None:
        t1, t2, t3 = (service.create_task(project_id, f"Task {n}", "d") for n in range(3))
        service.reorder_board(project_id, {"A": [t3.id, t1.id]})
        assert _placements(service, project_id)[t2.id] == ("Requested", 1)

    def test_idempotent(self, service: BoardService, project_id: str) -> None:
        t1, t2, t3 = (service.create_task(project_id, f"Task {n}", "d") for n in range(3))
        board = {"Doing": [t2.id], "Done": [t3.id, t1.id]}
        service.reorder_board(project_id, board)
        once = _placements(service, project_id)
        service.reorder_board(project_id, board)
        assert _placements(service, project_id) == once

    def test_resubmission_converges_after_partial_apply(self, service: BoardService, project_id: str) -> None:
        t1, t2 = (service.create_task(project_id, f"Task {n}", "d") for n in range(2))
        board = {"Done": [t2.id, t1.id]}
        # Only the first placement made it to the store before an interruption.
        service.store.apply_task_update(project_id, t2.id, {"stage": "Done", "order": 0})
        assert _placements(service, project_id)[t1.id] == ("Requested", 0)
        service.reorder_board(project_id, board)
        assert _placements(service, project_id) == {t2.id: ("Done", 0), t1.id: ("Done", 1)}

    def test_reorder_compacts_gap_left_by_removal(self, service: BoardService, project_id: str) -> None:
        t1, t2, t3 = (service.create_task(project_id, f"Task {n}", "d") for n in range(3))
        service.remove_task(project_id, t2.id)
        service.reorder_board(project_id, {"Requested": [t1.id, t3.id]})
        assert [t.order for t in service.get_board(project_id)["Requested"]] == [0, 1]

    def test_unknown_task_acknowledged_by_default(self, service: BoardService, project_id: str) -> None:
        t1 = service.create_task(project_id, "Task 1", "d")
        updates = service.reorder_board(project_id, {"A": ["ghost", t1.id]})
        assert [u.task_id for u in updates] == ["ghost", t1.id]
        assert _placements(service, project_id)[t1.id] == ("A", 1)

    def test_unknown_task_strict(self, service: BoardService, project_id: str) -> None:
        t1 = service.create_task(project_id, "Task 1", "d")
        with pytest.raises(TaskNotFound) as info:
            service.reorder_board(project_id, {"A": ["ghost", t1.id]}, strict=True)
        assert info.value.task_ids == ["ghost"]
        # The known task was still placed.
        assert _placements(service, project_id)[t1.id] == ("A", 1)

    def test_empty_stage_label_survives_reload(self, service: BoardService, project_id: str) -> None:
        t1 = service.create_task(project_id, "Task 1", "d")
        updates = service.reorder_board(project_id, {"": [t1.id]})
        assert updates[0].stage == ""
        assert service.get_task(project_id, t1.id).stage == ""

    def test_payload_shape(self, service: BoardService, project_id: str) -> None:
        t1, t2 = (service.create_task(project_id, f"Task {n}", "d") for n in range(2))
        payload = {
            "column-1": {"name": "Requested", "items": [{"_id": t2.id, "title": "Task 1"}]},
            "column-2": {"name": "Done", "items": [{"_id": t1.id}]},
        }
        service.reorder_board_payload(project_id, payload)
        assert _placements(service, project_id) == {t2.id: ("Requested", 0), t1.id: ("Done", 0)}

    def test_board_grouping(self, service: BoardService, project_id: str) -> None:
        t1, t2, t3 = (service.create_task(project_id, f"Task {n}", "d") for n in range(3))
        service.reorder_board(project_id, {"A": [t3.id, t1.id], "B": [t2.id]})
        board = service.get_board(project_id)
        assert [t.id for t in board["A"]] == [t3.id, t1.id]
        assert [t.id for t in board["B"]] == [t2.id]

    def test_missing_project(self, service: BoardService) -> None:
        with pytest.raises(ProjectNotFound):
            service.reorder_board("nope", {"A": ["t1"]})


# ---------------------------------------------------------------------------
# Concurrent creation
# ---------------------------------------------------------------------------

class _RendezvousStore(FileProjectStore):
    """Holds every snapshot read until a second reader arrives or the wait times out."""

    def __init__(self, path: Path, lock_path: Path) -> None:
        super().__init__(path, lock_path)
        self._barrier = threading.Barrier(2, timeout=0.5)

    def find_tasks_by_project(self, project_id: str) -> list[Task]:
        tasks = super().find_tasks_by_project(project_id)
        try:
            self._barrier.wait()
        except threading.BrokenBarrierError:
            pass
        return tasks


def _create_concurrently(service: BoardService, project_id: str) -> list[Task]:
    results: list[Task] = []
    errors: list[BaseException] = []

    def _worker(n: int) -> None:
        try:
            results.append(service.create_task(project_id, f"Task {n}", "d"))
        except BaseException as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=_worker, args=(n,)) for n in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    assert not errors
    return results


class TestConcurrentCreation:
    def test_naive_creation_can_collide(self, state_root: Path) -> None:
        store = _RendezvousStore(state_root / "projects.yaml", state_root / "projects.lock")
        service = BoardService(store, ServiceConfig(serialize_creation=False))
        pid = service.create_project("u1", "Website", "Relaunch").id

        results = _create_concurrently(service, pid)

        assert [(t.order, t.index) for t in results] == [(0, 1), (0, 1)]
        plain = FileProjectStore(state_root / "projects.yaml", state_root / "projects.lock")
        assert [t.index for t in plain.find_tasks_by_project(pid)] == [1, 1]

    def test_serialized_creation_does_not_collide(self, state_root: Path) -> None:
        store = _RendezvousStore(state_root / "projects.yaml", state_root / "projects.lock")
        service = BoardService(store, ServiceConfig(serialize_creation=True))
        pid = service.create_project("u1", "Website", "Relaunch").id

        results = _create_concurrently(service, pid)

        assert sorted((t.order, t.index) for t in results) == [(0, 1), (1, 2)]
