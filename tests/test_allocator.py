"""Tests for task order/index allocation (core/allocator.py)."""

from __future__ import annotations

from taskboard.core.allocator import next_task_index
from taskboard.domain.models import Task


def _tasks(*indices, stage: str = "Requested") -> list[Task]:
    return [Task(id=f"t{i}", title=f"Task {i}", stage=stage, order=i, index=idx) for i, idx in enumerate(indices)]


class TestNextTaskIndex:
    def test_empty_project(self) -> None:
        assert next_task_index([]) == (0, 1)

    def test_index_is_one_past_max(self) -> None:
        assert next_task_index(_tasks(1, 2, 3)) == (3, 4)

    def test_index_follows_max_not_count(self) -> None:
        # Removed tasks leave holes; indices are never reused.
        order, index = next_task_index(_tasks(2, 7, 5))
        assert order == 3
        assert index == 8

    def test_index_strictly_greater_than_every_existing(self) -> None:
        for indices in [(1,), (4, 1), (10, 3, 10), (0, 0, 0)]:
            tasks = _tasks(*indices)
            _, index = next_task_index(tasks)
            assert all(index > t.index for t in tasks)

    def test_unusable_indices_fall_back_to_count(self) -> None:
        tasks = _tasks(None, None)
        assert next_task_index(tasks) == (2, 2)

    def test_bool_is_not_an_index(self) -> None:
        tasks = _tasks(True, None, None)
        assert next_task_index(tasks) == (3, 3)

    def test_mixed_usable_and_missing_indices(self) -> None:
        tasks = _tasks(None, 4, None)
        assert next_task_index(tasks) == (3, 5)

    def test_order_counts_all_stages_by_default(self) -> None:
        tasks = _tasks(1, 2) + [Task(id="x", title="Done thing", stage="Done", order=0, index=3)]
        order, index = next_task_index(tasks)
        assert order == 3
        assert index == 4

    def test_order_counts_only_target_stage_when_given(self) -> None:
        tasks = _tasks(1, 2) + [Task(id="x", title="Done thing", stage="Done", order=0, index=3)]
        assert next_task_index(tasks, stage="Requested") == (2, 4)
        assert next_task_index(tasks, stage="Done") == (1, 4)
        assert next_task_index(tasks, stage="Review") == (0, 4)

    def test_does_not_mutate_input(self) -> None:
        tasks = _tasks(1, 2)
        before = [t.to_dict() for t in tasks]
        next_task_index(tasks)
        assert [t.to_dict() for t in tasks] == before
