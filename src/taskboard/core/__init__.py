from .allocator import next_task_index
from .locks import ProjectLockRegistry
from .reorder import apply_reorder, flatten_board_payload, plan_reorder, task_ref_id
from .service import BoardService

__all__ = [
    "BoardService",
    "ProjectLockRegistry",
    "apply_reorder",
    "flatten_board_payload",
    "next_task_index",
    "plan_reorder",
    "task_ref_id",
]
