from __future__ import annotations

from pathlib import Path

import pytest

from taskboard.config import ServiceConfig
from taskboard.core.service import BoardService
from taskboard.storage.bootstrap import ensure_state_root
from taskboard.storage.file_repos import FileProjectStore


@pytest.fixture
def state_root(tmp_path: Path) -> Path:
    return ensure_state_root(tmp_path)


@pytest.fixture
def store(state_root: Path) -> FileProjectStore:
    return FileProjectStore(state_root / "projects.yaml", state_root / "projects.lock")


@pytest.fixture
def service(store: FileProjectStore) -> BoardService:
    return BoardService(store, ServiceConfig())
