from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

from ..config import ServiceConfig, load_service_config
from ..constants import PROJECTS_FILE, PROJECTS_LOCK_FILE
from ..core.locks import ProjectLockRegistry
from ..core.service import BoardService
from .bootstrap import ensure_state_root
from .file_repos import FileProjectStore


class Container:
    def __init__(
        self,
        project_dir: Path,
        config: Optional[ServiceConfig] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.project_dir = project_dir.resolve()
        self.state_root = ensure_state_root(self.project_dir)
        if config is None:
            config, _ = load_service_config(self.state_root, environ)
        self.config = config

        self.store = FileProjectStore(self.state_root / PROJECTS_FILE, self.state_root / PROJECTS_LOCK_FILE)
        self.locks = ProjectLockRegistry()
        self.service = BoardService(self.store, self.config, self.locks)
