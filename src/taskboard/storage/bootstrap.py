from __future__ import annotations

from pathlib import Path

from ..constants import PROJECTS_FILE, SCHEMA_VERSION, STATE_DIR_NAME


def ensure_state_root(project_dir: Path) -> Path:
    state_root = project_dir / STATE_DIR_NAME
    state_root.mkdir(parents=True, exist_ok=True)

    projects = state_root / PROJECTS_FILE
    if not projects.exists():
        projects.write_text(f"version: {SCHEMA_VERSION}\nprojects: []\n", encoding="utf-8")

    return state_root
