from .file_repos import FileProjectStore
from .interfaces import ProjectStore

__all__ = ["FileProjectStore", "ProjectStore"]
