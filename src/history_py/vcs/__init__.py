"""Version control access."""

from __future__ import annotations

from history_py.vcs.git import GitRepository, find_repository_root

__all__ = ["GitRepository", "find_repository_root"]
