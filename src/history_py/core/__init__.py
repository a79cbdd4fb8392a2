"""Core business logic for history-py.

This module contains the fundamental building blocks:
- Version parsing and ordering
- Commit records
- Grouping of commits into releases
- History file parsing and merging
"""

from __future__ import annotations

from history_py.core.commits import CommitRecord, format_commit_line
from history_py.core.history import HistoryFile, HistorySection
from history_py.core.releases import (
    LogEntry,
    PathFilter,
    Release,
    build_tag_map,
    group_releases,
    is_relevant,
)
from history_py.core.version import StructuredVersion, is_prerelease_text

__all__ = [
    # Commits
    "CommitRecord",
    # History
    "HistoryFile",
    "HistorySection",
    # Releases
    "LogEntry",
    "PathFilter",
    "Release",
    # Version
    "StructuredVersion",
    "build_tag_map",
    "format_commit_line",
    "group_releases",
    "is_prerelease_text",
    "is_relevant",
]
