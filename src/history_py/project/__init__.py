"""Repository project metadata."""

from __future__ import annotations

from history_py.project.catalog import (
    Catalog,
    ComponentMetadata,
    VersionChange,
    find_changed_versions,
)

__all__ = [
    "Catalog",
    "ComponentMetadata",
    "VersionChange",
    "find_changed_versions",
]
