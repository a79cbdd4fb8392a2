"""Regeneration of a component's version history file."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from history_py.core.history import HistoryFile
from history_py.core.releases import build_tag_map, group_releases
from history_py.core.version import StructuredVersion
from history_py.vcs.git import GitRepository

if TYPE_CHECKING:
    from datetime import date
    from pathlib import Path

    from history_py.config.models import HistoryPyConfig
    from history_py.core.releases import Release
    from history_py.project.catalog import ComponentMetadata

logger = logging.getLogger(__name__)


def load_releases(
    repository: GitRepository,
    config: HistoryPyConfig,
    component: ComponentMetadata,
) -> list[Release]:
    """Compute the releases of a component from the repository history.

    Args:
        repository: Open repository
        config: Layout configuration
        component: Catalog entry of the component

    Returns:
        Releases, newest first

    Raises:
        InvalidVersionError: If the declared version or a release tag is malformed
        GitError: If the history cannot be read
    """
    current_version = StructuredVersion.parse(component.version)
    tag_map = build_tag_map(repository.list_tags(), config.tag_prefix_for(component.id))
    logger.debug("Found %d tag(s) for %s", len(tag_map), component.id)

    return group_releases(
        repository.iter_log(),
        tag_map,
        current_version,
        config.path_filter_for(component.id),
    )


def update_history_file(
    root: Path,
    config: HistoryPyConfig,
    component: ComponentMetadata,
    *,
    today: date | None = None,
) -> Path:
    """Merge a component's computed releases into its history file.

    The repository is only open while the releases are computed. A
    missing history file is created with just a title first.

    Args:
        root: Repository root
        config: Layout configuration
        component: Catalog entry of the component
        today: Date for unreleased changes (default: today)

    Returns:
        Path of the history file
    """
    with GitRepository.open(root) as repository:
        releases = load_releases(repository, config, component)

    history_path = root / config.history_path_for(component.id)
    HistoryFile.create_stub(history_path, config.history_title)

    history = HistoryFile.load(history_path)
    inserted = history.merge_releases(
        releases,
        today=today,
        include_hashes=config.changelog.include_hashes,
        commit_url_template=config.changelog.commit_url_template,
        empty_release_note=config.changelog.empty_release_note,
    )
    history.save(history_path)

    logger.info(
        "Added %d section(s) to %s: %s",
        len(inserted),
        history_path,
        ", ".join(str(v) for v in inserted) or "none",
    )
    return history_path
