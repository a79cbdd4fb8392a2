"""Grouping of a component's commits into releases.

The commit log of the current branch is walked once, newest first.
Commits that touched the component are collected until a commit carrying
one of the component's release tags is reached; that tag commit closes
the collected bucket and becomes the anchor of the next, older release.

Example, for a component currently at 1.3.0::

    C5  version bump only            -> ignored (project file only)
    C4  tagged pkg-1.2.0             -> closes 1.3.0 (empty), anchors 1.2.0
    C3  touched the component        -> 1.2.0
    C2  touched something else       -> ignored
    C1  touched the component        -> 1.2.0

Tags for 0.x versions never close a release, so the churn before the
first stable version ends up in a single entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from history_py.core.version import StructuredVersion, is_prerelease_text

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

    from history_py.core.commits import CommitRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathFilter:
    """Decides whether a changed path belongs to a component.

    Attributes:
        prefix: Directory prefix of the component, with a trailing slash
        excluded_file: Project descriptor path, rewritten on every version
            bump, which on its own does not make a commit relevant
    """

    prefix: str
    excluded_file: str

    def matches(self, path: str) -> bool:
        # Diff paths may use either separator depending on platform
        normalized = path.replace("\\", "/")
        return normalized.startswith(self.prefix) and normalized != self.excluded_file


@dataclass(frozen=True)
class LogEntry:
    """One commit of the branch log, with what the grouping needs to know."""

    commit: CommitRecord
    parent_count: int
    changed_paths: tuple[str, ...] = ()

    @property
    def sha(self) -> str:
        return self.commit.sha


@dataclass(frozen=True)
class Release:
    """A group of commits released together.

    Attributes:
        version: Version of the release
        anchor_commit: Tag commit that closed the release, or None for
            changes made since the most recent tag
        commits: Relevant commits, newest first
    """

    version: StructuredVersion
    anchor_commit: CommitRecord | None
    commits: tuple[CommitRecord, ...] = ()

    @property
    def is_released(self) -> bool:
        return self.anchor_commit is not None

    @property
    def release_date(self) -> datetime | None:
        return self.anchor_commit.date if self.anchor_commit else None


def is_relevant(entry: LogEntry, path_filter: PathFilter) -> bool:
    """Check whether a commit changed the component.

    Merge and root commits are never relevant: without exactly one
    parent there is no single diff to attribute.
    """
    if entry.parent_count != 1:
        return False
    return any(path_filter.matches(path) for path in entry.changed_paths)


def build_tag_map(tags: Iterable[tuple[str, str]], tag_prefix: str) -> dict[str, str]:
    """Map tagged commit shas to the version named by the tag.

    Args:
        tags: ``(tag name, target commit sha)`` pairs
        tag_prefix: Component tag prefix, e.g. ``"Acme.Widgets-"``

    Returns:
        Mapping of commit sha to version text (the tag name minus the prefix)
    """
    return {
        sha: name[len(tag_prefix) :]
        for name, sha in tags
        if name.startswith(tag_prefix)
    }


def group_releases(
    entries: Iterable[LogEntry],
    tag_map: Mapping[str, str],
    current_version: StructuredVersion,
    path_filter: PathFilter,
) -> list[Release]:
    """Partition a newest-first commit log into releases.

    Args:
        entries: Commit log of the branch, newest first
        tag_map: Commit sha to version text, see build_tag_map
        current_version: Version the component currently declares; used for
            the commits made after the most recent release tag
        path_filter: Filter selecting the component's files

    Returns:
        Releases, newest first. The first one has no anchor commit.

    Raises:
        InvalidVersionError: If a release tag names a malformed version
    """
    releases: list[Release] = []
    version = current_version
    anchor: CommitRecord | None = None
    pending: list[CommitRecord] = []

    for entry in entries:
        tagged_version = tag_map.get(entry.sha)
        if tagged_version is not None and not is_prerelease_text(tagged_version):
            releases.append(Release(version, anchor, tuple(pending)))
            logger.debug(
                "Release boundary at %s: %s closed with %d commit(s)",
                entry.commit.short_sha,
                version,
                len(pending),
            )
            pending.clear()
            anchor = entry.commit
            version = StructuredVersion.parse(tagged_version)
            continue

        if is_relevant(entry, path_filter):
            pending.append(entry.commit)

    if pending:
        releases.append(Release(version, anchor, tuple(pending)))

    return releases
