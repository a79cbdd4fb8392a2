"""Read-only access to a git repository via GitPython.

The repository handle is a scoped resource: open it with
``GitRepository.open()`` and consume everything derived from it
before the block ends.
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import git

from history_py.core.commits import CommitRecord
from history_py.core.releases import LogEntry
from history_py.exceptions import GitError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


def find_repository_root(start: Path | None = None) -> Path:
    """Find the root of the git repository containing ``start``.

    Args:
        start: Directory to search from (default: current directory)

    Returns:
        Directory that contains ``.git``

    Raises:
        GitError: If no enclosing repository exists
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if (directory / ".git").exists():
            return directory
    raise GitError(f"No git repository found at or above {current}")


def commit_record(commit: git.Commit) -> CommitRecord:
    message = commit.message
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    return CommitRecord(
        sha=commit.hexsha,
        message=message,
        author_name=commit.author.name or "",
        author_email=commit.author.email or "",
        date=commit.committed_datetime,
    )


class GitRepository:
    """Thin read-only wrapper around ``git.Repo``."""

    def __init__(self, path: Path | str):
        try:
            self.repo = git.Repo(path)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise GitError(f"Not a git repository: {path}") from e

        if self.repo.working_tree_dir is None:
            raise GitError(f"Bare repositories are not supported: {path}")
        self.path = Path(self.repo.working_tree_dir)

    @classmethod
    @contextlib.contextmanager
    def open(cls, path: Path | str) -> Iterator[GitRepository]:
        """Open a repository for the duration of a ``with`` block."""
        repository = cls(path)
        logger.debug("Opened repository %s", repository.path)
        try:
            yield repository
        finally:
            repository.close()
            logger.debug("Closed repository %s", repository.path)

    def close(self) -> None:
        self.repo.close()

    def iter_log(self) -> Iterator[LogEntry]:
        """Walk the commits reachable from HEAD, newest first.

        Changed paths are only computed for commits with exactly one
        parent; root and merge commits carry none.

        Raises:
            GitError: If HEAD cannot be resolved
        """
        try:
            commits = self.repo.iter_commits("HEAD")
            for commit in commits:
                parents = commit.parents
                changed: tuple[str, ...] = ()
                if len(parents) == 1:
                    changed = self._changed_paths(parents[0], commit)
                yield LogEntry(commit_record(commit), len(parents), changed)
        except (git.GitCommandError, ValueError) as e:
            raise GitError(f"Could not read history of {self.path}: {e}") from e

    @staticmethod
    def _changed_paths(parent: git.Commit, commit: git.Commit) -> tuple[str, ...]:
        paths: list[str] = []
        for diff in parent.diff(commit):
            # Renames touch both the old and the new location
            for path in (diff.a_path, diff.b_path):
                if path and path not in paths:
                    paths.append(path)
        return tuple(paths)

    def list_tags(self) -> list[tuple[str, str]]:
        """Return ``(name, target commit sha)`` for every tag.

        Annotated tags are resolved to the commit they point at.
        """
        tags = []
        for tag in self.repo.tags:
            try:
                sha = tag.commit.hexsha
            except ValueError:
                logger.warning("Ignoring tag %s: it does not point at a commit", tag.name)
                continue
            tags.append((tag.name, sha))
        return tags

    def read_file_at_head(self, relative_path: str) -> str | None:
        """Return a file's content as committed at HEAD, or None if absent."""
        try:
            blob = self.repo.head.commit.tree / relative_path
        except KeyError:
            return None
        except ValueError as e:
            raise GitError(f"Repository {self.path} has no HEAD commit") from e
        return blob.data_stream.read().decode("utf-8")
