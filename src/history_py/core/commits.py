"""Commit records used as history entries.

A CommitRecord is a plain snapshot of one git commit. It has no graph
behavior; walking the graph is the job of the vcs layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

SHORT_SHA_LENGTH = 7


@dataclass(frozen=True)
class CommitRecord:
    """Immutable snapshot of a single commit."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        lines = self.message.strip().splitlines()
        return lines[0].strip() if lines else ""


def format_commit_line(
    commit: CommitRecord,
    *,
    include_hash: bool = True,
    commit_url_template: str | None = None,
) -> str:
    """Format a commit as a single Markdown bullet.

    Args:
        commit: Commit to format
        include_hash: Prefix the summary with the short hash
        commit_url_template: Optional URL with a ``{sha}`` placeholder;
            when set, the short hash links to the commit

    Returns:
        Bullet line without a trailing newline
    """
    if not include_hash:
        return f"- {commit.summary}"

    if commit_url_template:
        url = commit_url_template.format(sha=commit.sha)
        return f"- [Commit {commit.short_sha}]({url}): {commit.summary}"

    return f"- Commit {commit.short_sha}: {commit.summary}"
