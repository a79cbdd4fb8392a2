"""Shared pytest fixtures for history-py tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import git
import pytest

from history_py.core.commits import CommitRecord
from history_py.core.releases import LogEntry, PathFilter

COMPONENT_ID = "Acme.Widgets"
COMPONENT_PREFIX = f"apis/{COMPONENT_ID}/{COMPONENT_ID}/"
PROJECT_FILE = f"{COMPONENT_PREFIX}{COMPONENT_ID}.csproj"

BASE_DATE = datetime(2020, 1, 1, 12, 0, tzinfo=timezone.utc)
ACTOR = git.Actor("Test", "test@test.com")


def make_commit(sha: str, message: str | None = None, day: int = 0) -> CommitRecord:
    return CommitRecord(
        sha=sha,
        message=message or f"Change {sha}",
        author_name="Test",
        author_email="test@test.com",
        date=BASE_DATE + timedelta(days=day),
    )


def make_entry(
    sha: str,
    *paths: str,
    parent_count: int = 1,
    message: str | None = None,
    day: int = 0,
) -> LogEntry:
    return LogEntry(make_commit(sha, message, day), parent_count, tuple(paths))


@pytest.fixture
def path_filter() -> PathFilter:
    """Path filter for the test component."""
    return PathFilter(prefix=COMPONENT_PREFIX, excluded_file=PROJECT_FILE)


class RepoBuilder:
    """Builds a real git repository commit by commit."""

    def __init__(self, repo: git.Repo):
        self.repo = repo
        self.root = Path(repo.working_tree_dir)
        self._day = 0

    def commit(
        self,
        message: str,
        files: dict[str, str] | None = None,
        parents: list[git.Commit] | None = None,
    ) -> git.Commit:
        for relative_path, content in (files or {}).items():
            path = self.root / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            self.repo.index.add([relative_path])

        # Strictly increasing dates keep the log order deterministic
        timestamp = int((BASE_DATE + timedelta(days=self._day)).timestamp())
        self._day += 1
        date = f"{timestamp} +0000"
        return self.repo.index.commit(
            message,
            parent_commits=parents,
            author=ACTOR,
            committer=ACTOR,
            author_date=date,
            commit_date=date,
        )

    def tag(self, name: str, commit: git.Commit, annotated: bool = False) -> None:
        if annotated:
            self.repo.create_tag(name, ref=commit, message=f"Release {name}")
        else:
            self.repo.create_tag(name, ref=commit)

    def write_catalog(self, versions: dict[str, str], path: str = "apis/apis.json") -> None:
        catalog = {"apis": [{"id": id_, "version": v} for id_, v in versions.items()]}
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(catalog, indent=2))


@pytest.fixture
def repo_builder(tmp_path: Path) -> Iterator[RepoBuilder]:
    """An empty git repository with an identity configured."""
    repo = git.Repo.init(tmp_path / "repo")
    with repo.config_writer() as writer:
        writer.set_value("user", "name", ACTOR.name)
        writer.set_value("user", "email", ACTOR.email)
    builder = RepoBuilder(repo)
    yield builder
    repo.close()


@pytest.fixture
def widget_repo(repo_builder: RepoBuilder) -> RepoBuilder:
    """Repository with two releases of the test component.

    History, oldest first::

        initial     catalog, project file          (root commit)
        add list    component source
        docs        unrelated path
        bump 1.0.0  project file only              tagged Acme.Widgets-1.0.0
        add get     component source
        bump 1.1.0  project file only              tagged Acme.Widgets-1.1.0
        add delete  component source               (unreleased)
    """
    b = repo_builder
    src = f"{COMPONENT_PREFIX}WidgetsClient.cs"

    b.write_catalog({COMPONENT_ID: "1.2.0"})
    b.repo.index.add(["apis/apis.json"])
    b.commit("Initial commit", {PROJECT_FILE: "<Version>0.1.0</Version>"})
    b.commit("Add ListWidgets", {src: "list"})
    b.commit("Update docs", {"docs/index.md": "docs"})
    v1 = b.commit("Release Acme.Widgets version 1.0.0", {PROJECT_FILE: "<Version>1.0.0</Version>"})
    b.tag(f"{COMPONENT_ID}-1.0.0", v1)
    b.commit("Add GetWidget", {src: "list get"})
    v11 = b.commit("Release Acme.Widgets version 1.1.0", {PROJECT_FILE: "<Version>1.1.0</Version>"})
    b.tag(f"{COMPONENT_ID}-1.1.0", v11, annotated=True)
    b.commit("Add DeleteWidget", {src: "list get delete"})
    return b


@pytest.fixture
def entry_factory() -> Callable[..., LogEntry]:
    return make_entry


@pytest.fixture
def commit_factory() -> Callable[..., CommitRecord]:
    return make_commit
