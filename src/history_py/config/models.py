"""Configuration models for history-py.

The defaults describe a monorepo laid out as::

    apis/apis.json                      component catalog
    apis/{id}/{id}/                     component sources
    apis/{id}/{id}/{id}.csproj          project descriptor
    apis/{id}/docs/history.md           version history

with release tags named ``{id}-{version}``. Every path is a template
in which ``{id}`` is replaced by the component id. ``project_file`` is
relative to the component directory and may be a fixed name such as
``pyproject.toml``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from history_py.core.history import DEFAULT_TITLE, EMPTY_RELEASE_NOTE
from history_py.core.releases import PathFilter


class ChangelogConfig(BaseModel):
    """How synthesized history sections are written."""

    model_config = ConfigDict(extra="forbid")

    include_hashes: bool = Field(default=True, description="Show short commit hashes")
    commit_url_template: str | None = Field(
        default=None,
        description="Commit link with a {sha} placeholder",
    )
    empty_release_note: str = Field(
        default=EMPTY_RELEASE_NOTE,
        description="Line written for a tagged release without relevant commits",
    )

    @field_validator("commit_url_template")
    @classmethod
    def _check_placeholder(cls, value: str | None) -> str | None:
        if value is not None and "{sha}" not in value:
            raise ValueError("commit_url_template must contain a {sha} placeholder")
        return value


class HistoryPyConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    catalog_path: str = "apis/apis.json"
    component_dir: str = "apis/{id}/{id}"
    project_file: str = "{id}.csproj"
    history_file: str = "apis/{id}/docs/history.md"
    tag_prefix: str = "{id}-"
    history_title: str = DEFAULT_TITLE
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)

    @field_validator("component_dir", "history_file", "tag_prefix")
    @classmethod
    def _check_id_placeholder(cls, value: str) -> str:
        if "{id}" not in value:
            raise ValueError("template must contain an {id} placeholder")
        return value

    def component_prefix_for(self, component_id: str) -> str:
        """Directory prefix of a component, always with a trailing slash."""
        prefix = self.component_dir.format(id=component_id).replace("\\", "/")
        return prefix.rstrip("/") + "/"

    def path_filter_for(self, component_id: str) -> PathFilter:
        prefix = self.component_prefix_for(component_id)
        return PathFilter(
            prefix=prefix,
            excluded_file=prefix + self.project_file.format(id=component_id),
        )

    def tag_prefix_for(self, component_id: str) -> str:
        return self.tag_prefix.format(id=component_id)

    def history_path_for(self, component_id: str) -> Path:
        """History file path, relative to the repository root."""
        return Path(self.history_file.format(id=component_id))
