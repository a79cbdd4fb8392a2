"""Component catalog.

The catalog is a JSON file listing every component of the repository
with its current version::

    {
      "apis": [
        {"id": "Acme.Widgets.V1", "version": "1.3.0", ...},
        ...
      ]
    }

Only ``id`` and ``version`` are used; other properties are ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from history_py.exceptions import CatalogError, ComponentNotFoundError

if TYPE_CHECKING:
    from pathlib import Path


class ComponentMetadata(BaseModel):
    """Catalog entry for a single component."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(min_length=1)
    version: str = Field(min_length=1)


class Catalog(BaseModel):
    """All components of a repository, in catalog order."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    components: list[ComponentMetadata] = Field(default_factory=list, alias="apis")

    @classmethod
    def parse(cls, text: str, source: str = "<catalog>") -> Catalog:
        """Parse catalog JSON.

        Raises:
            CatalogError: If the text is not a valid catalog
        """
        try:
            catalog = cls.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as e:
            raise CatalogError(f"Invalid catalog {source}: {e}") from e

        ids = [c.id for c in catalog.components]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise CatalogError(f"Duplicate ids in catalog {source}: {', '.join(duplicates)}")
        return catalog

    @classmethod
    def load(cls, path: Path) -> Catalog:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CatalogError(f"Could not read catalog {path}: {e}") from e
        return cls.parse(text, source=str(path))

    @property
    def ids(self) -> list[str]:
        return [c.id for c in self.components]

    def get(self, component_id: str) -> ComponentMetadata | None:
        return next((c for c in self.components if c.id == component_id), None)

    def __getitem__(self, component_id: str) -> ComponentMetadata:
        component = self.get(component_id)
        if component is None:
            raise ComponentNotFoundError(component_id)
        return component

    def __contains__(self, component_id: object) -> bool:
        return any(c.id == component_id for c in self.components)


@dataclass(frozen=True)
class VersionChange:
    """A component whose version differs between two catalogs.

    ``old_version`` is None for new components, ``new_version`` is None
    for deleted ones.
    """

    id: str
    old_version: str | None
    new_version: str | None


def find_changed_versions(current: Catalog, previous: Catalog) -> list[VersionChange]:
    """Compare two catalogs.

    Args:
        current: Catalog as it is now (typically the working tree)
        previous: Catalog to compare against (typically HEAD)

    Returns:
        Changes in current catalog order, followed by deleted components
    """
    changes = []
    for component in current.components:
        before = previous.get(component.id)
        old_version = before.version if before else None
        if old_version != component.version:
            changes.append(VersionChange(component.id, old_version, component.version))

    for component in previous.components:
        if component.id not in current:
            changes.append(VersionChange(component.id, component.version, None))

    return changes
