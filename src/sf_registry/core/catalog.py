"""Pydantic schema of the registry catalog.

``GET /catalog`` returns two collections, ``component`` and ``class``,
each an array of entries with their published versions.  The transport
validates the raw JSON against :class:`Catalog` so that the rest of the
code only ever sees typed data.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from sf_registry.core.models import ArtifactKind


class CatalogDependency(BaseModel):
    """A dependency recorded for a published version."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    version: str


class CatalogVersion(BaseModel):
    """One published version of a registry entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str
    description: str
    hash: str
    staticresources: list[str]
    registry_dependencies: list[CatalogDependency] = Field(alias="registryDependencies")


class CatalogEntry(BaseModel):
    """A component or class with all its versions."""

    model_config = ConfigDict(frozen=True)

    name: str
    versions: list[CatalogVersion]

    def version_labels(self) -> list[str]:
        """Versions newest first, the order they are offered to the operator."""
        return [v.version for v in reversed(self.versions)]


class Catalog(BaseModel):
    """The complete registry catalog."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    component: list[CatalogEntry]
    class_: list[CatalogEntry] = Field(alias="class")

    def entries(self, kind: ArtifactKind) -> list[CatalogEntry]:
        return self.component if kind is ArtifactKind.COMPONENT else self.class_

    def find(self, kind: ArtifactKind, name: str) -> CatalogEntry | None:
        return next((e for e in self.entries(kind) if e.name == name), None)
