"""Domain models for sf-registry.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and JSON shaping.  The JSON produced by
:meth:`ManifestEntry.to_dict` is the ``registry-deps.json`` wire format
consumed by the registry server.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class ArtifactKind(str, Enum):
    """Kind of artifact managed by the registry."""

    COMPONENT = "component"
    CLASS = "class"

    @property
    def label(self) -> str:
        """Human-readable singular label."""
        return "LWC component" if self is ArtifactKind.COMPONENT else "Apex class"


# ---------------------------------------------------------------------------
# Artifacts and edges
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Artifact:
    """A Component or Class identified by ``(name, kind)``."""

    name: str
    kind: ArtifactKind

    @property
    def key(self) -> str:
        """Seen-set key, ``"kind:name"``."""
        return f"{self.kind.value}:{self.name}"

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "type": self.kind.value}


@dataclass(frozen=True, slots=True)
class DependencyEdge:
    """Directed reference from one artifact to another."""

    source: Artifact
    target: Artifact


@dataclass(frozen=True, slots=True)
class Extraction:
    """Direct references found in one artifact's sources.

    Both tuples are de-duplicated and keep first-discovery order.
    """

    dependencies: tuple[Artifact, ...] = ()
    static_resources: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """Per-artifact record of the resolved dependency set.

    Only the root entry of a manifest carries :attr:`version`.
    """

    artifact: Artifact
    dependencies: tuple[Artifact, ...] = ()
    static_resources: tuple[str, ...] = ()
    version: str | None = None

    @property
    def name(self) -> str:
        return self.artifact.name

    @property
    def kind(self) -> ArtifactKind:
        return self.artifact.kind

    @property
    def edges(self) -> tuple[DependencyEdge, ...]:
        return tuple(DependencyEdge(self.artifact, dep) for dep in self.dependencies)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "type": self.kind.value,
            "dependencies": [edge.target.to_dict() for edge in self.edges],
            "staticresources": list(self.static_resources),
        }
        if self.version is not None:
            payload["version"] = self.version
        return payload


@dataclass(frozen=True, slots=True)
class PackageMetadata:
    """Operator-supplied description of the artifact being deployed."""

    name: str
    kind: ArtifactKind
    version: str
    description: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "type": self.kind.value,
            "version": self.version,
        }


# ---------------------------------------------------------------------------
# Static resources
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class StaticResource:
    """A validated static resource: payload file plus metadata descriptor."""

    name: str
    payload: Path
    descriptor: Path


# ---------------------------------------------------------------------------
# Deploy outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DeployPlan:
    """Everything produced before upload: manifest, resources and archive."""

    manifest: tuple[ManifestEntry, ...]
    static_resources: tuple[StaticResource, ...]
    archive: Path


@dataclass(frozen=True, slots=True)
class DeployResult:
    """Outcome of a completed deploy."""

    manifest: tuple[ManifestEntry, ...]
    server_message: str
    static_resources: tuple[str, ...] = field(default=())
