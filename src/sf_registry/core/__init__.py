"""Core layer — dependency analysis and deploy orchestration.

Rules
-----
* No ``print()`` calls and no Rich rendering.
* Filesystem access is read-only (scanning, extraction, validation).
* No imports from ``cli`` or ``infra``; archive writing and HTTP are
  injected through :mod:`sf_registry.core.protocols`.
"""

from sf_registry.core.deploy_service import DeployService
from sf_registry.core.inventory import ArtifactInventory, ProjectLayout
from sf_registry.core.models import (
    Artifact,
    ArtifactKind,
    DependencyEdge,
    ManifestEntry,
    PackageMetadata,
    StaticResource,
)
from sf_registry.core.resolver import DependencyResolver, TraversalState

__all__: list[str] = [
    "Artifact",
    "ArtifactInventory",
    "ArtifactKind",
    "DependencyEdge",
    "DependencyResolver",
    "DeployService",
    "ManifestEntry",
    "PackageMetadata",
    "ProjectLayout",
    "StaticResource",
    "TraversalState",
]
