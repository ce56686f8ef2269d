"""Protocols (interfaces) consumed by the core layer.

Core code depends on these contracts rather than on concrete
implementations, so that extraction strategies and the HTTP transport
can be swapped (or faked in tests) without touching the resolver or the
deploy service.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from sf_registry.core.models import (
    Artifact,
    Extraction,
    ManifestEntry,
    PackageMetadata,
    StaticResource,
)

if TYPE_CHECKING:
    from sf_registry.core.inventory import ArtifactInventory


class ExtractionStrategy(Protocol):
    """Finds the direct references of one kind of artifact.

    Implementations are read-only: they inspect the artifact's source
    files and never modify the project tree.
    """

    async def extract(
        self,
        artifact: Artifact,
        inventory: ArtifactInventory,
    ) -> Extraction:
        """Return the artifact's known dependencies and static resources.

        Names not present in *inventory* are dropped silently.  A missing
        source file contributes nothing.
        """
        ...  # pragma: no cover


class RegistryTransport(Protocol):
    """Contract for the upload side of the registry server."""

    def deploy(self, archive: Path, metadata: PackageMetadata) -> str:
        """Upload *archive* described by *metadata*; return the server message.

        Raises
        ------
        TransportError
            When the server is unreachable or rejects the upload.
        """
        ...  # pragma: no cover


class PackageBuilder(Protocol):
    """Contract for the archive writer used by the deploy service."""

    def __call__(
        self,
        destination: Path,
        manifest: Sequence[ManifestEntry],
        resources: Sequence[StaticResource],
        metadata: PackageMetadata,
        inventory: ArtifactInventory,
    ) -> Path:
        """Write the archive to *destination* and return its path.

        Raises
        ------
        PackageBuildError
            When any entry cannot be added.
        """
        ...  # pragma: no cover
