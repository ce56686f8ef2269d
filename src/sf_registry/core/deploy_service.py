"""Core deploy service — orchestrates the deploy pipeline.

Phases run strictly in order, each one gating the next:

1. **Resolve** the root artifact's transitive dependency set.
2. **Validate** every referenced static resource.
3. **Build** the archive in a private temporary directory.
4. **Upload** it through the injected
   :class:`~sf_registry.core.protocols.RegistryTransport`.

A failure in any phase aborts the deploy; nothing is uploaded and the
temporary directory is always removed.
"""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import structlog

from sf_registry.config import RegistrySettings
from sf_registry.core.inventory import ArtifactInventory
from sf_registry.core.models import (
    Artifact,
    DeployPlan,
    DeployResult,
    PackageMetadata,
)
from sf_registry.core.protocols import PackageBuilder, RegistryTransport
from sf_registry.core.resolver import DependencyResolver, collect_static_resources
from sf_registry.core.static_resources import validate_static_resources

logger = structlog.get_logger(__name__)


class DeployService:
    """Drives resolve → validate → build → upload for one artifact.

    Parameters
    ----------
    inventory:
        Snapshot of the local project.
    settings:
        Layout and policy settings.
    transport:
        Any object satisfying :class:`RegistryTransport`.
    builder:
        Archive writer satisfying :class:`PackageBuilder`.
    resolver:
        Optional resolver override; defaults to the pattern-based one.
    """

    def __init__(
        self,
        inventory: ArtifactInventory,
        settings: RegistrySettings,
        transport: RegistryTransport,
        builder: PackageBuilder,
        resolver: DependencyResolver | None = None,
    ) -> None:
        self._inventory = inventory
        self._settings = settings
        self._transport = transport
        self._builder = builder
        self._resolver = resolver or DependencyResolver(inventory, settings)

    async def prepare(self, metadata: PackageMetadata, workdir: Path) -> DeployPlan:
        """Resolve, validate and build the archive inside *workdir*."""
        root = Artifact(metadata.name, metadata.kind)
        manifest = await self._resolver.resolve(root, version=metadata.version)

        resources = await validate_static_resources(
            collect_static_resources(manifest),
            self._inventory.layout.static_resources_dir,
            self._settings.descriptor_suffix,
        )

        archive = await asyncio.to_thread(
            self._builder,
            workdir / f"{metadata.name}.zip",
            manifest,
            resources,
            metadata,
            self._inventory,
        )
        return DeployPlan(
            manifest=tuple(manifest),
            static_resources=tuple(resources),
            archive=archive,
        )

    def deploy(self, metadata: PackageMetadata) -> DeployResult:
        """Run the full pipeline and return the server's response."""
        with tempfile.TemporaryDirectory(prefix="sf-registry-") as tmp:
            plan = asyncio.run(self.prepare(metadata, Path(tmp)))
            message = self._transport.deploy(plan.archive, metadata)

        logger.info(
            "deploy_completed",
            artifact=metadata.name,
            version=metadata.version,
            entries=len(plan.manifest),
        )
        return DeployResult(
            manifest=plan.manifest,
            server_message=message,
            static_resources=tuple(r.name for r in plan.static_resources),
        )
