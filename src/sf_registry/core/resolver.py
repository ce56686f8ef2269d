"""Dependency Graph Resolver.

Computes the transitive closure of an artifact's references and returns
it as an ordered manifest: the root first, then a pre-order walk of its
dependencies.

Traversal rules
---------------
* Every ``kind:name`` is expanded at most once.  :class:`TraversalState`
  owns the seen set and is threaded through each recursive call.
* Cycles are truncated, not rejected: when A and B reference each other
  both entries are emitted, each listing the other, and neither is
  expanded twice.
* Sibling dependencies are resolved concurrently on the event loop.
  ``claim`` checks and marks without yielding, so two branches can never
  both expand the same node.
* Any error (forbidden file, unreadable directory) aborts the whole
  resolution; a partial manifest is never returned.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping

import structlog

from sf_registry.config import RegistrySettings
from sf_registry.core.extractors import default_strategies
from sf_registry.core.inventory import ArtifactInventory
from sf_registry.core.models import Artifact, ArtifactKind, ManifestEntry
from sf_registry.core.protocols import ExtractionStrategy
from sf_registry.core.scanner import check_forbidden
from sf_registry.exceptions import ProjectReadError

logger = structlog.get_logger(__name__)


class TraversalState:
    """Visited-node guard for one resolution."""

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def claim(self, artifact: Artifact) -> bool:
        """Mark *artifact* as visited; ``False`` if it already was."""
        if artifact.key in self._seen:
            return False
        self._seen.add(artifact.key)
        return True

    def __contains__(self, artifact: object) -> bool:
        return isinstance(artifact, Artifact) and artifact.key in self._seen

    def __len__(self) -> int:
        return len(self._seen)


class DependencyResolver:
    """Resolve an artifact and its transitive dependencies.

    Parameters
    ----------
    inventory:
        Snapshot of the project's components and classes.
    settings:
        Provides the forbidden-extension blacklist.
    strategies:
        Extraction strategy per artifact kind.  Defaults to the
        pattern-based scans from :mod:`sf_registry.core.extractors`.
    """

    def __init__(
        self,
        inventory: ArtifactInventory,
        settings: RegistrySettings,
        strategies: Mapping[ArtifactKind, ExtractionStrategy] | None = None,
    ) -> None:
        self._inventory = inventory
        self._forbidden = settings.forbidden_extensions
        self._strategies: Mapping[ArtifactKind, ExtractionStrategy] = (
            strategies if strategies is not None else default_strategies()
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(self, root: Artifact, *, version: str | None = None) -> list[ManifestEntry]:
        """Return the manifest for *root*, root entry first.

        Raises
        ------
        ArtifactNotFoundError
            If *root* is not in the inventory.
        ForbiddenFileError
            If any resolved artifact directory holds a blacklisted file.
        ProjectReadError
            If an artifact directory or class source cannot be read.
        """
        self._inventory.directory(root)
        try:
            manifest = await self._visit(root, TraversalState(), version=version, is_root=True)
        except OSError as exc:
            raise ProjectReadError(
                f"Could not read the project while resolving {root.name}: {exc}",
            ) from exc
        logger.info(
            "dependency_resolved",
            root=root.key,
            entries=len(manifest),
            artifacts=[entry.artifact.key for entry in manifest],
        )
        return manifest

    # ------------------------------------------------------------------
    # Recursive descent
    # ------------------------------------------------------------------

    async def _visit(
        self,
        artifact: Artifact,
        state: TraversalState,
        *,
        version: str | None = None,
        is_root: bool = False,
    ) -> list[ManifestEntry]:
        if not state.claim(artifact):
            return []

        directory = self._inventory.directory(artifact)
        await asyncio.to_thread(check_forbidden, directory, self._forbidden)

        extraction = await self._strategies[artifact.kind].extract(artifact, self._inventory)
        entry = ManifestEntry(
            artifact=artifact,
            dependencies=extraction.dependencies,
            static_resources=extraction.static_resources,
            version=version if is_root else None,
        )

        subtrees = await asyncio.gather(
            *(self._visit(dep, state) for dep in extraction.dependencies)
        )
        manifest = [entry]
        for subtree in subtrees:
            manifest.extend(subtree)
        return manifest


def collect_static_resources(manifest: Iterable[ManifestEntry]) -> list[str]:
    """Ordered union of every static resource referenced in *manifest*."""
    names: dict[str, None] = {}
    for entry in manifest:
        names.update(dict.fromkeys(entry.static_resources))
    return list(names)
