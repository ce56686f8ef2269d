"""Local artifact inventory.

:class:`ProjectLayout` maps the configured relative folders onto a
project root.  :class:`ArtifactInventory` is the snapshot of every
Component and Class found there; it is built once per command and
treated as immutable afterwards.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from sf_registry.config import RegistrySettings
from sf_registry.core.models import Artifact, ArtifactKind
from sf_registry.core.scanner import list_subdirectories
from sf_registry.exceptions import ArtifactNotFoundError

CLASS_SOURCE_SUFFIX = ".cls"


@dataclass(frozen=True, slots=True)
class ProjectLayout:
    """Absolute locations of the artifact roots inside one project."""

    root: Path
    lwc_dir: Path
    classes_dir: Path
    static_resources_dir: Path

    @classmethod
    def from_settings(cls, root: Path, settings: RegistrySettings) -> ProjectLayout:
        return cls(
            root=root,
            lwc_dir=root / settings.lwc_dir,
            classes_dir=root / settings.classes_dir,
            static_resources_dir=root / settings.static_resources_dir,
        )


@dataclass(frozen=True, slots=True)
class ArtifactInventory:
    """Names of the components and classes present in a project.

    Attributes
    ----------
    layout:
        The project layout the inventory was scanned from.
    components:
        Component names, sorted.
    class_dirs:
        Class name → directory holding ``<name>.cls``.
    """

    layout: ProjectLayout
    components: tuple[str, ...]
    class_dirs: dict[str, Path]

    @classmethod
    async def load(cls, layout: ProjectLayout) -> ArtifactInventory:
        """Scan *layout* for component and class directories."""
        components, class_dirs = await asyncio.gather(
            list_subdirectories(layout.lwc_dir),
            _scan_classes(layout.classes_dir),
        )
        return cls(layout=layout, components=tuple(components), class_dirs=class_dirs)

    @property
    def classes(self) -> tuple[str, ...]:
        return tuple(sorted(self.class_dirs))

    def names(self, kind: ArtifactKind) -> tuple[str, ...]:
        return self.components if kind is ArtifactKind.COMPONENT else self.classes

    def contains(self, artifact: Artifact) -> bool:
        return artifact.name in self.names(artifact.kind)

    def directory(self, artifact: Artifact) -> Path:
        """Return the directory owned by *artifact*.

        Raises
        ------
        ArtifactNotFoundError
            If the artifact is not part of this inventory.
        """
        if not self.contains(artifact):
            raise ArtifactNotFoundError(
                f"{artifact.kind.label} '{artifact.name}' was not found in the project.",
                hint=f"Looked in {self._root_for(artifact.kind)}.",
            )
        if artifact.kind is ArtifactKind.COMPONENT:
            return self.layout.lwc_dir / artifact.name
        return self.class_dirs[artifact.name]

    def _root_for(self, kind: ArtifactKind) -> Path:
        if kind is ArtifactKind.COMPONENT:
            return self.layout.lwc_dir
        return self.layout.classes_dir


async def _scan_classes(classes_dir: Path) -> dict[str, Path]:
    """Map every ``<name>.cls`` found one level below *classes_dir* to its folder."""
    class_dirs: dict[str, Path] = {}
    for dir_name in await list_subdirectories(classes_dir):
        directory = classes_dir / dir_name
        try:
            files = await asyncio.to_thread(lambda d=directory: sorted(d.iterdir()))
        except OSError:
            continue
        for file_path in files:
            if file_path.suffix == CLASS_SOURCE_SUFFIX:
                class_dirs.setdefault(file_path.stem, directory)
    return class_dirs
