"""Infrastructure: deploy archive construction and download extraction.

Archive layout
--------------
::

    <artifact name>/...                 one folder per manifest entry,
                                        empty subfolders kept as directory entries
    staticresources/<payload>           resource payload files
    staticresources/<name>.resource-meta.xml
    metadata.json                       operator-supplied metadata
    registry-deps.json                  the manifest

Files are streamed into the zip by :meth:`zipfile.ZipFile.write` in
chunks; nothing is read whole into memory.  A failed build removes the
partial archive.  Extraction is lenient: an existing destination is
reported and skipped rather than overwritten.
"""

from __future__ import annotations

import json
import shutil
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import structlog

from sf_registry.core.inventory import ArtifactInventory
from sf_registry.core.models import ArtifactKind, ManifestEntry, PackageMetadata, StaticResource
from sf_registry.core.scanner import empty_directories, walk_files
from sf_registry.exceptions import ArchiveExtractionError, ArtifactNotFoundError, PackageBuildError

logger = structlog.get_logger(__name__)

METADATA_FILE = "metadata.json"
MANIFEST_FILE = "registry-deps.json"
STATIC_RESOURCES_FOLDER = "staticresources"

_KIND_FOLDERS: dict[ArtifactKind, str] = {
    ArtifactKind.COMPONENT: "lwc",
    ArtifactKind.CLASS: "classes",
}


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------

def build_package(
    destination: Path,
    manifest: Sequence[ManifestEntry],
    resources: Sequence[StaticResource],
    metadata: PackageMetadata,
    inventory: ArtifactInventory,
) -> Path:
    """Write the deploy archive to *destination* and return its path.

    The archive is closed (central directory written) before returning.

    Raises
    ------
    PackageBuildError
        When any entry cannot be added; the partial file is removed.
    """
    try:
        with zipfile.ZipFile(
            destination, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
        ) as archive:
            for entry in manifest:
                directory = inventory.directory(entry.artifact)
                for file_path in walk_files(directory):
                    arcname = PurePosixPath(entry.name, *file_path.relative_to(directory).parts)
                    archive.write(file_path, str(arcname))
                for dir_path in empty_directories(directory):
                    arcname = PurePosixPath(entry.name, *dir_path.relative_to(directory).parts)
                    archive.write(dir_path, f"{arcname}/")

            for resource in resources:
                for file_path in (resource.payload, resource.descriptor):
                    archive.write(file_path, f"{STATIC_RESOURCES_FOLDER}/{file_path.name}")

            archive.writestr(METADATA_FILE, json.dumps(metadata.to_dict(), indent=2))
            archive.writestr(
                MANIFEST_FILE,
                json.dumps([entry.to_dict() for entry in manifest], indent=2),
            )
    except (OSError, ValueError, zipfile.BadZipFile, ArtifactNotFoundError) as exc:
        destination.unlink(missing_ok=True)
        raise PackageBuildError(f"Could not build the deploy archive: {exc}") from exc

    logger.info(
        "package_built",
        archive=str(destination),
        entries=len(manifest),
        static_resources=len(resources),
        size_bytes=destination.stat().st_size,
    )
    return destination


# ---------------------------------------------------------------------------
# Extract
# ---------------------------------------------------------------------------

@dataclass
class ExtractionReport:
    """What :func:`extract_package` wrote and what it left alone."""

    extracted: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


def validate_member_name(name: str) -> None:
    """Reject absolute paths and ``..`` components in an archive member name."""
    if "\x00" in name:
        raise ArchiveExtractionError(f"Null byte in archive member name: {name!r}")
    normalized = name.replace("\\", "/")
    if normalized.startswith("/") or (len(normalized) > 1 and normalized[1] == ":"):
        raise ArchiveExtractionError(f"Absolute path in archive: {name}")
    if ".." in normalized.split("/"):
        raise ArchiveExtractionError(f"Directory traversal in archive: {name}")


def _read_manifest_kinds(archive: zipfile.ZipFile) -> dict[str, ArtifactKind]:
    try:
        raw = json.loads(archive.read(MANIFEST_FILE))
    except KeyError:
        return {}
    except ValueError as exc:
        raise ArchiveExtractionError(f"Invalid {MANIFEST_FILE} in archive: {exc}") from exc

    kinds: dict[str, ArtifactKind] = {}
    for item in raw if isinstance(raw, list) else []:
        try:
            kinds[str(item["name"])] = ArtifactKind(item["type"])
        except (KeyError, TypeError, ValueError):
            continue
    return kinds


def extract_package(
    archive_path: Path,
    target_dir: Path,
    default_kind: ArtifactKind,
) -> ExtractionReport:
    """Unpack a registry archive into a project's ``force-app`` folder.

    Artifact folders go to ``<target>/lwc/<name>`` or
    ``<target>/classes/<name>`` according to ``registry-deps.json``
    (*default_kind* when the archive carries none).  Static resources go
    to ``<target>/staticresources``.  Destinations that already exist are
    skipped and listed in :attr:`ExtractionReport.skipped`.

    Raises
    ------
    ArchiveExtractionError
        If the archive is unreadable or contains unsafe member names.
    """
    report = ExtractionReport()
    try:
        with zipfile.ZipFile(archive_path) as archive:
            members = archive.infolist()
            for info in members:
                validate_member_name(info.filename)
            kinds = _read_manifest_kinds(archive)

            groups: dict[str, list[zipfile.ZipInfo]] = {}
            for info in members:
                parts = PurePosixPath(info.filename.replace("\\", "/")).parts
                if len(parts) < 2:
                    continue
                groups.setdefault(parts[0], []).append(info)

            for top, infos in groups.items():
                if top == STATIC_RESOURCES_FOLDER:
                    _extract_static_resources(archive, infos, target_dir, report)
                else:
                    kind = kinds.get(top, default_kind)
                    destination = target_dir / _KIND_FOLDERS[kind] / top
                    _extract_artifact(archive, infos, top, destination, report)
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveExtractionError(f"Could not extract {archive_path.name}: {exc}") from exc
    return report


def _extract_artifact(
    archive: zipfile.ZipFile,
    infos: list[zipfile.ZipInfo],
    top: str,
    destination: Path,
    report: ExtractionReport,
) -> None:
    if destination.exists():
        logger.warning("extraction_skipped", destination=str(destination), reason="exists")
        report.skipped.append(destination)
        return
    for info in infos:
        relative = PurePosixPath(info.filename.replace("\\", "/")).relative_to(top)
        if info.is_dir():
            destination.joinpath(*relative.parts).mkdir(parents=True, exist_ok=True)
        else:
            _copy_member(archive, info, destination.joinpath(*relative.parts))
    report.extracted.append(destination)


def _extract_static_resources(
    archive: zipfile.ZipFile,
    infos: list[zipfile.ZipInfo],
    target_dir: Path,
    report: ExtractionReport,
) -> None:
    resources_dir = target_dir / STATIC_RESOURCES_FOLDER
    for info in infos:
        if info.is_dir():
            continue
        destination = resources_dir / PurePosixPath(info.filename).name
        if destination.exists():
            logger.warning("extraction_skipped", destination=str(destination), reason="exists")
            report.skipped.append(destination)
            continue
        _copy_member(archive, info, destination)
        report.extracted.append(destination)


def _copy_member(archive: zipfile.ZipFile, info: zipfile.ZipInfo, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    with archive.open(info) as source, destination.open("wb") as target:
        shutil.copyfileobj(source, target)
