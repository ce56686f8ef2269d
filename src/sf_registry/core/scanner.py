"""File Scanner: artifact directory listing, recursive walks and the
forbidden-extension gate, plus project-root discovery.

Listing helpers are lenient (absent directory gives an empty result);
the recursive walk is strict so that unreadable artifact directories
abort the operation that needed them.  Symlink loops are not detected.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Iterator
from pathlib import Path

from sf_registry.exceptions import ForbiddenFileError, ProjectRootNotFoundError

PROJECT_MARKER = "sfdx-project.json"


async def list_subdirectories(path: Path) -> list[str]:
    """Return the sorted names of the immediate subdirectories of *path*.

    The is-directory probes of sibling entries run concurrently.  Returns
    an empty list when *path* does not exist or cannot be read.
    """
    try:
        entries = await asyncio.to_thread(lambda: list(path.iterdir()))
    except OSError:
        return []
    flags = await asyncio.gather(*(asyncio.to_thread(entry.is_dir) for entry in entries))
    return sorted(entry.name for entry, is_dir in zip(entries, flags) if is_dir)


def walk_files(path: Path) -> Iterator[Path]:
    """Yield every file below *path*, depth-first.

    Each call returns a fresh generator.  ``OSError`` from an absent or
    unreadable directory propagates to the consumer.
    """
    for entry in sorted(path.iterdir()):
        if entry.is_dir():
            yield from walk_files(entry)
        else:
            yield entry


def empty_directories(path: Path) -> Iterator[Path]:
    """Yield every directory below *path* that has no entries at all."""
    for entry in sorted(path.iterdir()):
        if entry.is_dir():
            if next(entry.iterdir(), None) is None:
                yield entry
            else:
                yield from empty_directories(entry)


def forbidden_extension(path: Path, forbidden_extensions: Iterable[str]) -> str | None:
    """Return the lower-cased suffix of *path* if it is blacklisted."""
    suffix = path.suffix.lower()
    if suffix and suffix in forbidden_extensions:
        return suffix
    return None


def check_forbidden(path: Path, forbidden_extensions: frozenset[str]) -> None:
    """Walk *path* and stop at the first blacklisted file.

    Raises
    ------
    ForbiddenFileError
        Naming the offending file and its extension.
    """
    for file_path in walk_files(path):
        extension = forbidden_extension(file_path, forbidden_extensions)
        if extension is not None:
            raise ForbiddenFileError(file_path, extension)


def find_project_root(start: Path) -> Path:
    """Walk up from *start* to the directory containing ``sfdx-project.json``.

    Raises
    ------
    ProjectRootNotFoundError
        When the filesystem root is reached without finding the marker.
    """
    current = start.resolve()
    for candidate in (current, *current.parents):
        if (candidate / PROJECT_MARKER).is_file():
            return candidate
    raise ProjectRootNotFoundError(
        f"Could not find the Salesforce project root ({PROJECT_MARKER}) above {current}.",
        hint="Run the command from inside an SFDX project.",
    )
