"""Custom exception hierarchy for sf-registry.

All exceptions that cross layer boundaries must inherit from
:class:`RegistryError`.  Raw third-party exceptions (httpx, pydantic,
``OSError`` from archive writes) are caught at the infrastructure
boundary and re-raised as a typed subclass defined here.

Hierarchy
---------
RegistryError
├── ConfigurationError
├── ProjectRootNotFoundError
├── ArtifactNotFoundError
├── ProjectReadError
├── ForbiddenFileError
├── StaticResourceValidationError
├── PackageBuildError
├── ArchiveExtractionError
├── CatalogError
├── TransportError
└── SelectionCancelledError
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class RegistryError(Exception):
    """Base exception for all sf-registry errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration / discovery ---------------------------------------------

class ConfigurationError(RegistryError):
    """Raised when settings are missing or invalid."""


class ProjectRootNotFoundError(RegistryError):
    """Raised when no ``sfdx-project.json`` exists above the working directory."""


class ArtifactNotFoundError(RegistryError):
    """Raised when an artifact is not part of the local project inventory."""


class ProjectReadError(RegistryError):
    """Raised when an artifact directory or source file cannot be read."""


# --- Policy ------------------------------------------------------------------

class ForbiddenFileError(RegistryError):
    """Raised when an artifact directory contains a blacklisted file type."""

    def __init__(self, path: Path, extension: str) -> None:
        super().__init__(
            f"Forbidden file detected: {path} (extension {extension} is not allowed)",
            hint="Remove the file from the artifact directory before deploying.",
        )
        self.path: Path = path
        self.extension: str = extension


# --- Validation --------------------------------------------------------------

class StaticResourceValidationError(RegistryError):
    """Raised when referenced static resources are missing on disk.

    :attr:`problems` holds one line per failed check so that callers can
    show the full failure set.
    """

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems: tuple[str, ...] = tuple(problems)
        super().__init__(
            "Static resource validation failed:\n"
            + "\n".join(f"  - {problem}" for problem in self.problems),
            hint="Each referenced resource needs a payload file and a "
            "<name>.resource-meta.xml descriptor in the static resources folder.",
        )


class CatalogError(RegistryError):
    """Raised when the registry catalog does not match the expected schema."""


# --- Packaging / transport ---------------------------------------------------

class PackageBuildError(RegistryError):
    """Raised when the deploy archive cannot be assembled."""


class ArchiveExtractionError(RegistryError):
    """Raised when a downloaded archive is unreadable or unsafe to unpack."""


class TransportError(RegistryError):
    """Raised when a request to the registry server fails."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int | None = status_code


# --- Interaction -------------------------------------------------------------

class SelectionCancelledError(RegistryError):
    """Raised when the operator dismisses an interactive prompt."""
