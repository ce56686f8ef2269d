"""``sf-registry download`` — fetch a published artifact into the project.

Existing folders and static resources are never overwritten: they are
reported as skipped and the rest of the archive is still unpacked.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from sf_registry.cli import exit_codes
from sf_registry.cli.console import console
from sf_registry.cli.prompts import (
    prompt_kind,
    prompt_select_name,
    prompt_select_version,
    prompt_target_directory,
)
from sf_registry.config import RegistrySettings
from sf_registry.core.scanner import find_project_root
from sf_registry.exceptions import ArtifactNotFoundError, ProjectRootNotFoundError
from sf_registry.infra.archive import extract_package
from sf_registry.infra.registry_client import RegistryClient


def _default_target(settings: RegistrySettings, cwd: Path) -> Path:
    """``force-app/main/default`` of the enclosing project, or of *cwd*."""
    try:
        base = find_project_root(cwd)
    except ProjectRootNotFoundError:
        base = cwd
    return base / Path(settings.lwc_dir).parent


def run_download(settings: RegistrySettings, cwd: Path | None = None) -> int:
    """Interactive download of one published component or class version."""
    working_dir = cwd or Path.cwd()
    with RegistryClient(settings) as client:
        catalog = client.fetch_catalog()

        kind = prompt_kind("What do you want to download?")
        entries = catalog.entries(kind)
        if not entries:
            console.print(f"[yellow]No {kind.label} published in the registry.[/yellow]")
            return exit_codes.SUCCESS

        name = prompt_select_name(
            f"Which {kind.label} do you want to download?",
            [entry.name for entry in entries],
        )
        entry = catalog.find(kind, name)
        if entry is None or not entry.versions:
            raise ArtifactNotFoundError(f"No published version of {name}.")
        version = prompt_select_version(name, entry.version_labels())

        target = prompt_target_directory(_default_target(settings, working_dir))
        if not target.is_absolute():
            target = working_dir / target

        console.print(f"\n[bold]Downloading {name}@{version}…[/bold]")
        with tempfile.TemporaryDirectory(prefix="sf-registry-") as tmp:
            archive = client.download(kind, name, version, Path(tmp) / f"{name}-{version}.zip")
            report = extract_package(archive, target, kind)

    for path in report.extracted:
        console.print(f"[green]Extracted[/green] {path}")
    for path in report.skipped:
        console.print(f"[yellow]Skipped (already exists)[/yellow] {path}")
    console.print(f"\n[bold green]{name}@{version} unpacked into {target}.[/bold green]")
    return exit_codes.SUCCESS
