"""``sf-registry deploy`` — publish a local artifact and its dependencies.

Collects the operator's choices, hands them to
:class:`~sf_registry.core.deploy_service.DeployService` and renders the
resolved manifest.  No business logic lives here.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

from rich.table import Table

from sf_registry.cli import exit_codes
from sf_registry.cli.console import console
from sf_registry.cli.prompts import (
    prompt_description,
    prompt_kind,
    prompt_select_name,
    prompt_version,
)
from sf_registry.config import RegistrySettings
from sf_registry.core.deploy_service import DeployService
from sf_registry.core.inventory import ArtifactInventory, ProjectLayout
from sf_registry.core.models import ArtifactKind, ManifestEntry, PackageMetadata
from sf_registry.core.scanner import find_project_root
from sf_registry.exceptions import ArtifactNotFoundError
from sf_registry.infra.archive import build_package
from sf_registry.infra.registry_client import RegistryClient


def render_manifest(manifest: Sequence[ManifestEntry]) -> Table:
    """Build a Rich table summarising a resolved manifest."""
    table = Table(
        title="Deployed artifacts",
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("Artifact", style="bold")
    table.add_column("Type")
    table.add_column("Dependencies")
    table.add_column("Static resources")
    for entry in manifest:
        table.add_row(
            entry.name + (f" [green]v{entry.version}[/green]" if entry.version else ""),
            entry.kind.value,
            ", ".join(dep.name for dep in entry.dependencies) or "—",
            ", ".join(entry.static_resources) or "—",
        )
    return table


def run_deploy(settings: RegistrySettings, cwd: Path | None = None) -> int:
    """Interactive deploy of one component or class."""
    project_root = find_project_root(cwd or Path.cwd())
    layout = ProjectLayout.from_settings(project_root, settings)
    inventory = asyncio.run(ArtifactInventory.load(layout))

    kind = prompt_kind("What do you want to deploy?")
    names = inventory.names(kind)
    if not names:
        folder = layout.lwc_dir if kind is ArtifactKind.COMPONENT else layout.classes_dir
        raise ArtifactNotFoundError(f"No {kind.label} found in {folder}.")

    name = prompt_select_name(f"Which {kind.label} do you want to deploy?", names)
    metadata = PackageMetadata(
        name=name,
        kind=kind,
        version=prompt_version(),
        description=prompt_description(),
    )

    console.print(f"\n[bold]Resolving dependencies of {name}…[/bold]")
    with RegistryClient(settings) as client:
        service = DeployService(inventory, settings, client, build_package)
        result = service.deploy(metadata)

    console.print()
    console.print(render_manifest(result.manifest))
    if result.static_resources:
        console.print(f"Static resources: {', '.join(result.static_resources)}")
    console.print(f"\n[bold green]Server:[/bold green] {result.server_message}")
    return exit_codes.SUCCESS
