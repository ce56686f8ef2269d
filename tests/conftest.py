"""Shared pytest fixtures and configuration for the sf-registry test suite.

Guidelines
----------
* No internet access in any test; HTTP goes through ``httpx.MockTransport``.
* Projects are real directory trees built under ``tmp_path``.
* Interactive prompts are patched at the ``sf_registry.cli`` boundary.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from sf_registry.config import RegistrySettings
from sf_registry.core.inventory import ArtifactInventory, ProjectLayout


class ProjectTree:
    """Builder for a minimal SFDX project on disk."""

    def __init__(self, root: Path, settings: RegistrySettings) -> None:
        self.root = root
        self.settings = settings
        root.mkdir(parents=True, exist_ok=True)
        (root / "sfdx-project.json").write_text("{}", encoding="utf-8")
        self.layout = ProjectLayout.from_settings(root, settings)
        for folder in (self.layout.lwc_dir, self.layout.classes_dir, self.layout.static_resources_dir):
            folder.mkdir(parents=True, exist_ok=True)

    def add_component(
        self,
        name: str,
        *,
        html: str | None = "<template></template>",
        js: str | None = None,
        ts: str | None = None,
        extra: dict[str, str] | None = None,
    ) -> Path:
        directory = self.layout.lwc_dir / name
        directory.mkdir(parents=True, exist_ok=True)
        if html is not None:
            (directory / f"{name}.html").write_text(html, encoding="utf-8")
        if js is not None:
            (directory / f"{name}.js").write_text(js, encoding="utf-8")
        if ts is not None:
            (directory / f"{name}.ts").write_text(ts, encoding="utf-8")
        (directory / f"{name}.js-meta.xml").write_text("<LightningComponentBundle/>", encoding="utf-8")
        for relative, content in (extra or {}).items():
            target = directory / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return directory

    def add_class(self, name: str, source: str = "", *, folder: str | None = None) -> Path:
        directory = self.layout.classes_dir / (folder or name)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / f"{name}.cls").write_text(
            source or f"public with sharing class {name} {{}}",
            encoding="utf-8",
        )
        (directory / f"{name}.cls-meta.xml").write_text("<ApexClass/>", encoding="utf-8")
        return directory

    def add_static_resource(
        self,
        name: str,
        *,
        extension: str = ".png",
        payload: bool = True,
        descriptor: bool = True,
    ) -> None:
        folder = self.layout.static_resources_dir
        if payload:
            (folder / f"{name}{extension}").write_bytes(b"\x89PNG-" + name.encode())
        if descriptor:
            (folder / f"{name}.resource-meta.xml").write_text("<StaticResource/>", encoding="utf-8")

    def inventory(self) -> ArtifactInventory:
        return asyncio.run(ArtifactInventory.load(self.layout))


@pytest.fixture
def settings() -> RegistrySettings:
    return RegistrySettings(server_url="https://registry.test")


@pytest.fixture
def project(tmp_path: Path, settings: RegistrySettings) -> ProjectTree:
    return ProjectTree(tmp_path / "project", settings)


@pytest.fixture
def scenario(project: ProjectTree) -> ProjectTree:
    """Foo → (Bar, Baz, Logo); Baz → Qux."""
    project.add_component(
        "Foo",
        js=(
            'import { LightningElement } from "lwc";\n'
            'import Bar from "c/Bar";\n'
            'import getData from "@salesforce/apex/Baz.getData";\n'
            'import LOGO from "@salesforce/resourceUrl/Logo";\n'
            "export default class Foo extends LightningElement {}\n"
        ),
    )
    project.add_component("Bar", js='import { LightningElement } from "lwc";\n')
    project.add_class(
        "Baz",
        "public class Baz {\n"
        "    @AuraEnabled public static String getData() { return Qux.value(); }\n"
        "}\n",
    )
    project.add_class("Qux", "public class Qux { public static String value() { return 'x'; } }")
    project.add_static_resource("Logo")
    return project
