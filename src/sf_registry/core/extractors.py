"""Dependency Extractor — lightweight pattern scans of artifact sources.

These are not parsers.  Each ``extract_*`` function is a pure
``str -> list[str]`` transformation over one file's text; the strategy
classes decide which files to read for an artifact kind and filter the
results against the project inventory.

Patterns
--------
* Markup:   ``<c-child-name ...>``                  → component ``childName``
* Script:   ``import x from "c/childName"``         → component ``childName``
* Apex:     ``import m from "@salesforce/apex/Cls.method"`` → class ``Cls``
* Resource: ``import url from "@salesforce/resourceUrl/Logo"`` → resource ``Logo``
* Class:    whole-word occurrence of another known class name.

The class scan is a textual heuristic: a class name mentioned in a
comment or a string literal is reported as a dependency too.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Iterable
from pathlib import Path

import structlog

from sf_registry.core.inventory import ArtifactInventory
from sf_registry.core.models import Artifact, ArtifactKind, Extraction
from sf_registry.core.protocols import ExtractionStrategy

logger = structlog.get_logger(__name__)

_MARKUP_COMPONENT_RE = re.compile(r"<c-([A-Za-z0-9_][A-Za-z0-9_-]*)[\s>/]")
_SCRIPT_COMPONENT_RE = re.compile(r"""(?:\bfrom|\bimport)\s*["']c/([A-Za-z0-9_]+)["']""")
_APEX_IMPORT_RE = re.compile(
    r"""(?:\bfrom|\bimport)\s*["']@salesforce/apex/([A-Za-z0-9_]+)\.[^"']+["']"""
)
_RESOURCE_IMPORT_RE = re.compile(
    r"""(?:\bfrom|\bimport)\s*["']@salesforce/resourceUrl/([A-Za-z0-9_]+)["']"""
)

SCRIPT_EXTENSIONS: tuple[str, ...] = (".ts", ".js")


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def kebab_to_camel(name: str) -> str:
    """``my-child`` → ``myChild`` (LWC tag name to component folder name)."""
    head, *tail = name.split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)


# ---------------------------------------------------------------------------
# Pure pattern functions
# ---------------------------------------------------------------------------

def extract_markup_components(markup: str) -> list[str]:
    """Component names referenced as ``<c-...>`` tags.

    Kebab-case tags yield both the raw and the camelCase spelling; the
    inventory filter keeps whichever one exists.
    """
    names: list[str] = []
    for match in _MARKUP_COMPONENT_RE.finditer(markup):
        tag = match.group(1).rstrip("-")
        names.append(tag)
        if "-" in tag:
            names.append(kebab_to_camel(tag))
    return _unique(names)


def extract_script_components(code: str) -> list[str]:
    """Component names imported from the local ``c/`` namespace."""
    return _unique(m.group(1) for m in _SCRIPT_COMPONENT_RE.finditer(code))


def extract_apex_references(code: str) -> list[str]:
    """Apex class names imported through ``@salesforce/apex/<Class>.<method>``."""
    return _unique(m.group(1) for m in _APEX_IMPORT_RE.finditer(code))


def extract_static_resources(code: str) -> list[str]:
    """Static resource names imported through ``@salesforce/resourceUrl/<Name>``."""
    return _unique(m.group(1) for m in _RESOURCE_IMPORT_RE.finditer(code))


def extract_class_references(
    source: str,
    known_classes: Iterable[str],
    self_name: str,
) -> list[str]:
    """Known class names occurring as standalone words in *source*.

    ``OtherClass`` matches ``OtherClass.run()`` but not ``OtherClassName``.
    """
    return [
        name
        for name in _unique(known_classes)
        if name != self_name and re.search(rf"\b{re.escape(name)}\b", source)
    ]


# ---------------------------------------------------------------------------
# File access
# ---------------------------------------------------------------------------

def _read_if_exists(path: Path) -> str | None:
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8", errors="replace")


async def read_source(path: Path) -> str:
    """Read *path* in a worker thread; an absent file reads as empty text."""
    text = await asyncio.to_thread(_read_if_exists, path)
    return text or ""


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class ComponentReferenceScan:
    """Extraction strategy for Lightning Web Components.

    Reads ``<name>.html``, ``<name>.ts`` and ``<name>.js`` concurrently.
    """

    async def extract(
        self,
        artifact: Artifact,
        inventory: ArtifactInventory,
    ) -> Extraction:
        directory = inventory.directory(artifact)
        markup, *scripts = await asyncio.gather(
            read_source(directory / f"{artifact.name}.html"),
            *(read_source(directory / f"{artifact.name}{ext}") for ext in SCRIPT_EXTENSIONS),
        )

        component_names = extract_markup_components(markup)
        class_names: list[str] = []
        resources: list[str] = []
        for code in scripts:
            component_names.extend(extract_script_components(code))
            class_names.extend(extract_apex_references(code))
            resources.extend(extract_static_resources(code))

        known_components = set(inventory.components)
        known_classes = set(inventory.class_dirs)
        dependencies = [
            Artifact(name, ArtifactKind.COMPONENT)
            for name in _unique(component_names)
            if name in known_components and name != artifact.name
        ]
        dependencies.extend(
            Artifact(name, ArtifactKind.CLASS)
            for name in _unique(class_names)
            if name in known_classes
        )
        logger.debug(
            "component_scanned",
            component=artifact.name,
            dependencies=[dep.key for dep in dependencies],
            static_resources=_unique(resources),
        )
        return Extraction(
            dependencies=tuple(dependencies),
            static_resources=tuple(_unique(resources)),
        )


class ClassTextualReferenceScan:
    """Extraction strategy for Apex classes: textual reference scan of ``<name>.cls``.

    The class source must exist (the inventory is built from it); an
    unreadable file aborts the scan.
    """

    async def extract(
        self,
        artifact: Artifact,
        inventory: ArtifactInventory,
    ) -> Extraction:
        directory = inventory.directory(artifact)
        source_path = directory / f"{artifact.name}.cls"
        source = await asyncio.to_thread(source_path.read_text, encoding="utf-8", errors="replace")
        names = extract_class_references(source, inventory.classes, artifact.name)
        logger.debug("class_scanned", apex_class=artifact.name, dependencies=names)
        return Extraction(
            dependencies=tuple(Artifact(name, ArtifactKind.CLASS) for name in names),
        )


def default_strategies() -> dict[ArtifactKind, ExtractionStrategy]:
    """The pattern-based strategy for each artifact kind."""
    return {
        ArtifactKind.COMPONENT: ComponentReferenceScan(),
        ArtifactKind.CLASS: ClassTextualReferenceScan(),
    }
