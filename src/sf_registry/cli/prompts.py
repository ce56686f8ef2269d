"""Interactive prompts for the CLI layer.

Thin wrappers around questionary.  Each prompt returns plain values;
a dismissed prompt (Esc / Ctrl+C, which questionary reports as
``None``) raises :class:`~sf_registry.exceptions.SelectionCancelledError`.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import questionary

from sf_registry.core.models import ArtifactKind
from sf_registry.exceptions import SelectionCancelledError

OTHER_DIRECTORY = "Other..."
_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


def _answer(question: Any) -> Any:
    value = question.ask()
    if value is None:
        raise SelectionCancelledError("Prompt cancelled.")
    return value


def prompt_kind(message: str) -> ArtifactKind:
    """Ask whether to work on a component or a class."""
    choices = [
        questionary.Choice(title="LWC component", value=ArtifactKind.COMPONENT),
        questionary.Choice(title="Apex class", value=ArtifactKind.CLASS),
    ]
    return _answer(questionary.select(message, choices=choices))


def prompt_select_name(message: str, names: Sequence[str]) -> str:
    return _answer(questionary.select(message, choices=list(names)))


def prompt_select_version(name: str, versions: Sequence[str]) -> str:
    """Pick one of *versions* (already ordered newest first)."""
    return _answer(questionary.select(f"Which version of {name}?", choices=list(versions)))


def validate_version(value: str) -> bool | str:
    if _VERSION_RE.match(value.strip()):
        return True
    return "Use MAJOR.MINOR.PATCH, e.g. 1.0.0"


def prompt_version() -> str:
    return _answer(questionary.text("Version to publish:", validate=validate_version)).strip()


def prompt_description() -> str:
    return _answer(
        questionary.text(
            "Description:",
            validate=lambda v: bool(v.strip()) or "Description cannot be empty.",
        )
    ).strip()


def prompt_target_directory(default: Path) -> Path:
    """Ask where to unpack; *default* is the project's ``force-app/main/default``."""
    choice = _answer(
        questionary.select(
            "Target folder? (components go to lwc/, classes to classes/)",
            choices=[str(default), OTHER_DIRECTORY],
        )
    )
    if choice != OTHER_DIRECTORY:
        return Path(choice)
    typed = _answer(
        questionary.text(
            "Path:",
            validate=lambda v: bool(v.strip()) or "The path cannot be empty.",
        )
    )
    return Path(typed.strip()).expanduser()
