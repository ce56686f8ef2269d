"""Tests for the interactive prompts.

``questionary`` is patched so no terminal is needed; we test the mapping
between the operator's answer and the returned value.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sf_registry.cli.prompts import (
    OTHER_DIRECTORY,
    prompt_description,
    prompt_kind,
    prompt_select_name,
    prompt_select_version,
    prompt_target_directory,
    prompt_version,
    validate_version,
)
from sf_registry.core.models import ArtifactKind
from sf_registry.exceptions import SelectionCancelledError


def _answers(*values: object) -> MagicMock:
    question = MagicMock()
    question.ask.side_effect = list(values)
    return question


# ---------------------------------------------------------------------------
# Version validation
# ---------------------------------------------------------------------------

class TestValidateVersion:
    @pytest.mark.parametrize("value", ["1.0.0", "10.20.30", " 2.0.1 "])
    def test_accepts_semver(self, value: str) -> None:
        assert validate_version(value) is True

    @pytest.mark.parametrize("value", ["", "1.0", "v1.0.0", "1.0.0-beta", "a.b.c"])
    def test_rejects_other(self, value: str) -> None:
        assert isinstance(validate_version(value), str)


# ---------------------------------------------------------------------------
# Selection prompts
# ---------------------------------------------------------------------------

class TestSelect:
    @patch("sf_registry.cli.prompts.questionary.select")
    def test_kind(self, mock_select: MagicMock) -> None:
        mock_select.return_value = _answers(ArtifactKind.CLASS)
        assert prompt_kind("Deploy what?") is ArtifactKind.CLASS
        choices = mock_select.call_args.kwargs["choices"]
        assert [choice.value for choice in choices] == [ArtifactKind.COMPONENT, ArtifactKind.CLASS]

    @patch("sf_registry.cli.prompts.questionary.select")
    def test_name(self, mock_select: MagicMock) -> None:
        mock_select.return_value = _answers("Bar")
        assert prompt_select_name("Which?", ("Bar", "Foo")) == "Bar"
        assert mock_select.call_args.kwargs["choices"] == ["Bar", "Foo"]

    @patch("sf_registry.cli.prompts.questionary.select")
    def test_version_order_preserved(self, mock_select: MagicMock) -> None:
        mock_select.return_value = _answers("1.1.0")
        assert prompt_select_version("Foo", ["1.1.0", "1.0.0"]) == "1.1.0"
        assert mock_select.call_args.kwargs["choices"] == ["1.1.0", "1.0.0"]

    @patch("sf_registry.cli.prompts.questionary.select")
    def test_cancel_raises(self, mock_select: MagicMock) -> None:
        mock_select.return_value = _answers(None)
        with pytest.raises(SelectionCancelledError):
            prompt_kind("Deploy what?")


# ---------------------------------------------------------------------------
# Text prompts
# ---------------------------------------------------------------------------

class TestText:
    @patch("sf_registry.cli.prompts.questionary.text")
    def test_version_is_stripped(self, mock_text: MagicMock) -> None:
        mock_text.return_value = _answers(" 1.2.3 ")
        assert prompt_version() == "1.2.3"
        assert mock_text.call_args.kwargs["validate"] is validate_version

    @patch("sf_registry.cli.prompts.questionary.text")
    def test_description(self, mock_text: MagicMock) -> None:
        mock_text.return_value = _answers("  A button  ")
        assert prompt_description() == "A button"

    @patch("sf_registry.cli.prompts.questionary.text")
    def test_cancelled_description(self, mock_text: MagicMock) -> None:
        mock_text.return_value = _answers(None)
        with pytest.raises(SelectionCancelledError):
            prompt_description()


# ---------------------------------------------------------------------------
# Target directory
# ---------------------------------------------------------------------------

class TestTargetDirectory:
    @patch("sf_registry.cli.prompts.questionary.select")
    def test_default_chosen(self, mock_select: MagicMock, tmp_path: Path) -> None:
        mock_select.return_value = _answers(str(tmp_path))
        assert prompt_target_directory(tmp_path) == tmp_path

    @patch("sf_registry.cli.prompts.questionary.text")
    @patch("sf_registry.cli.prompts.questionary.select")
    def test_other_path(self, mock_select: MagicMock, mock_text: MagicMock, tmp_path: Path) -> None:
        mock_select.return_value = _answers(OTHER_DIRECTORY)
        mock_text.return_value = _answers(" custom/dir ")
        assert prompt_target_directory(tmp_path) == Path("custom/dir")
