"""Tests for sf_registry.config — settings model and environment overlay."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sf_registry.config import (
    DEFAULT_FORBIDDEN_EXTENSIONS,
    DEFAULT_SERVER_URL,
    ENV_SERVER_URL,
    ENV_TIMEOUT,
    RegistrySettings,
    load_settings,
)
from sf_registry.exceptions import ConfigurationError


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

class TestDefaults:
    def test_default_server(self) -> None:
        assert load_settings({}).server_url == DEFAULT_SERVER_URL

    def test_default_layout(self) -> None:
        settings = RegistrySettings()
        assert settings.lwc_dir == "force-app/main/default/lwc"
        assert settings.classes_dir == "force-app/main/default/classes"
        assert settings.static_resources_dir == "force-app/main/default/staticresources"
        assert settings.descriptor_suffix == "resource-meta.xml"

    @pytest.mark.parametrize("ext", [".sh", ".bat", ".exe", ".py", ".zip", ".ps1"])
    def test_forbidden_defaults(self, ext: str) -> None:
        assert ext in DEFAULT_FORBIDDEN_EXTENSIONS

    @pytest.mark.parametrize("ext", [".js", ".ts", ".html", ".css", ".cls", ".xml"])
    def test_source_extensions_allowed(self, ext: str) -> None:
        assert ext not in DEFAULT_FORBIDDEN_EXTENSIONS

    def test_settings_are_frozen(self) -> None:
        settings = RegistrySettings()
        with pytest.raises(ValidationError):
            settings.server_url = "https://other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

class TestNormalisation:
    def test_trailing_slash_stripped(self) -> None:
        assert RegistrySettings(server_url="https://r.test/ ").server_url == "https://r.test"

    def test_extensions_lowercased_and_dotted(self) -> None:
        settings = RegistrySettings(forbidden_extensions=frozenset({"SH", ".Exe"}))
        assert settings.forbidden_extensions == frozenset({".sh", ".exe"})

    def test_descriptor_suffix_leading_dot(self) -> None:
        assert RegistrySettings(descriptor_suffix=".meta.xml").descriptor_suffix == "meta.xml"

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegistrySettings(colour="blue")  # type: ignore[call-arg]


# ---------------------------------------------------------------------------
# Environment overlay
# ---------------------------------------------------------------------------

class TestLoadSettings:
    def test_env_overrides(self) -> None:
        settings = load_settings({ENV_SERVER_URL: "http://localhost:3000/", ENV_TIMEOUT: "5"})
        assert settings.server_url == "http://localhost:3000"
        assert settings.timeout_seconds == 5.0

    def test_empty_values_ignored(self) -> None:
        settings = load_settings({ENV_SERVER_URL: "", ENV_TIMEOUT: ""})
        assert settings.server_url == DEFAULT_SERVER_URL

    def test_bad_scheme(self) -> None:
        with pytest.raises(ConfigurationError, match="server_url") as exc_info:
            load_settings({ENV_SERVER_URL: "ftp://registry"})
        assert ENV_SERVER_URL in (exc_info.value.hint or "")

    @pytest.mark.parametrize("value", ["0", "-3", "soon"])
    def test_bad_timeout(self, value: str) -> None:
        with pytest.raises(ConfigurationError, match="timeout_seconds"):
            load_settings({ENV_TIMEOUT: value})

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_SERVER_URL, "https://env.test")
        monkeypatch.delenv(ENV_TIMEOUT, raising=False)
        assert load_settings().server_url == "https://env.test"
