"""Runtime settings for sf-registry.

Settings are a frozen pydantic model so that every command sees one
validated, immutable view of the server address and the project
layout.  :func:`load_settings` overlays environment variables on the
defaults and maps validation failures to
:class:`~sf_registry.exceptions.ConfigurationError`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sf_registry.exceptions import ConfigurationError

DEFAULT_SERVER_URL = "https://registry.kiliogene.com"

DEFAULT_FORBIDDEN_EXTENSIONS: frozenset[str] = frozenset(
    {
        # shell / batch
        ".sh", ".bash", ".zsh", ".bat", ".cmd", ".ps1", ".vbs",
        # executables / libraries
        ".exe", ".com", ".dll", ".so", ".bin", ".jar",
        # scripting-language sources
        ".py", ".rb", ".pl", ".php",
        # installers / archives
        ".msi", ".dmg", ".pkg", ".deb", ".rpm",
        ".zip", ".tar", ".gz", ".tgz", ".7z", ".rar",
    }
)

ENV_SERVER_URL = "SF_REGISTRY_SERVER_URL"
ENV_TIMEOUT = "SF_REGISTRY_TIMEOUT"


class RegistrySettings(BaseModel):
    """Validated configuration shared by the core and infra layers.

    Attributes
    ----------
    server_url:
        Base URL of the registry server, without trailing slash.
    timeout_seconds:
        HTTP timeout applied to every request.
    lwc_dir:
        Components root, relative to the project root.
    classes_dir:
        Apex classes root, relative to the project root.
    static_resources_dir:
        Static resources root, relative to the project root.
    descriptor_suffix:
        Suffix of static resource metadata descriptors.
    forbidden_extensions:
        Lower-case dotted extensions refused at deploy time.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    server_url: str = Field(default=DEFAULT_SERVER_URL, min_length=1)
    timeout_seconds: float = Field(default=60.0, gt=0)
    lwc_dir: str = "force-app/main/default/lwc"
    classes_dir: str = "force-app/main/default/classes"
    static_resources_dir: str = "force-app/main/default/staticresources"
    descriptor_suffix: str = "resource-meta.xml"
    forbidden_extensions: frozenset[str] = DEFAULT_FORBIDDEN_EXTENSIONS

    @field_validator("server_url")
    @classmethod
    def _check_server_url(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped.startswith(("http://", "https://")):
            raise ValueError("must start with http:// or https://")
        return stripped.rstrip("/")

    @field_validator("forbidden_extensions")
    @classmethod
    def _normalize_extensions(cls, value: frozenset[str]) -> frozenset[str]:
        return frozenset(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in value
        )

    @field_validator("descriptor_suffix")
    @classmethod
    def _strip_leading_dot(cls, value: str) -> str:
        return value.lstrip(".")


def load_settings(environ: Mapping[str, str] | None = None) -> RegistrySettings:
    """Build :class:`RegistrySettings` from defaults and environment variables.

    Raises
    ------
    ConfigurationError
        When an override fails validation.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, object] = {}
    if env.get(ENV_SERVER_URL):
        overrides["server_url"] = env[ENV_SERVER_URL]
    if env.get(ENV_TIMEOUT):
        overrides["timeout_seconds"] = env[ENV_TIMEOUT]

    try:
        return RegistrySettings(**overrides)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationError(
            f"Invalid configuration: {details}",
            hint=f"Check the {ENV_SERVER_URL} and {ENV_TIMEOUT} environment variables.",
        ) from exc
