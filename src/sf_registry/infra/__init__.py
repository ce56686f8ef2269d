"""Infrastructure layer — archive files and the registry server.

Every raw third-party or OS exception is caught here and re-raised as a
:class:`~sf_registry.exceptions.RegistryError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from sf_registry.infra.archive import ExtractionReport, build_package, extract_package
from sf_registry.infra.registry_client import RegistryClient

__all__: list[str] = [
    "ExtractionReport",
    "RegistryClient",
    "build_package",
    "extract_package",
]
