"""httpx-backed client for the registry server.

This module is the **only** place in the codebase that imports
``httpx``.  Every httpx exception is caught here and re-raised as
:class:`~sf_registry.exceptions.TransportError`; catalog payloads that
fail schema validation become :class:`~sf_registry.exceptions.CatalogError`.
No request is retried.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

import httpx
import structlog
from pydantic import ValidationError

from sf_registry.config import RegistrySettings
from sf_registry.core.catalog import Catalog
from sf_registry.core.models import ArtifactKind, PackageMetadata
from sf_registry.exceptions import CatalogError, TransportError

logger = structlog.get_logger(__name__)

ARCHIVE_FIELD = "componentZip"
_CHUNK_SIZE = 64 * 1024


class RegistryClient:
    """Concrete :class:`~sf_registry.core.protocols.RegistryTransport`.

    Usage::

        with RegistryClient(settings) as client:
            catalog = client.fetch_catalog()

    Parameters
    ----------
    settings:
        Supplies the server URL and the request timeout.
    client:
        Optional pre-built ``httpx.Client`` (tests inject one backed by
        ``httpx.MockTransport``).  The registry client closes only the
        clients it created itself.
    """

    def __init__(self, settings: RegistrySettings, client: httpx.Client | None = None) -> None:
        self._owns_client = client is None
        self._client: httpx.Client = client or httpx.Client(
            base_url=settings.server_url,
            timeout=settings.timeout_seconds,
        )
        self._base_url = settings.server_url

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> RegistryClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def fetch_catalog(self) -> Catalog:
        """Fetch ``/catalog`` and validate it.

        Raises
        ------
        TransportError
            On network failure or a non-2xx response.
        CatalogError
            When the payload is not JSON or does not match the schema.
        """
        response = self._request("GET", "/catalog")
        try:
            payload = response.json()
        except ValueError as exc:
            raise CatalogError("Registry catalog is not valid JSON.") from exc

        try:
            return Catalog.model_validate(payload)
        except ValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            raise CatalogError(f"Invalid registry catalog: {details}") from exc

    # ------------------------------------------------------------------
    # Deploy
    # ------------------------------------------------------------------

    def deploy(self, archive: Path, metadata: PackageMetadata) -> str:
        """Upload *archive* as multipart form data; return the server message.

        The archive file is streamed from disk.

        Raises
        ------
        TransportError
            On network failure or when the server rejects the upload.
        """
        logger.info("deploy_uploading", artifact=metadata.name, archive=str(archive))
        with archive.open("rb") as handle:
            response = self._request(
                "POST",
                "/deploy",
                data=metadata.to_dict(),
                files={ARCHIVE_FIELD: (f"{metadata.name}.zip", handle, "application/zip")},
            )
        logger.info("deploy_uploaded", artifact=metadata.name, status=response.status_code)
        return response.text

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def download(
        self,
        kind: ArtifactKind,
        name: str,
        version: str,
        destination: Path,
    ) -> Path:
        """Stream ``/download/<type>/<name>/<version>`` into *destination*.

        Raises
        ------
        TransportError
            On network failure or a non-2xx response.
        """
        path = f"/download/{kind.value}/{name}/{version}"
        try:
            with self._client.stream("GET", path) as response:
                if response.is_error:
                    response.read()
                    raise self._status_error(response)
                with destination.open("wb") as target:
                    for chunk in response.iter_bytes(_CHUNK_SIZE):
                        target.write(chunk)
        except httpx.HTTPError as exc:
            destination.unlink(missing_ok=True)
            raise self._network_error(exc) from exc
        except TransportError:
            destination.unlink(missing_ok=True)
            raise
        logger.info("download_completed", artifact=name, version=version, path=str(destination))
        return destination

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: object) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)  # type: ignore[arg-type]
        except httpx.HTTPError as exc:
            raise self._network_error(exc) from exc
        if response.is_error:
            raise self._status_error(response)
        return response

    def _network_error(self, exc: httpx.HTTPError) -> TransportError:
        return TransportError(
            f"Network error while contacting {self._base_url}: {exc}",
            hint="Check your connection or the SF_REGISTRY_SERVER_URL setting.",
        )

    @staticmethod
    def _status_error(response: httpx.Response) -> TransportError:
        body = response.text.strip()
        return TransportError(
            f"HTTP {response.status_code} from {response.request.url.path}: {body or response.reason_phrase}",
            status_code=response.status_code,
        )
