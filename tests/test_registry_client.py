"""Tests for sf_registry.infra.registry_client — HTTP transport.

All traffic goes through ``httpx.MockTransport``; nothing leaves the process.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from sf_registry.core.models import ArtifactKind, PackageMetadata
from sf_registry.exceptions import CatalogError, TransportError
from sf_registry.infra.registry_client import ARCHIVE_FIELD, RegistryClient

CATALOG = {
    "component": [
        {
            "name": "Foo",
            "versions": [
                {
                    "version": "1.0.0",
                    "description": "first",
                    "hash": "abc",
                    "staticresources": ["Logo"],
                    "registryDependencies": [{"name": "Bar", "type": "component", "version": "1.0.0"}],
                },
                {
                    "version": "1.1.0",
                    "description": "second",
                    "hash": "def",
                    "staticresources": [],
                    "registryDependencies": [],
                },
            ],
        }
    ],
    "class": [],
}


def _client(settings, handler) -> RegistryClient:
    http = httpx.Client(base_url=settings.server_url, transport=httpx.MockTransport(handler))
    return RegistryClient(settings, client=http)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TestFetchCatalog:
    def test_parses_catalog(self, settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/catalog"
            return httpx.Response(200, json=CATALOG)

        catalog = _client(settings, handler).fetch_catalog()
        entry = catalog.find(ArtifactKind.COMPONENT, "Foo")
        assert entry is not None
        assert entry.version_labels() == ["1.1.0", "1.0.0"]
        assert entry.versions[0].registry_dependencies[0].name == "Bar"
        assert catalog.entries(ArtifactKind.CLASS) == []
        assert catalog.find(ArtifactKind.CLASS, "Foo") is None

    def test_invalid_json(self, settings) -> None:
        client = _client(settings, lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(CatalogError, match="not valid JSON"):
            client.fetch_catalog()

    def test_schema_violation(self, settings) -> None:
        client = _client(settings, lambda request: httpx.Response(200, json={"component": []}))
        with pytest.raises(CatalogError, match="class"):
            client.fetch_catalog()

    def test_http_error(self, settings) -> None:
        client = _client(settings, lambda request: httpx.Response(503, text="down"))
        with pytest.raises(TransportError) as exc_info:
            client.fetch_catalog()
        assert exc_info.value.status_code == 503
        assert "down" in str(exc_info.value)

    def test_network_error(self, settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError, match="Network error") as exc_info:
            _client(settings, handler).fetch_catalog()
        assert exc_info.value.hint


# ---------------------------------------------------------------------------
# Deploy
# ---------------------------------------------------------------------------

class TestDeploy:
    METADATA = PackageMetadata("Foo", ArtifactKind.COMPONENT, "1.0.0", "Root")

    def test_multipart_upload(self, settings, tmp_path: Path) -> None:
        archive = tmp_path / "Foo.zip"
        archive.write_bytes(b"PK\x03\x04zipdata")
        seen: dict[str, bytes] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method.encode()
            seen["path"] = request.url.path.encode()
            seen["body"] = request.read()
            seen["ctype"] = request.headers["content-type"].encode()
            return httpx.Response(200, text="Deployed Foo@1.0.0")

        message = _client(settings, handler).deploy(archive, self.METADATA)

        assert message == "Deployed Foo@1.0.0"
        assert seen["method"] == b"POST"
        assert seen["path"] == b"/deploy"
        assert seen["ctype"].startswith(b"multipart/form-data")
        body = seen["body"]
        assert f'name="{ARCHIVE_FIELD}"; filename="Foo.zip"'.encode() in body
        assert b"PK\x03\x04zipdata" in body
        for field, value in self.METADATA.to_dict().items():
            assert f'name="{field}"'.encode() in body
            assert value.encode() in body

    def test_rejected_upload(self, settings, tmp_path: Path) -> None:
        archive = tmp_path / "Foo.zip"
        archive.write_bytes(b"PK")
        client = _client(settings, lambda request: httpx.Response(409, text="version exists"))
        with pytest.raises(TransportError, match="version exists") as exc_info:
            client.deploy(archive, self.METADATA)
        assert exc_info.value.status_code == 409


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------

class TestDownload:
    def test_streams_to_file(self, settings, tmp_path: Path) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/download/class/Baz/2.0.0"
            return httpx.Response(200, content=b"zip-bytes")

        destination = tmp_path / "Baz.zip"
        result = _client(settings, handler).download(ArtifactKind.CLASS, "Baz", "2.0.0", destination)
        assert result == destination
        assert destination.read_bytes() == b"zip-bytes"

    def test_not_found_leaves_no_file(self, settings, tmp_path: Path) -> None:
        client = _client(settings, lambda request: httpx.Response(404, text="no such version"))
        destination = tmp_path / "Baz.zip"
        with pytest.raises(TransportError) as exc_info:
            client.download(ArtifactKind.CLASS, "Baz", "9.9.9", destination)
        assert exc_info.value.status_code == 404
        assert not destination.exists()


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:
    def test_injected_client_left_open(self, settings) -> None:
        http = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        with RegistryClient(settings, client=http):
            pass
        assert not http.is_closed
        http.close()

    def test_owned_client_closed(self, settings) -> None:
        client = RegistryClient(settings)
        client.close()
        assert client._client.is_closed
