"""
Tests for the FastAPI forwarding routes.
"""

from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from api.handlers import to_response
from api.operations import KEYVAULT_OPERATIONS
from app import create_app
from core.config import BackendSettings, Config
from core.exceptions import ConfigurationError
from core.request_types import Cookie, OutwardResponse

PROXY = "https://proxy.example"


@pytest.fixture
def config():
    return Config(backend=BackendSettings(host="https://backend.example"))


@pytest.fixture
def logger():
    return MagicMock()


@pytest.fixture
def client(config, logger, transport):
    app = create_app(config, logger, transport=transport)
    with TestClient(app, base_url=PROXY) as test_client:
        yield test_client


class TestForwardRoutes:
    """Tests for the per-operation routes."""

    def test_create_key_forwarded(self, client, transport, logger):
        response = client.post(
            "/keys/signing-key/create?api-version=7.4",
            content=b'{"kty": "RSA"}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.content == b'{"value": "ok"}'
        sent = transport.calls[0]
        assert sent.method == "POST"
        assert str(sent.url) == "https://backend.example/keys/signing-key/create?api-version=7.4"
        assert sent.headers["host"] == "backend.example"
        assert sent.headers["via"] == "1.1 proxy.example"
        assert sent.body == b'{"kty": "RSA"}'
        logger.log_forward.assert_called_once()
        assert logger.log_forward.call_args.kwargs["operation"] == "createKey"

    def test_get_secret_without_body(self, client, transport):
        client.get("/secrets/db-password?api-version=7.4")

        sent = transport.calls[0]
        assert sent.method == "GET"
        assert sent.url.path == "/secrets/db-password"
        assert sent.body is None

    def test_secret_versions_route(self, client, transport, logger):
        client.get("/secrets/db-password/versions")

        assert transport.calls[0].url.path == "/secrets/db-password/versions"
        assert logger.log_forward.call_args.kwargs["operation"] == "getSecretVersions"

    def test_existing_via_preserved(self, client, transport):
        client.delete("/keys/old-key", headers={"Via": "1.1 edge"})

        assert transport.calls[0].headers["via"] == "1.1 edge, 1.1 proxy.example"

    def test_backend_status_and_cookies_relayed(self, client, transport, logger):
        transport.response = httpx.Response(
            404,
            headers={"cookie": "affinity=node-2", "x-ms-request-id": "abc"},
            content=b'{"error": {"code": "SecretNotFound"}}',
        )

        response = client.get("/deletedsecrets/missing")

        assert response.status_code == 404
        assert response.content == b'{"error": {"code": "SecretNotFound"}}'
        assert response.headers["x-ms-request-id"] == "abc"
        assert "affinity=node-2" in response.headers["set-cookie"]
        logger.log_error.assert_called_once()

    def test_cookie_value_relayed_unquoted(self, client, transport):
        transport.response = httpx.Response(200, headers={"cookie": "token=YWJj=="})

        response = client.get("/secrets/s")

        assert response.headers.get_list("set-cookie") == ["token=YWJj=="]

    def test_cookie_with_illegal_name_skipped(self, client, transport):
        transport.response = httpx.Response(200, headers={"cookie": "a=1; bad name=2"})

        response = client.get("/secrets/s")

        assert response.status_code == 200
        assert response.headers.get_list("set-cookie") == ["a=1"]

    def test_accept_encoding_not_forwarded(self, client, transport):
        client.get("/secrets/s", headers={"Accept-Encoding": "br, zstd"})

        assert "accept-encoding" not in transport.calls[0].headers

    def test_timeout_maps_to_504(self, client, transport, logger):
        transport.error = httpx.ReadTimeout("timed out")

        response = client.get("/certificates/web/pending")

        assert response.status_code == 504
        logger.log_error.assert_called_once_with("getCertificateOperation", 504, "Upstream timeout")

    def test_connection_error_maps_to_502(self, client, transport, logger):
        transport.error = httpx.ConnectError("connection refused")

        response = client.put("/certificates/issuers/digicert", content=b"{}")

        assert response.status_code == 502
        assert "connection refused" in response.text
        assert logger.log_error.call_args.args[:2] == ("setCertificateIssuer", 502)

    def test_unknown_route_not_forwarded(self, client, transport):
        response = client.get("/keys")

        assert response.status_code == 404
        assert transport.calls == []

    def test_every_operation_registered(self, client, transport):
        for operation in KEYVAULT_OPERATIONS:
            path = operation.path.format(
                key_name="k",
                key_version="v1",
                secret_name="s",
                secret_version="v1",
                issuer_name="i",
                certificate_name="c",
                certificate_version="v1",
                storage_account_name="sa",
            )
            client.request(operation.method, path)

        assert [call.method for call in transport.calls] == [
            operation.method for operation in KEYVAULT_OPERATIONS
        ]


class TestCreateApp:
    """Tests for application construction."""

    def test_missing_backend(self, logger):
        with pytest.raises(ConfigurationError):
            create_app(Config(), logger)


class TestToResponse:
    """Tests for serialising an OutwardResponse."""

    def test_drops_hop_by_hop_headers(self):
        outward = OutwardResponse(
            status=200,
            headers=httpx.Headers(
                {
                    "Content-Type": "application/json",
                    "Proxy-Authenticate": "Basic",
                    "Transfer-Encoding": "chunked",
                    "ETag": "v1",
                }
            ),
            body=b"{}",
        )

        response = to_response(outward)

        assert response.headers["content-type"] == "application/json"
        assert response.headers["etag"] == "v1"
        assert "proxy-authenticate" not in response.headers
        assert "transfer-encoding" not in response.headers

    def test_cookie_without_value(self):
        outward = OutwardResponse(
            status=200,
            headers=httpx.Headers(),
            body=b"",
            cookies=[Cookie(name="flag")],
        )

        response = to_response(outward)

        assert response.headers.getlist("set-cookie") == ["flag"]
