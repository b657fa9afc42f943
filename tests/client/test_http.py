"""Tests for the httpx transport."""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from cosmos_tools.client.exceptions import CosmosConnectionError, CosmosTransportError
from cosmos_tools.client.http import HTTPTransport
from cosmos_tools.client.transport import CosmosTransport


@pytest.fixture
def transport(config, mock_httpx_client):
    """Create transport with a mocked httpx client."""
    transport = HTTPTransport(config)
    transport._client = mock_httpx_client
    return transport


class TestHTTPTransport:
    """Tests for HTTPTransport.send."""

    def test_implements_protocol(self, config):
        """HTTPTransport satisfies the transport protocol."""
        assert isinstance(HTTPTransport(config), CosmosTransport)

    def test_send_passes_headers_and_body(self, transport, mock_httpx_client):
        """Headers are sent untouched and the body is JSON-encoded."""
        headers = {"Authorization": "sig", "x-ms-version": "2018-12-31"}
        transport.send("POST", "/dbs", headers, {"id": "db1"})

        mock_httpx_client.request.assert_called_once_with(
            "POST",
            "/dbs",
            headers=headers,
            content=json.dumps({"id": "db1"}).encode("utf-8"),
        )

    def test_send_without_body(self, transport, mock_httpx_client):
        """GET requests carry no content."""
        transport.send("GET", "/dbs", {})
        assert mock_httpx_client.request.call_args.kwargs["content"] is None

    def test_response_fields(self, transport, mock_httpx_client):
        """Status, body and lowercased headers are returned."""
        response = mock_httpx_client.request.return_value
        response.status_code = 201
        response.json.return_value = {"id": "db1"}
        response.headers = {"X-MS-Activity-Id": "act-9", "x-ms-request-charge": "4.95"}

        result = transport.send("POST", "/dbs", {}, {"id": "db1"})

        assert result.status_code == 201
        assert result.body == {"id": "db1"}
        assert result.activity_id == "act-9"
        assert result.request_charge == 4.95

    def test_empty_body(self, transport, mock_httpx_client):
        """204 responses with no content decode to an empty dict."""
        response = mock_httpx_client.request.return_value
        response.status_code = 204
        response.content = b""

        result = transport.send("DELETE", "/dbs/db1", {})

        assert result.status_code == 204
        assert result.body == {}
        response.json.assert_not_called()

    def test_malformed_body(self, transport, mock_httpx_client):
        """Undecodable bodies raise CosmosTransportError."""
        response = mock_httpx_client.request.return_value
        response.content = b"<html>"
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)

        with pytest.raises(CosmosTransportError, match="Malformed response body"):
            transport.send("GET", "/dbs", {})

    def test_connect_error(self, transport, mock_httpx_client):
        """Connection failures raise CosmosTransportError."""
        mock_httpx_client.request.side_effect = httpx.ConnectError("refused")

        with pytest.raises(CosmosConnectionError, match="Cannot connect"):
            transport.send("GET", "/dbs", {})

    def test_timeout(self, transport, mock_httpx_client):
        """Timeouts raise CosmosTransportError."""
        mock_httpx_client.request.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(CosmosTransportError, match="Request timeout") as exc_info:
            transport.send("GET", "/dbs", {})
        assert not isinstance(exc_info.value, CosmosConnectionError)

    def test_connect_timeout(self, transport, mock_httpx_client):
        """A connect timeout means the request was never sent."""
        mock_httpx_client.request.side_effect = httpx.ConnectTimeout("slow")

        with pytest.raises(CosmosConnectionError, match="Cannot connect"):
            transport.send("GET", "/dbs", {})

    @pytest.mark.parametrize(
        "error",
        [httpx.ReadError("reset"), httpx.WriteError("broken pipe"), httpx.RemoteProtocolError("eof")],
    )
    def test_other_transport_errors(self, transport, mock_httpx_client, error):
        """Any other httpx transport failure is wrapped, with the cause chained."""
        mock_httpx_client.request.side_effect = error

        with pytest.raises(CosmosTransportError, match="failed") as exc_info:
            transport.send("GET", "/dbs", {})
        assert exc_info.value.__cause__ is error
        assert not isinstance(exc_info.value, CosmosConnectionError)


class TestHTTPTransportLifecycle:
    """Tests for client creation and cleanup."""

    def test_lazy_client(self, config):
        """The httpx client is created on first use with the endpoint as base URL."""
        transport = HTTPTransport(config)
        assert transport._client is None

        client = transport.client
        assert str(client.base_url).startswith("https://localhost:8081")
        transport.close()

    def test_close_is_idempotent(self, config):
        """close() can be called repeatedly."""
        transport = HTTPTransport(config)
        mock_client = MagicMock()
        transport._client = mock_client

        transport.close()
        transport.close()

        mock_client.close.assert_called_once()
        assert transport._client is None

    def test_context_manager(self, config):
        """Leaving the context closes the client."""
        mock_client = MagicMock()
        with HTTPTransport(config) as transport:
            transport._client = mock_client
        mock_client.close.assert_called_once()
