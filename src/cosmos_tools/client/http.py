"""HTTP transport for the Cosmos DB REST API.

Sends pre-composed requests with httpx and returns the raw status, body and
headers. Authorization is computed by the caller for every request, so the
transport carries no auth state of its own.
"""

import json
import logging
from typing import Any

import httpx

from .config import CosmosConfig
from .exceptions import CosmosConnectionError, CosmosTransportError
from .transport import TransportResponse

logger = logging.getLogger("cosmos-tools")


class HTTPTransport:
    """HTTP transport implementing the CosmosTransport protocol.

    Usage:
        transport = HTTPTransport(config)
        response = transport.send("GET", "/dbs", headers)
        transport.close()

    Or as context manager:
        with HTTPTransport(config) as transport:
            response = transport.send("GET", "/dbs", headers)
    """

    def __init__(self, config: CosmosConfig | None = None):
        """Initialize HTTP transport.

        Args:
            config: Cosmos configuration. If None, loads from environment.
        """
        self.config = config or CosmosConfig()
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.config.endpoint,
                timeout=self.config.timeout,
            )
        return self._client

    def __enter__(self) -> "HTTPTransport":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close client."""
        self.close()

    def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._client:
            self._client.close()
            self._client = None

    def _decode_body(self, response: httpx.Response) -> Any:
        """Decode the JSON body; empty bodies decode to an empty dict.

        Raises:
            CosmosTransportError: If the body is not valid JSON
        """
        if not response.content:
            return {}
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CosmosTransportError(
                f"Malformed response body (HTTP {response.status_code}): {e}",
                response.headers.get("x-ms-activity-id"),
            ) from e

    def send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: Any = None,
    ) -> TransportResponse:
        """Send a request with the given headers.

        Args:
            method: HTTP method
            path: Request path (e.g. "/dbs/db1/colls")
            headers: Complete header set, including Authorization
            body: Optional JSON-serializable body

        Returns:
            TransportResponse with status code, decoded body and headers
        """
        content = json.dumps(body).encode("utf-8") if body is not None else None
        try:
            response = self.client.request(method, path, headers=headers, content=content)
        except (httpx.ConnectError, httpx.ConnectTimeout) as e:
            raise CosmosConnectionError(f"Cannot connect to {self.config.endpoint}: {e}") from e
        except httpx.TimeoutException as e:
            raise CosmosTransportError(f"Request timeout to {self.config.endpoint}: {e}") from e
        except httpx.TransportError as e:
            raise CosmosTransportError(f"Request to {self.config.endpoint} failed: {e}") from e

        logger.debug(f"{method} {path} -> HTTP {response.status_code}")
        return TransportResponse(
            status_code=response.status_code,
            body=self._decode_body(response),
            headers={k.lower(): v for k, v in response.headers.items()},
        )
