"""Transport protocol for Cosmos DB REST communication.

The client core composes headers and maps responses; sending bytes over the
wire is delegated to a transport implementing this protocol. HTTPTransport is
the default implementation; tests inject mocks.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportResponse:
    """Status code, decoded JSON body and response headers.

    The body is a dict for every resource operation. Stored procedure
    execution may return any JSON value.
    """

    status_code: int
    body: Any = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def activity_id(self) -> str | None:
        """Service-assigned id of the request, for support tickets."""
        return self.headers.get("x-ms-activity-id")

    @property
    def session_token(self) -> str | None:
        """Session token to pass on follow-up reads under Session consistency."""
        return self.headers.get("x-ms-session-token")

    @property
    def request_charge(self) -> float | None:
        """Request units consumed by the operation."""
        charge = self.headers.get("x-ms-request-charge")
        return float(charge) if charge is not None else None


@runtime_checkable
class CosmosTransport(Protocol):
    """Protocol defining the transport interface.

    Transports are responsible for:
    - Sending the request with exactly the headers given
    - Decoding the JSON body
    - Raising CosmosTransportError for connection failures, timeouts and
      undecodable bodies

    Transports never interpret status codes; the response mappers do.
    """

    def send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: Any = None,
    ) -> TransportResponse:
        """Send a request and return the raw response.

        Args:
            method: HTTP method
            path: Request path (e.g. "/dbs/db1/colls")
            headers: Complete header set, including Authorization
            body: Optional JSON-serializable body

        Returns:
            TransportResponse with status code, body and headers

        Raises:
            CosmosTransportError: If the request could not be completed
        """
        ...

    def close(self) -> None:
        """Clean up resources. Safe to call multiple times."""
        ...
