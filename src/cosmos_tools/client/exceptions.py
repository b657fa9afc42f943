"""Custom exceptions for the Cosmos DB REST client."""

DEFAULT_ERROR_MESSAGE = "REST invocation failed"


class CosmosError(Exception):
    """Base exception for all Cosmos client errors."""

    def __init__(self, message: str, activity_id: str | None = None):
        self.message = message
        self.activity_id = activity_id
        super().__init__(message)

    def __str__(self) -> str:
        if self.activity_id:
            return f"{self.message} (activity_id: {self.activity_id})"
        return self.message


class InvalidTokenTypeError(CosmosError):
    """Token could not be classified as a master key or resource token."""

    def __init__(self, message: str = "null resource type"):
        super().__init__(message)


class ThroughputTooLowError(CosmosError):
    """Requested manual throughput is below the service minimum."""

    def __init__(self, throughput: int, minimum: int):
        super().__init__(f"Throughput {throughput} RU/s is below the minimum of {minimum} RU/s")
        self.throughput = throughput
        self.minimum = minimum


class InvalidValidityPeriodError(CosmosError):
    """Permission token time-to-live is outside the allowed range."""

    def __init__(self, seconds: int, minimum: int, maximum: int):
        super().__init__(
            f"Resource token validity of {seconds}s must be between {minimum}s and {maximum}s"
        )
        self.seconds = seconds
        self.minimum = minimum
        self.maximum = maximum


class AzureServiceError(CosmosError):
    """The service answered with a non-success status code."""

    def __init__(self, message: str, status_code: int, activity_id: str | None = None):
        super().__init__(message, activity_id)
        self.status_code = status_code

    def __str__(self) -> str:
        base = f"HTTP {self.status_code}: {self.message}"
        if self.activity_id:
            return f"{base} (activity_id: {self.activity_id})"
        return base


class InvalidResponsePayloadError(CosmosError):
    """Response body does not have the shape of the expected resource."""
    pass


class CosmosTransportError(CosmosError):
    """Cannot reach the service, timed out, or got an unreadable body."""
    pass


class CosmosConnectionError(CosmosTransportError):
    """The connection failed before the request reached the service."""
    pass


TransportError = CosmosTransportError


def raise_for_status(
    status_code: int,
    body: dict | None,
    success: tuple[int, ...],
    activity_id: str | None = None,
) -> None:
    """Raise AzureServiceError unless status_code is one of the success codes.

    The error message is taken from the body's ``message`` field, falling back
    to a generic message when the body carries none.
    """
    if status_code in success:
        return
    message = None
    if isinstance(body, dict):
        message = body.get("message")
    raise AzureServiceError(message or DEFAULT_ERROR_MESSAGE, status_code, activity_id)
