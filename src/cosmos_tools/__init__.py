"""Cosmos Tools - REST client library and CLI for Azure Cosmos DB."""

from cosmos_tools.client import CosmosAPI as CosmosClient
from cosmos_tools.client.config import CosmosConfig
from cosmos_tools.client.exceptions import (
    AzureServiceError,
    CosmosError,
    CosmosConnectionError,
    CosmosTransportError,
    InvalidResponsePayloadError,
    InvalidTokenTypeError,
    InvalidValidityPeriodError,
    ThroughputTooLowError,
)

try:
    from importlib.metadata import version
    __version__ = version("cosmos-tools")
except Exception:
    __version__ = "0.1.0"  # Fallback for development

__all__ = [
    "AzureServiceError",
    "CosmosClient",
    "CosmosConfig",
    "CosmosError",
    "CosmosConnectionError",
    "CosmosTransportError",
    "InvalidResponsePayloadError",
    "InvalidTokenTypeError",
    "InvalidValidityPeriodError",
    "ThroughputTooLowError",
    "__version__",
]
