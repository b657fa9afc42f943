"""Cosmos DB REST client.

This package provides the client library for the Cosmos DB SQL API over
plain REST. The signing and addressing layer is usable on its own:

    from cosmos_tools.client import RequestOptions, compose_headers

    headers = compose_headers(
        "myaccount.documents.azure.com",
        master_key,
        "GET",
        "/dbs/db1/colls",
        RequestOptions(consistency_level="Session"),
    )

The high-level API sends the request and maps the response:

    from cosmos_tools.client import CosmosAPI, CosmosConfig

    with CosmosAPI() as api:
        for coll in api.list_collections("db1"):
            print(coll.id)
"""

from .api import CosmosAPI
from .auth import TokenType, build_signing_payload, classify_token, generate_signature
from .config import CosmosConfig
from .exceptions import (
    AzureServiceError,
    CosmosError,
    CosmosConnectionError,
    CosmosTransportError,
    InvalidResponsePayloadError,
    InvalidTokenTypeError,
    InvalidValidityPeriodError,
    ThroughputTooLowError,
    TransportError,
)
from .headers import (
    ConsistencyLevel,
    IndexingDirective,
    RequestOptions,
    apply_headers,
    compose_headers,
)
from .http import HTTPTransport
from .models import (
    AutopilotSettings,
    Container,
    Database,
    Document,
    DocumentCollection,
    Offer,
    PartitionKeyRange,
    Permission,
    StoredProcedure,
    Trigger,
    User,
    UserDefinedFunction,
)
from .paths import ResourcePath, parse_resource_path, resource_link
from .responses import ResourceList, map_header_only, map_listing, map_single_payload
from .transport import CosmosTransport, TransportResponse

__all__ = [
    # Main API
    "CosmosAPI",
    "CosmosConfig",
    # Addressing and signing
    "ResourcePath",
    "parse_resource_path",
    "resource_link",
    "TokenType",
    "classify_token",
    "build_signing_payload",
    "generate_signature",
    "RequestOptions",
    "ConsistencyLevel",
    "IndexingDirective",
    "compose_headers",
    "apply_headers",
    # Response mapping
    "ResourceList",
    "map_single_payload",
    "map_header_only",
    "map_listing",
    # Transport
    "CosmosTransport",
    "TransportResponse",
    "HTTPTransport",
    # Records
    "AutopilotSettings",
    "Container",
    "Database",
    "Document",
    "DocumentCollection",
    "Offer",
    "PartitionKeyRange",
    "Permission",
    "StoredProcedure",
    "Trigger",
    "User",
    "UserDefinedFunction",
    # Exceptions
    "AzureServiceError",
    "CosmosError",
    "CosmosConnectionError",
    "CosmosTransportError",
    "InvalidResponsePayloadError",
    "InvalidTokenTypeError",
    "InvalidValidityPeriodError",
    "ThroughputTooLowError",
    "TransportError",
]
