"""Mapping of service responses onto typed results.

Three response protocols are used by the REST API:

Single payload:
    Create, read and replace return the resource body with 200 or 201.

Header only:
    Delete and similar calls succeed with 200 or 204 and no useful body.

Listing:
    Feeds return an envelope holding the resources under a key named after
    the resource type, e.g. ``{"_rid": "", "Databases": [...], "_count": 1}``.
"""

import logging
from collections.abc import Iterator, Sequence
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from .exceptions import InvalidResponsePayloadError, raise_for_status
from .models import (
    CosmosResource,
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
from .transport import TransportResponse

logger = logging.getLogger("cosmos-tools")

T = TypeVar("T", bound=CosmosResource)

SINGLE_PAYLOAD_SUCCESS = (200, 201)
HEADER_ONLY_SUCCESS = (200, 204)
LISTING_SUCCESS = (200,)

# Checked in order; the first key present in the envelope wins.
LISTING_SHAPES: tuple[tuple[str, type[CosmosResource]], ...] = (
    ("Databases", Database),
    ("DocumentCollections", DocumentCollection),
    ("Documents", Document),
    ("StoredProcedures", StoredProcedure),
    ("UserDefinedFunctions", UserDefinedFunction),
    ("Triggers", Trigger),
    ("Users", User),
    ("Permissions", Permission),
    ("PartitionKeyRanges", PartitionKeyRange),
    ("Offers", Offer),
)


class ResourceList(Sequence, Generic[T]):
    """Immutable, finite sequence of typed resources from a listing.

    Items are materialized once. Every iteration starts a fresh pass over
    the same items.
    """

    def __init__(self, items, resource_key: str, count: int | None = None):
        self._items: tuple[T, ...] = tuple(items)
        self.resource_key = resource_key
        self.count = len(self._items) if count is None else count

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResourceList):
            return self.resource_key == other.resource_key and self._items == other._items
        return NotImplemented

    def __repr__(self) -> str:
        return f"ResourceList({self.resource_key}, {len(self._items)} items)"


def map_single_payload(response: TransportResponse) -> dict[str, Any]:
    """Return the body of a create/read/replace response.

    Raises:
        AzureServiceError: If the status is not 200 or 201
    """
    raise_for_status(response.status_code, response.body, SINGLE_PAYLOAD_SUCCESS, response.activity_id)
    return response.body


def map_header_only(response: TransportResponse) -> None:
    """Check a response that carries no payload on success.

    Raises:
        AzureServiceError: If the status is not 200 or 204. The message comes
            from the body's ``message`` field, or a generic message if absent.
    """
    raise_for_status(response.status_code, response.body, HEADER_ONLY_SUCCESS, response.activity_id)


def _validate(model: type[T], data: Any) -> T:
    """Validate one resource, reporting failures as a payload error."""
    try:
        return model.model_validate(data)
    except (ValidationError, TypeError) as e:
        raise InvalidResponsePayloadError(f"Malformed {model.__name__} in response: {e}") from e


def parse_listing(body: dict[str, Any]) -> ResourceList:
    """Convert a listing envelope into a ResourceList.

    Raises:
        InvalidResponsePayloadError: If none of the known listing keys is
            present, or the listed items are not valid resources
    """
    if not isinstance(body, dict):
        raise InvalidResponsePayloadError(f"Expected a JSON object, got {type(body).__name__}")

    for key, model in LISTING_SHAPES:
        if key in body:
            if not isinstance(body[key], list):
                raise InvalidResponsePayloadError(
                    f"Expected a list under {key!r}, got {type(body[key]).__name__}"
                )
            items = [_validate(model, item) for item in body[key]]
            logger.debug(f"Mapped {len(items)} {key}")
            return ResourceList(items, key, body.get("_count"))

    raise InvalidResponsePayloadError(
        f"Response contains none of the listing keys: {', '.join(k for k, _ in LISTING_SHAPES)}"
    )


def map_listing(response: TransportResponse) -> ResourceList:
    """Check a listing response and convert it into a ResourceList.

    Raises:
        AzureServiceError: If the status is not 200
        InvalidResponsePayloadError: If the envelope holds no known listing key
    """
    raise_for_status(response.status_code, response.body, LISTING_SUCCESS, response.activity_id)
    return parse_listing(response.body)


def map_resource(response: TransportResponse, model: type[T]) -> T:
    """Map a single-payload response onto a typed record.

    Raises:
        AzureServiceError: If the status is not 200 or 201
        InvalidResponsePayloadError: If the body is not a valid record
    """
    return _validate(model, map_single_payload(response))
