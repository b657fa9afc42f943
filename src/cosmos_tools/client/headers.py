"""Request header composition.

Every request carries the API version, host, date and Authorization headers.
Optional headers are added from RequestOptions; only options that are set
produce a header.
"""

import json
import logging
import math
from collections.abc import MutableMapping
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from email.utils import format_datetime
from enum import Enum

from .auth import TokenType, classify_token, generate_signature
from .exceptions import InvalidValidityPeriodError, ThroughputTooLowError
from .models import AutopilotSettings
from .paths import parse_resource_path

logger = logging.getLogger("cosmos-tools")

API_VERSION = "2018-12-31"

MIN_OFFER_THROUGHPUT = 400
MIN_RESOURCE_TOKEN_EXPIRY_SECONDS = 10
MAX_RESOURCE_TOKEN_EXPIRY_SECONDS = 18000

# Header names
X_MS_VERSION = "x-ms-version"
X_MS_DATE = "x-ms-date"
HOST = "Host"
ACCEPT = "Accept"
CONNECTION = "Connection"
AUTHORIZATION = "Authorization"
CONTENT_TYPE = "Content-Type"
INDEXING_DIRECTIVE = "x-ms-indexing-directive"
CONSISTENCY_LEVEL = "x-ms-consistency-level"
SESSION_TOKEN = "x-ms-session-token"
A_IM = "A-IM"
PARTITION_KEY_RANGE_ID = "x-ms-documentdb-partitionkeyrangeid"
ENABLE_CROSS_PARTITION = "x-ms-documentdb-query-enablecrosspartition"
IS_UPSERT = "x-ms-documentdb-is-upsert"
PARTITION_KEY = "x-ms-documentdb-partitionkey"
OFFER_THROUGHPUT = "x-ms-offer-throughput"
AUTOPILOT_SETTINGS = "x-ms-cosmos-offer-autopilot-settings"
EXPIRY_SECONDS = "x-ms-documentdb-expiry-seconds"
IS_QUERY = "x-ms-documentdb-isquery"
MAX_ITEM_COUNT = "x-ms-max-item-count"
IF_MATCH = "If-Match"

QUERY_HEADERS = {
    CONTENT_TYPE: "application/query+json",
    IS_QUERY: "true",
}
JSON_HEADERS = {CONTENT_TYPE: "application/json"}


class IndexingDirective(str, Enum):
    INCLUDE = "Include"
    EXCLUDE = "Exclude"


class ConsistencyLevel(str, Enum):
    STRONG = "Strong"
    BOUNDED = "Bounded"
    SESSION = "Session"
    EVENTUAL = "Eventual"
    CONSISTENT_PREFIX = "ConsistentPrefix"


PartitionKeyValue = int | float | Decimal | str


@dataclass(frozen=True)
class RequestOptions:
    """Optional per-request settings. Unset fields add no header."""

    indexing_directive: IndexingDirective | None = None
    consistency_level: ConsistencyLevel | None = None
    session_token: str | None = None
    change_feed: bool = False
    partition_key_range_id: str | None = None
    enable_cross_partition_query: bool = False
    upsert: bool = False
    partition_key: PartitionKeyValue | None = None
    offer_throughput: int | None = None
    autopilot_settings: AutopilotSettings | None = None
    resource_token_expiry_seconds: int | None = None
    max_item_count: int | None = None
    if_match: str | None = None


def http_date(now: datetime | None = None) -> str:
    """Format a timestamp as an RFC 7231 HTTP-date (always GMT)."""
    now = now or datetime.now(timezone.utc)
    return format_datetime(now.astimezone(timezone.utc), usegmt=True)


def format_partition_key(value: PartitionKeyValue) -> str:
    """Wrap a partition key value in a single-element JSON array.

    Strings are JSON-quoted, numbers are written as-is: ``["a"]``, ``[1]``,
    ``[1.5]``. Decimals keep their written precision (``[2.50]``).

    Raises:
        ValueError: If the value is a bool or a non-finite number
    """
    if isinstance(value, bool):
        raise ValueError("Partition key must be a string or a number, got bool")
    if isinstance(value, str):
        return json.dumps([value])
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Partition key must be a finite number, got {value}")
        return f"[{value}]"
    if not math.isfinite(value):
        raise ValueError(f"Partition key must be a finite number, got {value}")
    return json.dumps([value])


def _option_headers(options: RequestOptions) -> dict[str, str]:
    """Build the optional headers, validating throughput and token expiry."""
    headers: dict[str, str] = {}

    if options.indexing_directive is not None:
        headers[INDEXING_DIRECTIVE] = IndexingDirective(options.indexing_directive).value
    if options.consistency_level is not None:
        headers[CONSISTENCY_LEVEL] = ConsistencyLevel(options.consistency_level).value
    if options.session_token:
        headers[SESSION_TOKEN] = options.session_token
    if options.change_feed:
        headers[A_IM] = "Incremental feed"
    if options.partition_key_range_id is not None:
        headers[PARTITION_KEY_RANGE_ID] = options.partition_key_range_id
    if options.enable_cross_partition_query:
        headers[ENABLE_CROSS_PARTITION] = "true"
    if options.upsert:
        headers[IS_UPSERT] = "true"
    if options.partition_key is not None:
        headers[PARTITION_KEY] = format_partition_key(options.partition_key)

    if options.offer_throughput is not None:
        if options.offer_throughput < MIN_OFFER_THROUGHPUT:
            raise ThroughputTooLowError(options.offer_throughput, MIN_OFFER_THROUGHPUT)
        headers[OFFER_THROUGHPUT] = str(options.offer_throughput)
    if options.autopilot_settings is not None:
        headers[AUTOPILOT_SETTINGS] = json.dumps(options.autopilot_settings.to_body())

    if options.resource_token_expiry_seconds is not None:
        seconds = options.resource_token_expiry_seconds
        if not MIN_RESOURCE_TOKEN_EXPIRY_SECONDS <= seconds <= MAX_RESOURCE_TOKEN_EXPIRY_SECONDS:
            raise InvalidValidityPeriodError(
                seconds,
                MIN_RESOURCE_TOKEN_EXPIRY_SECONDS,
                MAX_RESOURCE_TOKEN_EXPIRY_SECONDS,
            )
        headers[EXPIRY_SECONDS] = str(seconds)

    if options.max_item_count is not None:
        headers[MAX_ITEM_COUNT] = str(options.max_item_count)
    if options.if_match:
        headers[IF_MATCH] = options.if_match

    return headers


def compose_headers(
    host: str,
    token: str,
    verb: str,
    path: str,
    options: RequestOptions | None = None,
    *,
    token_type: TokenType | None = None,
    now: datetime | None = None,
) -> dict[str, str]:
    """Compose all headers for a request.

    Args:
        host: Account host (e.g. "myaccount.documents.azure.com")
        token: Master key or resource token
        verb: HTTP method
        path: Request path, used to derive the signed resource type and link
        options: Optional per-request settings
        token_type: Explicit token type. Classified from the token when None.
        now: Timestamp to sign (defaults to the current UTC time)

    Returns:
        Header dictionary ready to send.

    Raises:
        ThroughputTooLowError: If options.offer_throughput is below 400
        InvalidValidityPeriodError: If the resource token expiry is out of range
        InvalidTokenTypeError: If the token cannot be used for signing
        ValueError: If the path names no resource type, or the partition
            key is not a string or finite number
    """
    date = http_date(now)
    resource = parse_resource_path(path)
    if token_type is None:
        token_type = classify_token(token)

    headers = {
        X_MS_VERSION: API_VERSION,
        HOST: host,
        ACCEPT: "*/*",
        CONNECTION: "keep-alive",
        X_MS_DATE: date,
    }
    if options is not None:
        headers.update(_option_headers(options))

    headers[AUTHORIZATION] = generate_signature(
        verb,
        resource.resource_type,
        resource.resource_id,
        token,
        token_type,
        date,
    )
    logger.debug(f"Composed {len(headers)} headers for {verb.upper()} {path}")
    return headers


def apply_headers(
    request_headers: MutableMapping[str, str],
    host: str,
    token: str,
    verb: str,
    path: str,
    options: RequestOptions | None = None,
    *,
    token_type: TokenType | None = None,
    now: datetime | None = None,
) -> None:
    """Compose headers and set them on a caller-owned header mapping.

    Arguments after request_headers are those of compose_headers. Nothing is
    written when composition fails.
    """
    request_headers.update(
        compose_headers(host, token, verb, path, options, token_type=token_type, now=now)
    )
