"""Authorization header generation for Cosmos DB requests.

Master keys sign every request with HMAC-SHA256 over a canonical payload.
Resource tokens are issued pre-signed by the service and are sent as-is.
"""

import base64
import binascii
import hashlib
import hmac
import logging
from enum import Enum
from urllib.parse import quote_plus

from .exceptions import InvalidTokenTypeError

logger = logging.getLogger("cosmos-tools")

RESOURCE_TOKEN_MARKER = "type=resource"
AUTH_TOKEN_VERSION = "1.0"


class TokenType(str, Enum):
    """Kind of credential used to authorize a request."""

    MASTER = "master"
    RESOURCE = "resource"


def classify_token(token: str) -> TokenType:
    """Classify a credential as a resource token or a master key.

    Resource tokens issued by the service carry the ``type=resource`` marker.
    Anything else is treated as a master key. This is a substring heuristic,
    not format validation: configure the token type explicitly when the key
    source is known.
    """
    if RESOURCE_TOKEN_MARKER in token:
        return TokenType.RESOURCE
    return TokenType.MASTER


def build_signing_payload(verb: str, resource_type: str, resource_id: str, date: str) -> str:
    """Build the five-line string the service expects to be signed.

    Verb, resource type and date are lowercased. The resource id is kept as
    given since resource links are case-sensitive.
    """
    return f"{verb.lower()}\n{resource_type.lower()}\n{resource_id}\n{date.lower()}\n\n"


def generate_signature(
    verb: str,
    resource_type: str,
    resource_id: str,
    token: str,
    token_type: TokenType,
    date: str,
) -> str:
    """Produce the Authorization header value for a request.

    Args:
        verb: HTTP method (any case)
        resource_type: Resource type from the request path (e.g. "docs")
        resource_id: Resource link from the request path (e.g. "dbs/db1/colls/c1")
        token: Master key (base64) or resource token
        token_type: How to interpret ``token``
        date: The value sent in the x-ms-date header

    Returns:
        URL-encoded authorization string.

    Raises:
        InvalidTokenTypeError: If token_type is not a known TokenType, or a
            master key is not valid base64.
    """
    if token_type == TokenType.RESOURCE:
        return quote_plus(token, safe="")

    if token_type != TokenType.MASTER:
        raise InvalidTokenTypeError()

    payload = build_signing_payload(verb, resource_type, resource_id, date)
    try:
        key = base64.b64decode(token, validate=True)
    except binascii.Error as e:
        raise InvalidTokenTypeError(f"Master key is not valid base64: {e}") from e

    digest = hmac.new(key, payload.encode("utf-8"), hashlib.sha256).digest()
    signature = base64.b64encode(digest).decode("utf-8")
    logger.debug(f"Signed {verb.upper()} {resource_type} '{resource_id}'")

    return quote_plus(f"type=master&ver={AUTH_TOKEN_VERSION}&sig={signature}", safe="")
