"""Shared retry configuration and utilities.

Retries wrap a whole request attempt in CosmosAPI, so every attempt is
re-dated and re-signed. The signing and mapping functions never retry.
"""

import logging
from typing import Callable

from tenacity import (
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from .exceptions import AzureServiceError, CosmosConnectionError, CosmosTransportError

logger = logging.getLogger("cosmos-tools")

# 408 request timeout, 429 throttled, 449 retry with, 503 service unavailable
RETRYABLE_STATUS_CODES = frozenset({408, 429, 449, 503})

RETRY_CONFIG = {
    "stop": stop_after_attempt(3),
    "wait": wait_exponential_jitter(initial=1, max=10, jitter=2),
    "reraise": True,
}


def get_retry_decorator(is_retryable: Callable[[BaseException], bool]):
    """Create a retry decorator with the shared config.

    Args:
        is_retryable: Function that takes an exception and returns True
            if the operation should be retried.

    Returns:
        A tenacity retry decorator configured with standard settings.
    """
    from tenacity import retry

    return retry(
        stop=RETRY_CONFIG["stop"],
        wait=RETRY_CONFIG["wait"],
        retry=retry_if_exception(is_retryable),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=RETRY_CONFIG["reraise"],
    )


def is_retryable_status_code(status_code: int) -> bool:
    """Check if a status code signals a transient service condition."""
    return status_code in RETRYABLE_STATUS_CODES


def is_retryable_service_error(exception: BaseException) -> bool:
    """Check if an AzureServiceError is retryable based on status code."""
    if isinstance(exception, AzureServiceError):
        return is_retryable_status_code(exception.status_code)
    return False


def is_retryable_transport_error(exception: BaseException) -> bool:
    """Check if the exception is a transport failure."""
    return isinstance(exception, CosmosTransportError)


def is_retryable_connection_error(exception: BaseException) -> bool:
    """Check if the connection failed before the request was sent."""
    return isinstance(exception, CosmosConnectionError)


def is_retryable(exception: BaseException) -> bool:
    """Retry transport failures and transient service statuses."""
    return is_retryable_transport_error(exception) or is_retryable_service_error(exception)


def is_retryable_write(exception: BaseException) -> bool:
    """Retry policy for requests that are unsafe to repeat.

    A read failure or timeout may follow a committed write, so only failures
    that happened before sending, and transient service statuses, are retried.
    """
    return is_retryable_connection_error(exception) or is_retryable_service_error(exception)
