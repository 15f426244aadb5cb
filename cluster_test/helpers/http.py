"""HTTP client utilities and helpers."""

from asyncio import sleep
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from functools import wraps

from typing import Any, ParamSpec, TypeVar

import httpx

from cluster_test.helpers.constants import (
    DEFAULT_TIMEOUT,
    MAX_RETRIES,
    RETRY_BASE_DELAY,
    RETRY_MAX_DELAY,
)
from cluster_test.helpers.errors import CollaboratorError
from cluster_test.helpers.logging import get_logger


logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def retry_with_backoff(
    max_retries: int = MAX_RETRIES,
    base_delay: float = RETRY_BASE_DELAY,
    max_delay: float = RETRY_MAX_DELAY,
    *,
    retry_on: tuple[type[Exception], ...] = (httpx.HTTPError,),
    log_errors: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator to retry async functions with exponential backoff.

    Only collaborator glue (faucet funding and visibility polling) is wrapped
    with this. Scenario steps never retry.

    Args:
        max_retries: Maximum number of attempts (default: 5)
        base_delay: Initial delay in seconds (default: 1.0)
        max_delay: Maximum delay between retries (default: 60.0)
        retry_on: Exception types that trigger a retry; anything else propagates
        log_errors: Whether to log retry attempts (default: True)

    Returns:
        Decorated function that retries on the given exception types

    Example:
        ```python
        from cluster_test.helpers.http import retry_with_backoff

        @retry_with_backoff(max_retries=3, base_delay=2.0)
        async def request_gas(client: httpx.AsyncClient, url: str) -> dict:
            response = await client.post(url, json={...})
            response.raise_for_status()
            return response.json()

        # Will retry up to 3 times with delays of 2s, 4s
        ```
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            last_exception: Exception | None = None

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except httpx.TimeoutException as e:
                    if not isinstance(e, retry_on):
                        raise
                    last_exception = e
                    if log_errors and attempt < max_retries - 1:
                        logger.warning(
                            "%s timeout (attempt %d/%d)",
                            func.__name__,
                            attempt + 1,
                            max_retries,
                        )
                except retry_on as e:
                    last_exception = e
                    if log_errors and attempt < max_retries - 1:
                        logger.warning(
                            "%s error (attempt %d/%d): %s",
                            func.__name__,
                            attempt + 1,
                            max_retries,
                            e,
                        )

                # Don't sleep after the last attempt
                if attempt < max_retries - 1:
                    delay = min(base_delay * (2**attempt), max_delay)
                    await sleep(delay)

            if last_exception:
                if log_errors:
                    logger.error(
                        "%s failed after %d attempts", func.__name__, max_retries
                    )
                raise last_exception

            # Only reachable with max_retries < 1
            msg = f"{func.__name__} failed without exception"
            raise RuntimeError(msg)

        return wrapper

    return decorator


def create_http_client(
    timeout: float = DEFAULT_TIMEOUT, **kwargs: Any
) -> httpx.AsyncClient:
    """Create a configured httpx AsyncClient.

    Args:
        timeout: Default timeout in seconds (default: DEFAULT_TIMEOUT)
        **kwargs: Additional httpx.AsyncClient kwargs

    Returns:
        Configured AsyncClient instance

    Example:
        ```python
        from cluster_test.helpers.http import create_http_client

        async with create_http_client(timeout=60.0) as client:
            response = await client.post(rpc_url, json=payload)
        ```
    """
    return httpx.AsyncClient(timeout=timeout, **kwargs)


@asynccontextmanager
async def collaborator_errors(operation_name: str) -> AsyncIterator[None]:
    """Translate transport failures into ``CollaboratorError``.

    Errors that already belong to the scenario taxonomy pass through
    untouched; httpx failures and malformed payloads are logged and re-raised
    as ``CollaboratorError`` chained to the original.

    Args:
        operation_name: Description of the operation for logging

    Yields:
        None

    Example:
        ```python
        async with collaborator_errors("get balance"):
            balance = await rpc.get_balance(client, address)
        ```
    """
    try:
        yield
    except CollaboratorError:
        raise
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("%s failed: %s", operation_name, e)
        msg = f"{operation_name} failed: {e}"
        raise CollaboratorError(msg) from e


__all__ = [
    "collaborator_errors",
    "create_http_client",
    "retry_with_backoff",
]
