"""
HTTP request utilities for the Peyflex API.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from peyflex.shared.exceptions import PeyflexException
from peyflex.shared.retry import ExponentialBackoff, RetryPolicy
from peyflex.version import __version__

if TYPE_CHECKING:
    from peyflex.types import ApiRequest, ClientConfig

# Set up logger
logger = logging.getLogger("peyflex.http")


def build_headers(token: str) -> dict[str, str]:
    """Headers sent with every request."""
    return {
        "Accept": "application/json",
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "User-Agent": f"peyflex-python/{__version__}",
    }


def _log_retry(request: httpx.Request, retry: int, delay: float, reason: str) -> None:
    logger.debug(
        "%s from %s %s, retrying in %.2f seconds (retry %d)",
        reason,
        request.method,
        request.url,
        delay,
        retry,
    )


class RetryTransport(httpx.BaseTransport):
    """Transport wrapper that re-sends requests as a ``RetryPolicy`` dictates.

    The wrapped transport does the actual I/O, so tests can hand in an
    ``httpx.MockTransport``. The final response is returned as-is, including
    a 5xx once the policy gives up; turning it into an error is the caller's job.
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._transport = transport if transport is not None else httpx.HTTPTransport()
        self.policy = policy if policy is not None else ExponentialBackoff()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        retries = 0
        while True:
            try:
                response = self._transport.handle_request(request)
            except httpx.TransportError as e:
                if not self.policy.should_retry(retries, request, None, e):
                    raise
                reason = f"Network error {e!s}"
            else:
                if not self.policy.should_retry(retries, request, response, None):
                    return response
                reason = f"Received status {response.status_code}"
                response.close()

            retries += 1
            delay = self.policy.delay(retries)
            _log_retry(request, retries, delay, reason)
            time.sleep(delay)

    def close(self) -> None:
        self._transport.close()


class AsyncRetryTransport(httpx.AsyncBaseTransport):
    """Asynchronous counterpart of :class:`RetryTransport`."""

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._transport = transport if transport is not None else httpx.AsyncHTTPTransport()
        self.policy = policy if policy is not None else ExponentialBackoff()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        retries = 0
        while True:
            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as e:
                if not self.policy.should_retry(retries, request, None, e):
                    raise
                reason = f"Network error {e!s}"
            else:
                if not self.policy.should_retry(retries, request, response, None):
                    return response
                reason = f"Received status {response.status_code}"
                await response.aclose()

            retries += 1
            await _handle_retry(request, retries, self.policy.delay(retries), reason)

    async def aclose(self) -> None:
        await self._transport.aclose()


async def _handle_retry(request: httpx.Request, retry: int, delay: float, reason: str) -> None:
    """Helper function to handle retry logging and backoff."""
    _log_retry(request, retry, delay, reason)
    await asyncio.sleep(delay)


def create_sync_client(
    config: ClientConfig,
    *,
    transport: httpx.BaseTransport | None = None,
    retry_policy: RetryPolicy | None = None,
) -> httpx.Client:
    """Create an httpx Client bound to the configured base URL and token."""
    return httpx.Client(
        base_url=config.base_url,
        timeout=config.timeout or None,
        headers=build_headers(config.token),
        transport=RetryTransport(transport, retry_policy or ExponentialBackoff(config.retries)),
        follow_redirects=True,
    )


def create_async_client(
    config: ClientConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    retry_policy: RetryPolicy | None = None,
) -> httpx.AsyncClient:
    """Create an httpx AsyncClient bound to the configured base URL and token."""
    return httpx.AsyncClient(
        base_url=config.base_url,
        timeout=config.timeout or None,
        headers=build_headers(config.token),
        transport=AsyncRetryTransport(
            transport, retry_policy or ExponentialBackoff(config.retries)
        ),
        follow_redirects=True,
    )


def decode_json(response: httpx.Response) -> Any:
    """Parse a successful response body.

    Raises:
        PeyflexException: If the body is not valid JSON.
    """
    try:
        return response.json()
    except ValueError as e:
        raise PeyflexException(
            f"Failed to decode JSON response: {e!s}",
            status_code=response.status_code,
            cause=e,
        ) from e


def make_request_sync(client: httpx.Client, request: ApiRequest) -> Any:
    """
    Send an API request synchronously and decode the reply.

    Args:
        client: Client created by :func:`create_sync_client`
        request: The request descriptor

    Returns:
        The decoded JSON body, unmodified

    Raises:
        PeyflexException: On transport failure, non-success status or bad JSON.
    """
    logger.debug("%s %s", request.method, request.path)
    try:
        response = client.request(
            request.method, request.path, params=request.params, json=request.json
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise PeyflexException.from_httpx_error(e) from e
    return decode_json(response)


async def make_request(client: httpx.AsyncClient, request: ApiRequest) -> Any:
    """
    Send an API request asynchronously and decode the reply.

    Args:
        client: Client created by :func:`create_async_client`
        request: The request descriptor

    Returns:
        The decoded JSON body, unmodified

    Raises:
        PeyflexException: On transport failure, non-success status or bad JSON.
    """
    logger.debug("%s %s", request.method, request.path)
    try:
        response = await client.request(
            request.method, request.path, params=request.params, json=request.json
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise PeyflexException.from_httpx_error(e) from e
    return decode_json(response)
