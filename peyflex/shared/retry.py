"""
Retry policies for the Peyflex HTTP transport.

A policy decides, after every attempt, whether the request should be sent
again and how long to wait first. The transport in
:mod:`peyflex.shared.requests` owns the loop; policies hold no state.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx

# Failures where the server may answer next time. Bad schemes, proxy errors and
# malformed requests are also TransportErrors but never succeed on retry.
CONNECTION_ERRORS: tuple[type[httpx.TransportError], ...] = (
    httpx.NetworkError,
    httpx.TimeoutException,
)


@runtime_checkable
class RetryPolicy(Protocol):
    """Strategy consulted by the retrying transport."""

    def should_retry(
        self,
        retries: int,
        request: httpx.Request,
        response: httpx.Response | None = None,
        exception: Exception | None = None,
    ) -> bool:
        """Decide whether to retry.

        Args:
            retries: Number of retries already performed (0 after the first attempt).
            request: The request that was sent.
            response: The response, if one was received.
            exception: The transport error, if no response was received.
        """
        ...

    def delay(self, retry: int) -> float:
        """Seconds to wait before retry number ``retry`` (1-indexed)."""
        ...


class ExponentialBackoff:
    """Default policy: retry connection failures and 5xx with exponential backoff.

    Connection-level failures (network errors and timeouts) are retried
    regardless of ``max_retries`` unless ``max_connect_retries`` is set. Other
    transport errors such as an unsupported URL scheme are final. Server errors (5xx) are retried while fewer
    than ``max_retries`` retries have been made. Every other outcome is final.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_connect_retries: int | None = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_connect_retries = max_connect_retries

    def __repr__(self) -> str:
        return (
            f"ExponentialBackoff(max_retries={self.max_retries}, base_delay={self.base_delay}, "
            f"max_connect_retries={self.max_connect_retries})"
        )

    def should_retry(
        self,
        retries: int,
        request: httpx.Request,
        response: httpx.Response | None = None,
        exception: Exception | None = None,
    ) -> bool:
        if response is None and isinstance(exception, CONNECTION_ERRORS):
            if self.max_connect_retries is None:
                return True
            return retries < self.max_connect_retries

        if response is not None and response.status_code >= 500:
            return retries < self.max_retries

        return False

    def delay(self, retry: int) -> float:
        # 1s, 2s, 4s, ...
        return self.base_delay * (2 ** (retry - 1))


class NoRetry:
    """Policy that sends every request exactly once."""

    def should_retry(
        self,
        retries: int,
        request: httpx.Request,
        response: httpx.Response | None = None,
        exception: Exception | None = None,
    ) -> bool:
        return False

    def delay(self, retry: int) -> float:
        return 0.0
