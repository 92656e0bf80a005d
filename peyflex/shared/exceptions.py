"""Peyflex SDK exception.

Every failure that crosses the client boundary is raised as a single
``PeyflexException``: JSON decode failures, transport errors the retry policy
gave up on, and non-success HTTP responses. Callers that need to tell them
apart inspect ``status_code``, ``response_json`` or ``cause``.

Example:
    try:
        client.purchase_airtime("mtn", "08012345678", 50000)
    except PeyflexException as e:
        print(e.status_code, e.message)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from peyflex.shared.hints import Hint, format_hints, hints_for_response

if TYPE_CHECKING:
    from typing import Self

logger = logging.getLogger(__name__)

REQUEST_FAILED_PREFIX = "API Request Failed: "


class PeyflexException(Exception):
    """Base (and only) exception raised by the Peyflex client.

    Attributes:
        message: Human-readable description of the failure.
        status_code: HTTP status of the failed response, if one was received.
        response_json: Decoded error body, if it was valid JSON.
        cause: The underlying exception, also chained as ``__cause__``.
        hints: Structured guidance for the user.
    """

    def __init__(
        self,
        message: str = "",
        status_code: int | None = None,
        response_json: Any | None = None,
        *,
        cause: BaseException | None = None,
        hints: list[Hint] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_json = response_json
        self.cause = cause
        self.hints: list[Hint] = hints if hints is not None else []

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Return the message followed by status and rendered hints."""
        parts = [self.message]
        if self.status_code:
            parts.append(f"Status: {self.status_code}")
        rendered = format_hints(self.hints)
        if rendered:
            parts.append(rendered)
        return "\n".join(parts)

    @staticmethod
    def extract_message(response_json: Any, fallback: str) -> str:
        """Pick the error text out of a decoded error body.

        Preference order: ``message`` field, then ``error`` field, then
        ``fallback`` (the underlying exception text).
        """
        if isinstance(response_json, dict):
            for key in ("message", "error"):
                value = response_json.get(key)
                if value is not None:
                    return str(value)
        return fallback

    @classmethod
    def from_httpx_error(cls, error: httpx.HTTPError) -> Self:
        """Translate an httpx failure into a ``PeyflexException``.

        Args:
            error: The httpx error. ``HTTPStatusError`` carries a response whose
                body is consulted for a better message; transport errors do not.

        Returns:
            A PeyflexException with the original error as ``cause``.
        """
        status_code: int | None = None
        response_json: Any | None = None
        fallback = str(error) or type(error).__name__

        if isinstance(error, httpx.HTTPStatusError):
            response = error.response
            status_code = response.status_code
            try:
                response_json = response.json()
            except ValueError:
                response_json = None

            logger.error(
                "HTTP error from Peyflex API | URL: %s | Status: %s | Response: %s%s",
                response.url,
                status_code,
                response.text[:500],
                "..." if len(response.text) > 500 else "",
            )
        else:
            logger.error("Transport error talking to Peyflex API: %s", fallback)

        message = cls.extract_message(response_json, fallback)
        return cls(
            REQUEST_FAILED_PREFIX + message,
            status_code=status_code,
            response_json=response_json,
            cause=error,
            hints=hints_for_response(status_code, response_json),
        )
