from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Hint:
    """Structured hint for user guidance.

    Attributes:
        title: Short title describing the hint.
        message: Main explanatory message.
        tips: Optional list of short actionable tips.
        docs_url: Optional URL for documentation.
        code: Optional machine-readable code (e.g., "TOKEN_MISSING").
        context: Optional context tags (e.g., ["auth", "billing"]).
    """

    title: str
    message: str
    tips: list[str] | None = None
    docs_url: str | None = None
    code: str | None = None
    context: list[str] | None = None


# Common, reusable hints
TOKEN_MISSING = Hint(
    title="Peyflex API token required",
    message="No API token was provided.",
    tips=[
        "Pass token=... to the client",
        "Or set PEYFLEX_API_TOKEN in your environment or ~/.peyflex/.env",
    ],
    docs_url="https://client.peyflex.com.ng",
    code="TOKEN_MISSING",
    context=["auth"],
)

TOKEN_INVALID = Hint(
    title="Peyflex API token rejected",
    message="The API rejected the bearer token.",
    tips=[
        "Check for whitespace or truncation",
        "Regenerate the token from your Peyflex dashboard",
    ],
    docs_url="https://client.peyflex.com.ng",
    code="TOKEN_INVALID",
    context=["auth"],
)

INSUFFICIENT_BALANCE = Hint(
    title="Insufficient balance",
    message="Your wallet balance does not cover this purchase.",
    tips=[
        "Check your balance with get_balance()",
        "Fund your wallet and retry",
    ],
    docs_url=None,
    code="INSUFFICIENT_BALANCE",
    context=["billing"],
)

INVALID_CONFIG = Hint(
    title="Invalid configuration",
    message="Client configuration is out of range.",
    tips=[
        "retries must be >= 0",
        "timeout must be >= 0 (0 disables it)",
    ],
    docs_url=None,
    code="INVALID_CONFIG",
    context=["config"],
)

RATE_LIMIT_HIT = Hint(
    title="Rate limit reached",
    message="Too many requests.",
    tips=[
        "Slow down request rate",
        "Add retry delay",
    ],
    docs_url=None,
    code="RATE_LIMIT",
    context=["network"],
)


def hints_for_response(
    status_code: int | None, response_json: Any | None = None
) -> list[Hint]:
    """Pick the hints that apply to a failed API response."""
    hints: list[Hint] = []
    if status_code in (401, 403):
        hints.append(TOKEN_INVALID)
    elif status_code == 429:
        hints.append(RATE_LIMIT_HIT)

    if status_code == 402 or "insufficient" in str(response_json or "").lower():
        hints.append(INSUFFICIENT_BALANCE)

    if hints:
        logger.debug("Attaching hints %s to %s response", [h.code for h in hints], status_code)
    return hints


def format_hints(hints: list[Hint] | None) -> str:
    """Render hints as plain text, one bullet per tip."""
    if not hints:
        return ""

    lines: list[str] = []
    for hint in hints:
        # Compact rendering - skip title if same as message
        if hint.title and hint.title != hint.message:
            lines.append(f"{hint.title}: {hint.message}")
        else:
            lines.append(hint.message)
        for tip in hint.tips or []:
            lines.append(f"  - {tip}")
        if hint.docs_url:
            lines.append(f"  {hint.docs_url}")
    return "\n".join(lines)
