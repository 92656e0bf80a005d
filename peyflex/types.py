from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from peyflex.settings import DEFAULT_BASE_URL, settings
from peyflex.shared.exceptions import PeyflexException
from peyflex.shared.hints import INVALID_CONFIG, TOKEN_MISSING

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST"]
MeterType = Literal["prepaid", "postpaid"]


class ClientConfig(BaseModel):
    """
    Connection settings for one client instance.

    Frozen after construction; ``base_url`` always ends with a slash so that
    relative endpoint paths join onto it without double or missing slashes.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    # 0 disables the timeout
    timeout: float = Field(default=30.0, ge=0)
    retries: int = Field(default=3, ge=0)

    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Append a trailing slash when it is missing."""
        if not v.endswith("/"):
            v += "/"
        return v

    @classmethod
    def resolve(
        cls,
        token: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
    ) -> ClientConfig:
        """Build a config from explicit arguments, falling back to settings.

        Raises:
            PeyflexException: If no token is given and none is configured, or
                if a value is out of range.
        """
        token = token or settings.api_token
        if not token:
            raise PeyflexException(
                "API token is required but not provided", hints=[TOKEN_MISSING]
            )

        try:
            return cls(
                token=token,
                base_url=base_url if base_url is not None else settings.base_url,
                timeout=timeout if timeout is not None else settings.timeout,
                retries=retries if retries is not None else settings.retries,
            )
        except ValidationError as e:
            raise PeyflexException(
                f"Invalid client configuration: {e!s}", cause=e, hints=[INVALID_CONFIG]
            ) from e


@dataclass(frozen=True)
class ApiRequest:
    """A single call against the API: verb, relative path, query and JSON body."""

    method: HttpMethod
    path: str
    params: dict[str, Any] | None = None
    json: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        # Paths are relative to the base URL
        object.__setattr__(self, "path", self.path.lstrip("/"))
