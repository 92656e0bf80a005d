from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import DotEnvSettingsSource, PydanticBaseSettingsSource

DEFAULT_BASE_URL = "https://client.peyflex.com.ng/api/"


class Settings(BaseSettings):
    """
    Global settings for the Peyflex SDK.

    Values are read from the environment and used as defaults for any client
    argument the caller leaves out.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize settings source precedence to include a user-level env file.

        Precedence (highest to lowest):
        - init_settings (explicit kwargs)
        - env_settings (process environment)
        - dotenv_settings (project .env)
        - user_dotenv_settings (~/.peyflex/.env)
        - file_secret_settings
        """

        user_env_path = Path.home() / ".peyflex" / ".env"
        user_dotenv_settings = DotEnvSettingsSource(
            settings_cls,
            env_file=user_env_path,
            env_file_encoding="utf-8",
        )

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            user_dotenv_settings,
            file_secret_settings,
        )

    api_token: str | None = Field(
        default=None,
        description="Bearer token for the Peyflex API",
        validation_alias="PEYFLEX_API_TOKEN",
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL for the Peyflex API",
        validation_alias="PEYFLEX_BASE_URL",
    )

    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
        validation_alias="PEYFLEX_TIMEOUT",
    )

    retries: int = Field(
        default=3,
        description="Maximum number of retries on 5xx responses",
        validation_alias="PEYFLEX_RETRIES",
    )


# Create a singleton instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
