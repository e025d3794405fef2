# phraseapp_client/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_BASE_URL, DEFAULT_USER_AGENT


class ClientSettings(BaseSettings):
    """
    User-configurable settings for the PhraseApp client, loaded from
    environment variables (prefixed with 'PHRASEAPP_') or a .env file.

    Covers transport behaviour (timeouts, retries, backoff), credentials and
    the defaults applied to paginated traversals.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "secrets.env"),
        env_file_encoding="utf-8",
        env_prefix="PHRASEAPP_",
        extra="ignore",
        case_sensitive=False,
    )

    # --- Connection Settings ---
    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Base URL of the API (with version)"
    )
    access_token: str | None = Field(
        default=None, description="Personal access token sent as 'token <value>'"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header for requests",
    )
    request_timeout: float = Field(
        default=30.0, description="Default request timeout in seconds"
    )

    # --- Retry Settings ---
    max_retries: int = Field(
        default=3, ge=0, description="Maximum number of retries for failed requests"
    )
    backoff_factor: float = Field(
        default=0.5, ge=0, description="Backoff factor for retries (seconds)"
    )
    max_backoff: float = Field(
        default=30.0, ge=0, description="Upper bound for a single backoff wait"
    )
    respect_retry_after: bool = Field(
        default=True,
        description="Wait for the server's Retry-After hint when rate limited",
    )
    max_retry_after: float = Field(
        default=60.0,
        ge=0,
        description="Upper bound in seconds for a Retry-After wait",
    )

    # --- Pagination Settings ---
    rewrite_next_path: bool = Field(
        default=False,
        description=(
            "Replace the path of followed 'next' links with the path the "
            "stream started on, keeping the link's query string"
        ),
    )
    max_pages: int | None = Field(
        default=None,
        ge=1,
        description="Abort a traversal after this many pages (None for no limit)",
    )


@lru_cache
def get_settings() -> ClientSettings:
    """
    Provides access to the client settings.

    Settings are loaded from environment variables or .env/secrets.env files.
    The instance is cached for performance.

    Returns:
        ClientSettings: The settings instance.
    """
    return ClientSettings()
