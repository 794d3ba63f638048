"""Configuration management."""

import logging
from functools import cache

from pydantic import ConfigDict, Field, ValidationError, computed_field
from pydantic_settings import BaseSettings

from .consts import APPS_URL_PATH, BASE_URL_TEMPLATE, QUERY_URL_PATH, TOKEN_URL_PATH
from .exceptions import ConfigError


class Config(BaseSettings):
    """Configuration with computed API endpoints."""

    model_config = ConfigDict(
        env_prefix="PIWIK_", case_sensitive=False, extra="ignore"
    )
    account: str = Field(
        ...,
        min_length=1,
        description="Piwik PRO account subdomain (https://<account>.piwik.pro)",
    )
    client_id: str | None = Field(
        default=None, description="OAuth2 client id for the client-credentials grant"
    )
    client_secret: str | None = Field(
        default=None,
        repr=False,
        description="OAuth2 client secret for the client-credentials grant",
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    timeout_seconds: int = Field(
        default=30, gt=0, le=300, description="HTTP request timeout in seconds"
    )

    @computed_field
    @property
    def base_url(self) -> str:
        """Root URL of the Piwik PRO account."""
        return BASE_URL_TEMPLATE.format(account=self.account)

    @computed_field
    @property
    def token_url(self) -> str:
        """URL for fetching access tokens."""
        return f"{self.base_url}{TOKEN_URL_PATH}"

    @computed_field
    @property
    def query_url(self) -> str:
        """URL for analytics queries."""
        return f"{self.base_url}{QUERY_URL_PATH}"

    @computed_field
    @property
    def apps_url(self) -> str:
        """URL for listing sites and apps."""
        return f"{self.base_url}{APPS_URL_PATH}"

    @property
    def has_credentials(self) -> bool:
        """Whether both client id and secret are set."""
        return bool(self.client_id and self.client_secret)


@cache
def get_config() -> Config:
    """Get a cached Config instance.

    Raises:
        ConfigError: If the environment does not hold a valid configuration.
    """
    try:
        return Config()
    except ValidationError as e:
        failed = [(_env_var(err["loc"]), err) for err in e.errors()]
        missing = [var for var, err in failed if err["type"] == "missing"]
        if missing:
            message = f"{', '.join(missing)} environment variable is required"
        else:
            invalid = ', '.join(dict.fromkeys(var for var, _ in failed))
            message = f"Invalid Piwik MCP configuration: {invalid}"

        suggestions = []
        if any(var == "PIWIK_ACCOUNT" for var, _ in failed):
            suggestions.append("Set PIWIK_ACCOUNT to your Piwik PRO account subdomain")
        raise ConfigError(
            message,
            errors=[f"{var}: {err['msg']}" for var, err in failed],
            suggestions=suggestions,
        ) from e


def _env_var(loc: tuple) -> str:
    """Environment variable name for a pydantic error location."""
    return f"PIWIK_{'_'.join(str(part) for part in loc).upper()}"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure logging for the entire application.

    Logs go to stderr; stdout carries the stdio transport.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # Override any existing configuration
    )
    return logging.getLogger("piwik-mcp")
