"""Environment-backed settings for rate tracker."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rate_tracker.controller import DEFAULT_INTERVAL_MS
from rate_tracker.sources import DEFAULT_SOURCE


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    current_currency: str = Field(default="usd", alias="CURRENT_CURRENCY")
    native_currency: str = Field(default="ETH", alias="NATIVE_CURRENCY")
    include_usd_rate: bool = Field(default=False, alias="INCLUDE_USD_RATE")
    interval_ms: int = Field(default=DEFAULT_INTERVAL_MS, alias="POLL_INTERVAL_MS")
    source: str = Field(default=DEFAULT_SOURCE, alias="RATE_SOURCE")
    http_timeout: float = Field(default=30.0, alias="HTTP_TIMEOUT")
    debug_loggers: str | None = Field(default=None, alias="DEBUG_LOGGERS")
