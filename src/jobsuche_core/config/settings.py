"""Application settings using pydantic-settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jobsuche_core.constants import API_MAX_PAGE_SIZE, DEFAULT_API_KEY, DEFAULT_API_URL


class Settings(BaseSettings):
    """Central configuration for jobsuche-mcp."""

    model_config = SettingsConfigDict(env_prefix="JOBSUCHE_", env_file=".env")

    # --- Upstream API ---
    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="Jobsuche API base URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="API key sent as X-API-Key (public default key if unset)",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout per upstream request in seconds",
    )
    retry_max: int = Field(
        default=3,
        description="Maximum attempts per upstream request",
    )
    retry_wait_min: float = Field(
        default=0.5,
        description="Minimum retry wait in seconds",
    )
    retry_wait_max: float = Field(
        default=5.0,
        description="Maximum retry wait in seconds",
    )

    # --- Search bounds ---
    default_page_size: int = Field(
        default=25,
        description="Page size used when the caller does not give one",
    )
    max_page_size: int = Field(
        default=API_MAX_PAGE_SIZE,
        description="Largest page size a caller may request",
    )
    max_published_since_days: int = Field(
        default=100,
        description="Largest recency window in days",
    )

    # --- Orchestration ---
    detail_interval_ms: int = Field(
        default=100,
        description="Minimum gap between detail fetches in milliseconds",
    )
    search_interval_ms: int = Field(
        default=200,
        description="Minimum gap between searches of one batch in milliseconds",
    )
    default_max_details: int = Field(
        default=5,
        description="Details fetched per expanded search when not specified",
    )
    default_batch_max_details: int = Field(
        default=3,
        description="Details fetched per batch search when not specified",
    )
    max_details_cap: int = Field(
        default=10,
        description="Hard cap on details fetched per search",
    )
    max_batch_searches: int = Field(
        default=5,
        description="Maximum searches run by one batch call",
    )

    # --- Observability ---
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer: 'console' for humans, 'json' for collectors",
    )
    otel_exporter: Literal["none", "console", "otlp"] = Field(
        default="none",
        description="OpenTelemetry span exporter",
    )
    otel_endpoint: str = Field(
        default="http://localhost:4317",
        description="OTLP collector endpoint",
    )
    otel_service_name: str = Field(
        default="jobsuche-mcp",
        description="Service name reported on spans",
    )

    @property
    def effective_api_key(self) -> str:
        """Return the configured API key or the public default."""
        if self.api_key is not None:
            return self.api_key.get_secret_value()
        return DEFAULT_API_KEY

    @model_validator(mode="after")
    def validate_api_url(self) -> Settings:
        """Require a non-empty http(s) base URL."""
        if not self.api_url:
            msg = "api_url cannot be empty"
            raise ValueError(msg)
        if not self.api_url.startswith(("http://", "https://")):
            msg = "api_url must start with http:// or https://"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_page_sizes(self) -> Settings:
        """Keep page sizes positive and within the upstream limit."""
        if self.default_page_size <= 0:
            msg = "default_page_size must be greater than 0"
            raise ValueError(msg)
        if self.max_page_size <= 0:
            msg = "max_page_size must be greater than 0"
            raise ValueError(msg)
        if self.max_page_size > API_MAX_PAGE_SIZE:
            msg = f"max_page_size cannot exceed {API_MAX_PAGE_SIZE} (API limitation)"
            raise ValueError(msg)
        if self.default_page_size > self.max_page_size:
            msg = (
                f"default_page_size ({self.default_page_size}) cannot exceed "
                f"max_page_size ({self.max_page_size})"
            )
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_orchestration(self) -> Settings:
        """Keep detail defaults under the cap and intervals non-negative."""
        if self.max_details_cap < 0:
            msg = "max_details_cap cannot be negative"
            raise ValueError(msg)
        for name in ("default_max_details", "default_batch_max_details"):
            value = getattr(self, name)
            if not 0 <= value <= self.max_details_cap:
                msg = f"{name} ({value}) must be between 0 and max_details_cap ({self.max_details_cap})"
                raise ValueError(msg)
        if self.detail_interval_ms < 0 or self.search_interval_ms < 0:
            msg = "pacing intervals cannot be negative"
            raise ValueError(msg)
        if self.max_batch_searches <= 0:
            msg = "max_batch_searches must be greater than 0"
            raise ValueError(msg)
        return self
