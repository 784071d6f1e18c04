"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cross-field rules are validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DISPATCHER_KINDS = ("log", "http")
_EXPORTERS = ("console", "otlp", "none")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "automations"
    app_version: str = "1.0.0"
    debug: bool = False

    # Request
    tenant_header_name: str = "X-Tenant-ID"
    request_id_header: str = "X-Request-ID"

    # Automation engine
    automation_history_limit: int = 100  # executions kept per workflow (FIFO)
    automation_delay_unit_seconds: float = 60.0  # seconds per configured delay minute
    automation_recent_executions_limit: int = 10
    # Workflow validation warnings
    automation_long_delay_warning_minutes: int = 1440  # 24 hours
    automation_max_actions_warning: int = 10

    # Campaign dispatcher: "log" (no delivery) or "http" (delivery service)
    campaign_dispatcher: str = "log"
    campaign_dispatcher_url: str | None = None
    campaign_dispatcher_timeout_seconds: float = 10.0

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_automation_and_dispatch(self) -> "Settings":
        """Validate engine limits, dispatcher backend, and exporter choice."""
        if self.automation_history_limit < 1:
            raise ValueError("AUTOMATION_HISTORY_LIMIT must be at least 1")
        if self.automation_delay_unit_seconds < 0:
            raise ValueError("AUTOMATION_DELAY_UNIT_SECONDS must not be negative")
        if self.campaign_dispatcher not in _DISPATCHER_KINDS:
            raise ValueError(
                f"campaign_dispatcher must be one of {_DISPATCHER_KINDS}, "
                f"got: {self.campaign_dispatcher!r}"
            )
        if self.campaign_dispatcher == "http" and not self.campaign_dispatcher_url:
            raise ValueError(
                "CAMPAIGN_DISPATCHER_URL is required when campaign_dispatcher is 'http'."
            )
        if self.telemetry_exporter not in _EXPORTERS:
            raise ValueError(
                f"telemetry_exporter must be one of {_EXPORTERS}, "
                f"got: {self.telemetry_exporter!r}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    In tests, call get_settings.cache_clear() after changing env vars so the
    next call picks up the new values.
    """
    return Settings()
