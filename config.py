"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file) once at
process entry. Components receive the values they need through app.state
and dependency injection; nothing below the app factory reads the
environment directly.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_name: str = "clicklog"
    host: str = "0.0.0.0"
    port: int = 3002

    # Append-only JSON Lines file, relative to the working directory
    log_file: str = "logs.json"

    # External geolocation lookup (ipinfo.io compatible)
    geo_lookup_url: str = "https://ipinfo.io"
    geo_lookup_timeout: float = 5.0
    ipinfo_token: str = ""

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
