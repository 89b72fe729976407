"""
Centralized structured logging for clicklog.

Provides:
- setup_logging(): configure stdlib logging + structlog from AppSettings
- get_logger(): get a configured logger instance
- hash_ip(): hash client IPs for privacy in production

Production renders JSON lines, development a coloured console. Keys that
look like secrets (the geolocation token among them) are redacted.
"""

from __future__ import annotations

import hashlib
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

if TYPE_CHECKING:
    from config import AppSettings

# Sensitive fields to redact from logs
REDACTED_FIELDS = {
    "password",
    "token",
    "api_key",
    "authorization",
    "cookie",
    "secret",
}

_SENSITIVE_FRAGMENTS = ("password", "token", "secret")
_RESERVED_KEYS = ("level", "event", "timestamp", "logger")

# Flipped by setup_logging() when running in production
_hash_client_ips = False


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("event_appended", link_id="promo-42")
    """
    return structlog.get_logger(name)


def hash_ip(ip_address: Optional[str]) -> Optional[str]:
    """
    Hash IP address for privacy in production.

    In production, returns SHA-256 hash (first 16 chars).
    In development, returns the original IP for easier debugging.
    """
    if ip_address is None:
        return None
    if _hash_client_ips and ip_address:
        return hashlib.sha256(ip_address.encode()).hexdigest()[:16]
    return ip_address


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        if key in _RESERVED_KEYS:
            continue
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            fragment in lowered for fragment in _SENSITIVE_FRAGMENTS
        ):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog(log_format: str) -> None:
    """
    Configure structlog with appropriate processors for the environment.

    "json": one JSON object per line for log shippers
    anything else: pretty console formatting with colors
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str) -> None:
    """Route stdlib logging to stdout at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def setup_logging(settings: "AppSettings") -> None:
    """
    Initialize logging system for the application.

    Called once from create_app(), before any request is served.
    """
    global _hash_client_ips
    _hash_client_ips = settings.is_production

    configure_stdlib_logging(settings.logging.log_level)
    configure_structlog(settings.logging.log_format)

    get_logger(__name__).info(
        "logging_initialized",
        env=settings.env,
        log_level=settings.logging.log_level,
        log_format=settings.logging.log_format,
        sentry_enabled=bool(settings.sentry.sentry_dsn),
    )
