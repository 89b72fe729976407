"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI

from config import AppSettings
from errors import register_error_handlers
from infrastructure.event_store import EventStore
from infrastructure.geo_lookup import GeoLookupService
from infrastructure.http_client import HttpClient
from middleware import setup_middleware
from routes.event_routes import router as event_router
from routes.health_routes import router as health_router
from services.event_service import EventService
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            environment=settings.env,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        http_client = HttpClient(timeout=settings.geo_lookup_timeout)
        geo = GeoLookupService(
            http_client,
            base_url=settings.geo_lookup_url,
            token=settings.ipinfo_token,
        )
        store = EventStore(settings.log_file)

        app.state.settings = settings
        app.state.http_client = http_client
        app.state.event_store = store
        app.state.event_service = EventService(store, geo)

        log.info(
            "app_started",
            log_file=str(store.path),
            geo_lookup_url=settings.geo_lookup_url,
            geo_authenticated=bool(settings.ipinfo_token),
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    setup_middleware(app)
    register_error_handlers(app)
    app.include_router(event_router)
    app.include_router(health_router)

    return app
