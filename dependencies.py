"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. The objects themselves are built once in the
app lifespan and stored on app.state.
"""

from __future__ import annotations

from fastapi import Request

from config import AppSettings
from infrastructure.event_store import EventStore
from services.event_service import EventService


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_event_store(request: Request) -> EventStore:
    """Return the shared EventStore (one lock per log file)."""
    return request.app.state.event_store


def get_event_service(request: Request) -> EventService:
    """Return the EventService wired with the shared store and geo lookup."""
    return request.app.state.event_service
