"""
Health check endpoint.

GET /health — checks that the event log can be written.
Rules:
- Log file present → "ok".
- Log file not created yet → "empty" (still healthy; the first append creates it).
- Log directory not writable → "degraded" (200) — ingestion will fail with 500s
  but retrieval of existing records may still work.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from fastapi import APIRouter, Depends

from dependencies import get_event_store
from infrastructure.event_store import EventStore
from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])


def _check_log_file(path: Path) -> str:
    if path.exists():
        return "ok" if os.access(path, os.W_OK) else "not_writable"
    directory = path.parent
    while not directory.exists() and directory != directory.parent:
        directory = directory.parent
    return "empty" if os.access(directory, os.W_OK) else "not_writable"


@router.get("/health", response_model=HealthResponse)
async def health_check(
    store: EventStore = Depends(get_event_store),
) -> HealthResponse:
    log_file = await asyncio.to_thread(_check_log_file, store.path.resolve())
    overall = "degraded" if log_file == "not_writable" else "healthy"
    return HealthResponse(status=overall, checks={"log_file": log_file})
