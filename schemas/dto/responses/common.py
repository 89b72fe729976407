"""
Common response DTOs shared across endpoints.

ErrorResponse   — standard error shape from AppError.to_dict()
StatusResponse  — POST /api/log acknowledgement
HealthResponse  — GET /health
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error JSON body produced by the AppError exception handler."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    code: str
    field: Optional[str] = None
    details: Optional[Any] = None


class StatusResponse(BaseModel):
    """Acknowledgement body returned once an event has been stored."""

    status: str = "ok"


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    checks: dict[str, str]
