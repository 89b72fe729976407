"""
HTTP middleware for request logging and per-path CORS headers.

Provides:
- Request ID generation, bound into structlog contextvars for correlation
- Request completion logging with timing; level follows the status code
- CORS headers on every response of the event endpoints, error responses
  included, with the allowed methods specific to each path
"""

from __future__ import annotations

import time
import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request, Response

from shared.ip_utils import get_client_ip
from shared.logging import get_logger, hash_ip

log = get_logger("clicklog.request")

CallNext = Callable[[Request], Awaitable[Response]]

# path -> Access-Control-Allow-Methods
CORS_METHODS: dict[str, str] = {
    "/api/log": "POST, OPTIONS",
    "/logs": "GET, OPTIONS",
}


def generate_request_id() -> str:
    """Generate a unique request ID for correlation."""
    return f"req_{uuid.uuid4().hex[:12]}"


def cors_headers(path: str) -> dict[str, str]:
    methods = CORS_METHODS.get(path)
    if methods is None:
        return {}
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": methods,
        "Access-Control-Allow-Headers": "Content-Type",
    }


def log_request_end(request: Request, status_code: int, duration_ms: int) -> None:
    """Log the end of a request with timing and status."""
    if status_code >= 500:
        log_fn = log.error
    elif status_code >= 400:
        log_fn = log.warning
    else:
        log_fn = log.info

    log_fn(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        duration_ms=duration_ms,
    )


def setup_middleware(app: FastAPI) -> None:
    """
    Register request middleware on the FastAPI app.

    Example:
        >>> app = FastAPI()
        >>> setup_middleware(app)
    """

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next: CallNext) -> Response:
        response = await call_next(request)
        response.headers.update(cors_headers(request.url.path))
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next: CallNext) -> Response:
        start = time.perf_counter()
        request_id = generate_request_id()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            ip_hash=hash_ip(get_client_ip(request)),
        )

        response = await call_next(request)

        duration_ms = int((time.perf_counter() - start) * 1000)
        log_request_end(request, response.status_code, duration_ms)
        response.headers["X-Request-ID"] = request_id
        return response
