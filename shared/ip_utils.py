"""
Client IP resolution for FastAPI requests.

The resolver trusts proxy headers as-is: the service is expected to sit
behind a reverse proxy that sets them honestly. No IP syntax validation is
performed.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

UNKNOWN_IP = "unknown"


def resolve_client_ip(
    forwarded_for: Optional[str],
    real_ip: Optional[str],
    remote_addr: Optional[str],
) -> str:
    """Pick the best client IP from the raw request metadata.

    Priority order, first match wins:

    1. ``X-Forwarded-For`` — first entry of the comma-separated list, trimmed
    2. ``X-Real-IP`` — used verbatim
    3. the peer address — a trailing ``:port`` is stripped (split on the
       last colon)

    Returns:
        The resolved IP string, or ``UNKNOWN_IP`` if nothing is available.
    """
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    if real_ip:
        return real_ip

    if remote_addr:
        host, sep, _port = remote_addr.rpartition(":")
        return host if sep else remote_addr

    return UNKNOWN_IP


def get_client_ip(request: Request) -> str:
    """Extract the real client IP from a FastAPI ``Request``."""
    remote_addr: Optional[str] = None
    if request.client is not None and request.client.host:
        remote_addr = request.client.host
        if request.client.port is not None:
            remote_addr = f"{remote_addr}:{request.client.port}"

    return resolve_client_ip(
        request.headers.get("X-Forwarded-For"),
        request.headers.get("X-Real-IP"),
        remote_addr,
    )
