"""
Date/time helpers — framework-agnostic.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

# RFC 3339 / ISO 8601 with a literal "Z" suffix, second precision
ISO_UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now_iso(now: Optional[datetime] = None) -> str:
    """Format *now* (default: the current time) as an ISO 8601 UTC string.

    Naive datetimes are assumed to be UTC already.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime(ISO_UTC_FORMAT)
