"""
Event record model.

One line of the append-only log file. JSON keys are camelCase; Python
attributes are snake_case (``link_id`` <-> ``linkId``).

Only ``linkId`` and ``timestamp`` are always written. Every other field is
omitted from the stored line when empty, so readers must tolerate records
that lack any of them.
"""

from __future__ import annotations

import json
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# Marker meaning "no real value available"; treated like an empty field
UNKNOWN = "unknown"

_ALWAYS_WRITTEN = ("linkId", "timestamp")


class EventRecord(BaseModel):
    """A single client-reported click/visit telemetry entry."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    link_id: str = ""
    timestamp: str = ""

    # Server-assigned
    ip_address: Optional[str] = None

    # Geolocation — filled server-side only when missing or "unknown"
    country: Optional[str] = None
    country_code: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None

    # Client passthrough, never modified server-side
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    screen_resolution: Optional[str] = None
    language: Optional[str] = None

    @field_validator("link_id", "timestamp", mode="before")
    @classmethod
    def _null_as_empty(cls, v: object) -> object:
        return "" if v is None else v

    def to_log_dict(self) -> dict[str, str]:
        """Return the JSON-ready dict: camelCase keys, empty fields dropped."""
        data = self.model_dump(by_alias=True)
        return {
            key: value
            for key, value in data.items()
            if key in _ALWAYS_WRITTEN or value
        }

    def to_log_line(self) -> str:
        """Serialize to a single compact JSON line (no trailing newline)."""
        return json.dumps(
            self.to_log_dict(), ensure_ascii=False, separators=(",", ":")
        )


def is_blank(value: Optional[str]) -> bool:
    """True when *value* carries no real information ("" / None / "unknown")."""
    return not value or value == UNKNOWN
