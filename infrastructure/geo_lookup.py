"""Best-effort IP geolocation over an ipinfo.io-compatible HTTP API.

The lookup never raises: every failure (timeout, transport error, non-200
status, malformed body) is logged and returned as a failed
``GeoLookupResult`` so the ingestion flow can branch on it and carry on
without enrichment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from infrastructure.http_client import HttpClient
from schemas.models.event import EventRecord, is_blank
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)

DEFAULT_GEO_LOOKUP_URL = "https://ipinfo.io"


class GeoInfo(BaseModel):
    """Body of a successful lookup. Only a subset is merged into records."""

    model_config = ConfigDict(extra="ignore")

    ip: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[str] = None
    loc: Optional[str] = None  # "lat,lon"


@dataclass(frozen=True)
class GeoLookupResult:
    info: Optional[GeoInfo] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.info is not None

    @classmethod
    def success(cls, info: GeoInfo) -> "GeoLookupResult":
        return cls(info=info)

    @classmethod
    def failure(cls, error: str) -> "GeoLookupResult":
        return cls(error=error)


class GeoLookupService:
    def __init__(
        self,
        http_client: HttpClient,
        base_url: str = DEFAULT_GEO_LOOKUP_URL,
        token: str = "",
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._token = token

    def build_url(self, ip_address: str) -> str:
        url = f"{self._base_url}/{quote(ip_address, safe='')}/json"
        if self._token:
            url += f"?token={quote(self._token, safe='')}"
        return url

    async def lookup(self, ip_address: str) -> GeoLookupResult:
        try:
            response = await self._http.get(self.build_url(ip_address))
        except httpx.TimeoutException:
            return self._failed(ip_address, "timeout")
        except httpx.HTTPError as e:
            return self._failed(ip_address, f"{type(e).__name__}: {e}")

        if response.status_code != 200:
            return self._failed(
                ip_address, f"lookup service returned status {response.status_code}"
            )

        try:
            info = GeoInfo.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            return self._failed(ip_address, f"malformed response: {type(e).__name__}")

        return GeoLookupResult.success(info)

    def _failed(self, ip_address: str, reason: str) -> GeoLookupResult:
        log.warning("geo_lookup_failed", ip_hash=hash_ip(ip_address), reason=reason)
        return GeoLookupResult.failure(reason)


def merge_geo(record: EventRecord, info: GeoInfo) -> EventRecord:
    """Fill blank geolocation fields of *record* from *info*.

    Client-supplied values win; only fields that are empty or "unknown" are
    replaced. ``countryCode`` is filled from the same ``country`` value the
    lookup returns (ipinfo.io reports the two-letter code there), matching
    what existing log files contain.
    """
    updates: dict[str, Optional[str]] = {}
    if is_blank(record.country):
        updates["country"] = info.country
    if is_blank(record.country_code):
        updates["country_code"] = info.country
    if is_blank(record.region):
        updates["region"] = info.region
    if is_blank(record.city):
        updates["city"] = info.city
    return record.model_copy(update=updates)
