"""
Event ingestion and retrieval.

Composes the IP resolver's output, the geolocation lookup and the event
store. HTTP concerns (methods, status codes, CORS) stay in the routes.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from errors import ValidationError
from infrastructure.event_store import EventStore
from infrastructure.geo_lookup import GeoLookupService, merge_geo
from schemas.models.event import EventRecord
from shared.datetime_utils import utc_now_iso
from shared.ip_utils import UNKNOWN_IP
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)


def parse_event(body: bytes) -> EventRecord:
    """Parse a request body into an EventRecord.

    Raises:
        ValidationError: body is not a JSON object of string fields.
    """
    try:
        return EventRecord.model_validate_json(body)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid JSON",
            details=[err["msg"] for err in e.errors(include_url=False)],
        ) from e


class EventService:
    def __init__(self, store: EventStore, geo: Optional[GeoLookupService]) -> None:
        self._store = store
        self._geo = geo

    async def ingest(self, record: EventRecord, client_ip: str) -> EventRecord:
        """Stamp, enrich and append one record. Returns what was stored.

        Raises:
            StorageError: the record could not be appended.
        """
        if not record.timestamp:
            record = record.model_copy(update={"timestamp": utc_now_iso()})

        if client_ip != UNKNOWN_IP:
            record = record.model_copy(update={"ip_address": client_ip})

        record = await self.enrich(record)
        await self._store.append(record)

        log.info(
            "event_recorded",
            link_id=record.link_id,
            ip_hash=hash_ip(record.ip_address),
            country=record.country,
        )
        return record

    async def enrich(self, record: EventRecord) -> EventRecord:
        ip_address = record.ip_address
        if self._geo is None or not ip_address or ip_address == UNKNOWN_IP:
            return record

        result = await self._geo.lookup(ip_address)
        if not result.ok:
            # already logged by the lookup; store the record unenriched
            return record
        return merge_geo(record, result.info)

    async def list_events(self) -> list[EventRecord]:
        return await self._store.read_all()

    async def export_raw(self) -> Optional[bytes]:
        return await self._store.read_raw()
