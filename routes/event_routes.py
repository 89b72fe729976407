"""
Event ingestion and retrieval endpoints.

POST    /api/log       — record one event (201 {"status": "ok"})
GET     /logs          — every stored event, in append order
GET     /api/logs/raw  — download the log file as-is
OPTIONS /api/log, /logs — CORS preflight, 200 with an empty body

Any other method on these paths is answered with 405 by the router. CORS
headers are added to every response by middleware.add_cors_headers.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from config import AppSettings
from dependencies import get_event_service, get_settings
from errors import NotFoundError
from schemas.dto.responses.common import ErrorResponse, StatusResponse
from services.event_service import EventService, parse_event
from shared.ip_utils import get_client_ip

router = APIRouter(tags=["events"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.options("/api/log", include_in_schema=False)
@router.options("/logs", include_in_schema=False)
async def preflight() -> Response:
    return Response(status_code=200)


@router.post(
    "/api/log",
    status_code=201,
    response_model=StatusResponse,
    responses=_ERROR_RESPONSES,
)
async def ingest_event(
    request: Request,
    service: EventService = Depends(get_event_service),
) -> StatusResponse:
    record = parse_event(await request.body())
    await service.ingest(record, get_client_ip(request))
    return StatusResponse(status="ok")


@router.get("/logs", responses=_ERROR_RESPONSES)
async def list_events(
    service: EventService = Depends(get_event_service),
) -> JSONResponse:
    records = await service.list_events()
    return JSONResponse(content=[record.to_log_dict() for record in records])


@router.get("/api/logs/raw", responses={404: {"model": ErrorResponse}})
async def download_raw_log(
    service: EventService = Depends(get_event_service),
    settings: AppSettings = Depends(get_settings),
) -> Response:
    data = await service.export_raw()
    if data is None:
        raise NotFoundError("Log file not found")
    filename = Path(settings.log_file).name
    return Response(
        content=data,
        media_type="application/x-ndjson",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
