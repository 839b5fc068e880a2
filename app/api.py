"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from app.schemas import (
    AddReadingResponse,
    IngestionErrorResponse,
    QueryErrorResponse,
    ReadingsResponse,
)
from models.records import ReadingFilter
from services.readings import IngestionError, MissingFieldError, ReadingService
from storage.sql_gateway import StorageError

logger = logging.getLogger(__name__)

ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]
CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

router = APIRouter()


def get_reading_service(request: Request) -> ReadingService:
    return ReadingService(request.app.state.gateway)


@router.post(
    "/op/add",
    summary="Record a reading. Requires the shared secret header.",
    response_model=AddReadingResponse,
)
async def add_reading(
    request: Request,
    service: ReadingService = Depends(get_reading_service),
) -> Response:
    body = await request.body()
    try:
        await run_in_threadpool(service.add, body)
    except MissingFieldError:
        return PlainTextResponse(
            "Bad Request: Missing room_id or temperature",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except IngestionError:
        return JSONResponse(
            IngestionErrorResponse().model_dump(),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return JSONResponse(AddReadingResponse().model_dump())


@router.api_route(
    "/temp",
    methods=ANY_METHOD,
    summary="Readings for a room and/or time window, oldest first.",
    response_model=ReadingsResponse,
)
async def query_readings(
    room_id: Optional[str] = Query(None),
    start_time: Optional[str] = Query(None, description="ISO-8601 UTC, inclusive."),
    end_time: Optional[str] = Query(None, description="ISO-8601 UTC, exclusive."),
    service: ReadingService = Depends(get_reading_service),
) -> Response:
    filters = ReadingFilter(room_id=room_id, start_time=start_time, end_time=end_time)
    try:
        readings = await run_in_threadpool(service.query, filters)
    except (StorageError, ValueError) as exc:
        logger.error("Reading query failed", extra={"path": "/temp", "reason": str(exc)})
        return JSONResponse(
            QueryErrorResponse(details=str(exc)).model_dump(),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers=CORS_HEADERS,
        )
    payload = ReadingsResponse(data=readings)
    return JSONResponse(payload.model_dump(), headers=CORS_HEADERS)


@router.api_route("/rooms", methods=ANY_METHOD, summary="All known rooms.")
async def list_rooms(
    service: ReadingService = Depends(get_reading_service),
) -> Response:
    try:
        rooms = await run_in_threadpool(service.list_rooms)
    except (StorageError, ValueError) as exc:
        logger.error("Room listing failed", extra={"path": "/rooms", "reason": str(exc)})
        return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse([room.model_dump() for room in rooms])
