"""Ingestion, query and room listing over the storage gateway."""

from __future__ import annotations

import json
import logging
import math
from enum import Enum
from typing import Any, List, Mapping

from app.schemas import ReadingRecord, RoomRecord
from models.records import NewReading, ReadingFilter
from services.query_builder import build_reading_query
from storage.sql_gateway import SqlGateway, StorageError

logger = logging.getLogger(__name__)

INSERT_READING_SQL = "INSERT INTO temperature (room_id, temperature, humidity) VALUES (?, ?, ?)"
SELECT_ROOMS_SQL = "SELECT id, name FROM rooms"


class IngestionFailure(str, Enum):
    """Why an ingestion attempt was refused."""

    missing_field = "missing_field"
    invalid_payload = "invalid_payload"
    storage = "storage"


class IngestionError(ValueError):

    def __init__(self, kind: IngestionFailure, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class MissingFieldError(IngestionError):

    def __init__(self) -> None:
        super().__init__(IngestionFailure.missing_field, "Missing room_id or temperature")


def _coerce_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise IngestionError(IngestionFailure.invalid_payload, f"{name} is not numeric")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise IngestionError(
            IngestionFailure.invalid_payload, f"{name} is not numeric"
        ) from exc
    if not math.isfinite(parsed):
        raise IngestionError(IngestionFailure.invalid_payload, f"{name} is not finite")
    return parsed


def parse_reading(payload: Any) -> NewReading:
    """Validate a decoded request body into a reading.

    ``room_id`` is checked for truthiness, so ``0`` counts as missing, while
    ``temperature`` only has to be present as a key. A ``humidity`` that is
    absent or null is stored as NULL.
    """
    if not isinstance(payload, Mapping):
        raise IngestionError(IngestionFailure.invalid_payload, "Body is not a JSON object")

    room_id = payload.get("room_id")
    if not room_id or "temperature" not in payload:
        raise MissingFieldError()

    temperature = _coerce_float("temperature", payload["temperature"])
    humidity = payload.get("humidity")
    if humidity is not None:
        humidity = _coerce_float("humidity", humidity)

    return NewReading(room_id=room_id, temperature=temperature, humidity=humidity)


class ReadingService:
    """Stateless handlers; one storage statement per call."""

    def __init__(self, gateway: SqlGateway) -> None:
        self.gateway = gateway

    def add(self, body: bytes) -> None:
        try:
            payload = json.loads(body or b"null")
        except ValueError as exc:
            self._log_rejection(IngestionFailure.invalid_payload, str(exc))
            raise IngestionError(IngestionFailure.invalid_payload, "Invalid JSON") from exc

        try:
            reading = parse_reading(payload)
        except IngestionError as exc:
            self._log_rejection(exc.kind, str(exc))
            raise

        try:
            self.gateway.prepare(INSERT_READING_SQL).bind(
                reading.room_id, reading.temperature, reading.humidity
            ).run()
        except StorageError as exc:
            self._log_rejection(IngestionFailure.storage, str(exc), room_id=reading.room_id)
            raise IngestionError(IngestionFailure.storage, str(exc)) from exc

        logger.info("Stored reading", extra={"room_id": reading.room_id})

    def query(self, filters: ReadingFilter) -> List[ReadingRecord]:
        built = build_reading_query(filters)
        rows = self.gateway.prepare(built.sql).bind(*built.params).all()
        logger.debug(
            "Queried readings",
            extra={"room_id": filters.room_id, "row_count": len(rows)},
        )
        return [ReadingRecord.model_validate(row) for row in rows]

    def list_rooms(self) -> List[RoomRecord]:
        rows = self.gateway.prepare(SELECT_ROOMS_SQL).all()
        return [RoomRecord.model_validate(row) for row in rows]

    @staticmethod
    def _log_rejection(kind: IngestionFailure, reason: str, room_id: Any = None) -> None:
        logger.warning(
            "Rejected reading",
            extra={"failure": kind.value, "reason": reason, "room_id": room_id},
        )
