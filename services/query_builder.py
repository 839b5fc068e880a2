"""Composition of the time-series SELECT used by the reading query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

from models.records import ReadingFilter

READING_COLUMNS = ("room_id", "temperature", "humidity", "recorded_at")

LAST_DAY_CONDITION = "recorded_at > datetime('now', '-1 day')"


@dataclass(frozen=True)
class BuiltQuery:
    sql: str
    params: Tuple[Any, ...]


def to_storage_timestamp(value: str) -> str:
    """Rewrite an ISO-8601 UTC string into the stored ``YYYY-MM-DD HH:MM:SS`` form.

    The rewrite is textual: the first ``T`` becomes a space and the first ``Z``
    is dropped. Fractional seconds survive and still sort correctly against the
    stored values; anything malformed is passed through untouched.
    """
    return value.replace("T", " ", 1).replace("Z", "", 1)


def build_reading_query(filters: ReadingFilter) -> BuiltQuery:
    conditions: List[str] = []
    params: List[Any] = []

    if filters.room_id:
        conditions.append("room_id = ?")
        params.append(filters.room_id)

    if filters.start_time and filters.end_time:
        conditions.append("recorded_at >= ? AND recorded_at < ?")
        params.append(to_storage_timestamp(filters.start_time))
        params.append(to_storage_timestamp(filters.end_time))
    else:
        # A window missing either bound falls back to the trailing day.
        conditions.append(LAST_DAY_CONDITION)

    sql = (
        f"SELECT {', '.join(READING_COLUMNS)} FROM temperature"
        f" WHERE {' AND '.join(conditions)}"
        " ORDER BY recorded_at ASC"
    )
    return BuiltQuery(sql=sql, params=tuple(params))
