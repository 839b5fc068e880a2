"""Unit tests for the reading query composition."""

from __future__ import annotations

from models.records import ReadingFilter
from services.query_builder import (
    LAST_DAY_CONDITION,
    build_reading_query,
    to_storage_timestamp,
)


def test_to_storage_timestamp_rewrites_separator_and_zone() -> None:
    assert to_storage_timestamp("2025-11-30T00:00:00Z") == "2025-11-30 00:00:00"
    assert to_storage_timestamp("2023-11-29T16:00:00.000Z") == "2023-11-29 16:00:00.000"


def test_to_storage_timestamp_passes_malformed_input_through() -> None:
    assert to_storage_timestamp("yesterday") == "yesterday"
    assert to_storage_timestamp("2025-11-30 00:00:00") == "2025-11-30 00:00:00"


def test_no_filters_uses_last_day_window() -> None:
    built = build_reading_query(ReadingFilter())

    assert built.sql == (
        "SELECT room_id, temperature, humidity, recorded_at FROM temperature"
        f" WHERE {LAST_DAY_CONDITION} ORDER BY recorded_at ASC"
    )
    assert built.params == ()


def test_room_and_window_bind_in_clause_order() -> None:
    built = build_reading_query(
        ReadingFilter(
            room_id="3",
            start_time="2025-11-30T00:00:00Z",
            end_time="2025-11-30T23:59:59Z",
        )
    )

    assert "WHERE room_id = ? AND recorded_at >= ? AND recorded_at < ?" in built.sql
    assert LAST_DAY_CONDITION not in built.sql
    assert built.sql.endswith("ORDER BY recorded_at ASC")
    assert built.params == ("3", "2025-11-30 00:00:00", "2025-11-30 23:59:59")


def test_room_id_is_bound_without_coercion() -> None:
    built = build_reading_query(ReadingFilter(room_id="07"))

    assert built.params == ("07",)


def test_empty_room_id_is_ignored() -> None:
    built = build_reading_query(ReadingFilter(room_id=""))

    assert "room_id = ?" not in built.sql
    assert built.params == ()


def test_half_specified_window_falls_back_to_last_day() -> None:
    only_start = build_reading_query(ReadingFilter(start_time="2025-11-30T00:00:00Z"))
    only_end = build_reading_query(ReadingFilter(room_id="1", end_time="2025-11-30T00:00:00Z"))

    assert LAST_DAY_CONDITION in only_start.sql
    assert only_start.params == ()
    assert LAST_DAY_CONDITION in only_end.sql
    assert only_end.params == ("1",)
