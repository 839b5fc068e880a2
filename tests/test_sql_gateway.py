from __future__ import annotations

from pathlib import Path

import pytest

from storage.sql_gateway import SqlGateway, StorageError


@pytest.fixture()
def gateway():
    gateway = SqlGateway()
    yield gateway
    gateway.close()


def test_insert_defaults_recorded_at_to_sortable_utc(gateway: SqlGateway) -> None:
    result = gateway.prepare(
        "INSERT INTO temperature (room_id, temperature, humidity) VALUES (?, ?, ?)"
    ).bind(1, 21.5, None).run()

    assert result.changes == 1
    assert result.last_row_id == 1

    rows = gateway.prepare("SELECT room_id, humidity, recorded_at FROM temperature").all()
    assert rows[0]["room_id"] == 1
    assert rows[0]["humidity"] is None
    recorded_at = rows[0]["recorded_at"]
    assert len(recorded_at) == 19
    assert recorded_at[4] == "-" and recorded_at[10] == " " and recorded_at[13] == ":"


def test_bind_returns_a_new_statement(gateway: SqlGateway) -> None:
    statement = gateway.prepare("SELECT id, name FROM rooms WHERE id = ?")
    bound = statement.bind(4)

    assert bound is not statement
    assert statement.params == ()
    assert bound.params == (4,)


def test_room_id_check_constraint_raises_storage_error(gateway: SqlGateway) -> None:
    with pytest.raises(StorageError) as excinfo:
        gateway.prepare(
            "INSERT INTO temperature (room_id, temperature) VALUES (?, ?)"
        ).bind(27, 20.0).run()

    assert "CHECK constraint failed" in str(excinfo.value)
    assert gateway.prepare("SELECT id FROM temperature").all() == []


def test_closed_gateway_raises_storage_error(gateway: SqlGateway) -> None:
    gateway.close()

    with pytest.raises(StorageError):
        gateway.prepare("SELECT id, name FROM rooms").all()


def test_file_database_persists_between_gateways(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "climate.db"
    first = SqlGateway(database=path)
    first.prepare("INSERT INTO rooms (id, name) VALUES (?, ?)").bind(1, "Aviary").run()
    first.close()

    second = SqlGateway(database=path)
    try:
        assert second.prepare("SELECT id, name FROM rooms").all() == [
            {"id": 1, "name": "Aviary"}
        ]
    finally:
        second.close()


def test_oversized_integer_raises_storage_error(gateway: SqlGateway) -> None:
    with pytest.raises(StorageError):
        gateway.prepare(
            "INSERT INTO temperature (room_id, temperature) VALUES (?, ?)"
        ).bind(10**23, 20.0).run()

    with pytest.raises(StorageError):
        gateway.prepare("SELECT id FROM temperature WHERE room_id = ?").bind(10**23).all()
