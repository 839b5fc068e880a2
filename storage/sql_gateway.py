"""SQLite-backed storage gateway exposing a prepared-statement interface."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional, Sequence

from settings import get_settings

MEMORY_DATABASE = ":memory:"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS temperature (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    room_id INTEGER NOT NULL CHECK (room_id BETWEEN 1 AND 26),
    temperature REAL NOT NULL,
    humidity REAL,
    recorded_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS rooms (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL
);
"""


class StorageError(RuntimeError):
    """Raised when the underlying engine rejects or fails a statement."""


@dataclass(frozen=True)
class RunResult:
    changes: int
    last_row_id: Optional[int]


class SqlStatement:
    """A prepared statement; ``bind`` returns a new statement carrying the values."""

    def __init__(
        self, gateway: SqlGateway, sql: str, params: Sequence[Any] = ()
    ) -> None:
        self._gateway = gateway
        self.sql = sql
        self.params = tuple(params)

    def bind(self, *values: Any) -> SqlStatement:
        return SqlStatement(self._gateway, self.sql, values)

    def run(self) -> RunResult:
        return self._gateway._execute_write(self.sql, self.params)

    def all(self) -> List[Dict[str, Any]]:
        return self._gateway._execute_read(self.sql, self.params)


class SqlGateway:

    def __init__(self, database: str | Path = MEMORY_DATABASE, apply_schema: bool = True) -> None:
        self.database = str(database)
        if self.database != MEMORY_DATABASE:
            Path(self.database).parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        self._conn: Optional[sqlite3.Connection] = sqlite3.connect(
            self.database, check_same_thread=False
        )
        self._conn.row_factory = sqlite3.Row
        if apply_schema:
            self.execute_script(SCHEMA_SQL)

    def prepare(self, sql: str) -> SqlStatement:
        return SqlStatement(self, sql)

    def execute_script(self, script: str) -> None:
        with self._lock:
            conn = self._connection()
            try:
                conn.executescript(script)
            except sqlite3.Error as exc:
                raise StorageError(str(exc)) from exc

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError(f"Database {self.database!r} is closed.")
        return self._conn

    def _execute_write(self, sql: str, params: Sequence[Any]) -> RunResult:
        with self._lock:
            conn = self._connection()
            try:
                cursor = conn.execute(sql, params)
                conn.commit()
            except (sqlite3.Error, OverflowError) as exc:
                conn.rollback()
                raise StorageError(str(exc)) from exc
            return RunResult(changes=cursor.rowcount, last_row_id=cursor.lastrowid)

    def _execute_read(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        with self._lock:
            conn = self._connection()
            try:
                rows = conn.execute(sql, params).fetchall()
            except (sqlite3.Error, OverflowError) as exc:
                raise StorageError(str(exc)) from exc
        return [dict(row) for row in rows]


@lru_cache
def build_default_gateway(database: Optional[str] = None) -> SqlGateway:
    settings = get_settings()
    path = settings.database_path if database is None else database
    return SqlGateway(database=path)
