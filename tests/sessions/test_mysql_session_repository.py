from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest
from mysql.connector import errorcode

from conftest import utc
from src.control_horario.control_horario.core.enums import SessionStatus
from src.control_horario.control_horario.core.exceptions import ConflictError, NotFoundError, StoreError
from src.control_horario.control_horario.sessions.mysql_session_repository import MySQLWorkSessionRepository


class ScriptedCursor:
    """Replays one scripted result per execute() and records the SQL it was given."""

    def __init__(self, results):
        self.results = list(results)
        self.executed = []
        self.rowcount = 0
        self._one = None
        self._all = []

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), tuple(params)))
        result = self.results.pop(0) if self.results else {}
        if isinstance(result, Exception):
            raise result
        self.rowcount = result.get("rowcount", 0)
        self._one = result.get("one")
        self._all = result.get("all", [])

    def fetchone(self):
        return self._one

    def fetchall(self):
        return self._all

    def close(self):
        pass


class ScriptedConnection:
    def __init__(self, cursor: ScriptedCursor):
        self._cursor = cursor
        self.commits = 0
        self.rollbacks = 0

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        pass


class ScriptedFactory:
    def __init__(self, *results):
        self.cursor = ScriptedCursor(results)
        self.connection = ScriptedConnection(self.cursor)

    def connect(self):
        return self.connection


def _row(**overrides) -> dict:
    row = {
        "session_id": 7,
        "user_id": 1,
        "company_id": 10,
        "work_date": date(2025, 3, 12),
        "started_at": datetime(2025, 3, 12, 9, 0),
        "check_in": datetime(2025, 3, 12, 9, 0),
        "check_out": None,
        "accumulated_seconds": 1800,
        "total_minutes": 0,
        "status": "paused",
    }
    row.update(overrides)
    return row


def test_update_is_guarded_by_expected_status():
    factory = ScriptedFactory({"rowcount": 1}, {"one": _row()}, {"all": []})
    repo = MySQLWorkSessionRepository(factory)

    updated = repo.update_session(
        session_id=7,
        expected_status=SessionStatus.ACTIVE,
        status=SessionStatus.PAUSED,
        accumulated_seconds=1800,
    )

    sql, params = factory.cursor.executed[0]
    assert sql == "UPDATE work_sessions SET status=%s, accumulated_seconds=%s WHERE session_id=%s AND status=%s"
    assert params == ("paused", 1800, 7, "active")
    assert updated.status == SessionStatus.PAUSED
    assert updated.check_in == utc(2025, 3, 12, 9, 0)


def test_zero_rows_with_other_status_is_a_conflict():
    factory = ScriptedFactory({"rowcount": 0}, {"one": {"status": "completed"}})
    repo = MySQLWorkSessionRepository(factory)

    with pytest.raises(ConflictError, match="completed"):
        repo.update_session(session_id=7, expected_status=SessionStatus.ACTIVE, status=SessionStatus.PAUSED)

    assert factory.cursor.executed[1] == ("SELECT status FROM work_sessions WHERE session_id=%s", (7,))


def test_zero_rows_for_missing_session_is_not_found():
    factory = ScriptedFactory({"rowcount": 0}, {"one": None})
    repo = MySQLWorkSessionRepository(factory)

    with pytest.raises(NotFoundError):
        repo.update_session(session_id=7, expected_status=SessionStatus.ACTIVE, status=SessionStatus.PAUSED)


def test_restore_writes_every_field_and_clears_check_out():
    factory = ScriptedFactory({"rowcount": 1}, {"one": _row()}, {"all": []})
    repo = MySQLWorkSessionRepository(factory)
    before = _session_from_row()

    repo.restore_session(previous=before, expected_status=SessionStatus.COMPLETED)

    sql, params = factory.cursor.executed[0]
    assert "check_out=%s" in sql
    assert sql.endswith("WHERE session_id=%s AND status=%s")
    assert params == (
        "paused",
        datetime(2025, 3, 12, 9, 0),
        None,
        1800,
        0,
        7,
        "completed",
    )


def test_driver_error_rolls_back_and_becomes_store_error():
    factory = ScriptedFactory(mysql.connector.Error(msg="gone", errno=errorcode.CR_SERVER_LOST))
    repo = MySQLWorkSessionRepository(factory)

    with pytest.raises(StoreError) as excinfo:
        repo.update_session(session_id=7, expected_status=SessionStatus.ACTIVE, status=SessionStatus.PAUSED)

    assert excinfo.value.kind == "network"
    assert factory.connection.rollbacks == 1
    assert factory.connection.commits == 0


def _session_from_row():
    factory = ScriptedFactory({"one": _row()}, {"all": []})
    return MySQLWorkSessionRepository(factory).get_by_id(7)
