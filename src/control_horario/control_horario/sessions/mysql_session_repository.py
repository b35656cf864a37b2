from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_datetime, to_db_datetime
from ..core.enums import SessionStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Break, WorkSession
from .mysql_break_repository import MySQLBreakRepository
from .repository import WorkSessionRepository

_COLUMNS = (
    "session_id, user_id, company_id, work_date, started_at, check_in, check_out, "
    "accumulated_seconds, total_minutes, status"
)


def _to_session(row: dict, breaks: Sequence[Break] = ()) -> WorkSession:
    return WorkSession(
        session_id=int(row["session_id"]),
        user_id=int(row["user_id"]),
        company_id=int(row["company_id"]),
        work_date=row["work_date"],
        started_at=from_db_datetime(row["started_at"]),
        check_in=from_db_datetime(row["check_in"]),
        check_out=from_db_datetime(row.get("check_out")),
        accumulated_seconds=int(row.get("accumulated_seconds") or 0),
        total_minutes=int(row.get("total_minutes") or 0),
        status=SessionStatus(row["status"]),
        breaks=tuple(sorted(breaks, key=lambda b: b.break_start)),
    )


class MySQLWorkSessionRepository(WorkSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection, breaks: Optional[MySQLBreakRepository] = None):
        self._conn_factory = conn_factory
        self._breaks = breaks or MySQLBreakRepository(conn_factory)

    def _with_breaks(self, rows: Sequence[dict]) -> list[WorkSession]:
        if not rows:
            return []
        by_session = self._breaks.list_for_sessions([int(r["session_id"]) for r in rows])
        return [_to_session(r, by_session.get(int(r["session_id"]), [])) for r in rows]

    def find_open_for_user(self, user_id: int) -> Optional[WorkSession]:
        with db_cursor(self._conn_factory, context="work_sessions.find_open_for_user") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_sessions
                WHERE user_id=%s AND status<>%s
                ORDER BY check_in DESC
                LIMIT 1
                """,
                (int(user_id), SessionStatus.COMPLETED.value),
            )
            row = fetchone(cur)
        sessions = self._with_breaks([row] if row else [])
        return sessions[0] if sessions else None

    def list_for_user_and_date(self, user_id: int, work_date: date) -> Sequence[WorkSession]:
        with db_cursor(self._conn_factory, context="work_sessions.list_for_user_and_date") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_sessions
                WHERE user_id=%s AND work_date=%s
                ORDER BY started_at ASC
                """,
                (int(user_id), work_date),
            )
            rows = fetchall(cur)
        return self._with_breaks(rows)

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        with db_cursor(self._conn_factory, context="work_sessions.get_by_id") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_sessions WHERE session_id=%s", (int(session_id),))
            row = fetchone(cur)
        sessions = self._with_breaks([row] if row else [])
        return sessions[0] if sessions else None

    def create_session(
        self,
        *,
        user_id: int,
        company_id: int,
        work_date: date,
        check_in: datetime,
    ) -> WorkSession:
        with db_cursor(self._conn_factory, context="work_sessions.create_session") as (_, cur):
            cur.execute(
                """
                INSERT INTO work_sessions(
                    user_id, company_id, work_date, started_at, check_in,
                    accumulated_seconds, total_minutes, status
                )
                VALUES(%s,%s,%s,%s,%s,0,0,%s)
                """,
                (
                    int(user_id),
                    int(company_id),
                    work_date,
                    to_db_datetime(check_in),
                    to_db_datetime(check_in),
                    SessionStatus.ACTIVE.value,
                ),
            )
            session_id = int(cur.lastrowid)

        created = self.get_by_id(session_id)
        if created is None:
            raise NotFoundError(f"Jornada {session_id} no encontrada tras crearla")
        return created

    def update_session(
        self,
        *,
        session_id: int,
        expected_status: SessionStatus,
        status: SessionStatus,
        check_in: Optional[datetime] = None,
        check_out: Optional[datetime] = None,
        accumulated_seconds: Optional[int] = None,
        total_minutes: Optional[int] = None,
    ) -> WorkSession:
        assignments = ["status=%s"]
        params: list[object] = [status.value]

        if check_in is not None:
            assignments.append("check_in=%s")
            params.append(to_db_datetime(check_in))
        if check_out is not None:
            assignments.append("check_out=%s")
            params.append(to_db_datetime(check_out))
        if accumulated_seconds is not None:
            assignments.append("accumulated_seconds=%s")
            params.append(int(accumulated_seconds))
        if total_minutes is not None:
            assignments.append("total_minutes=%s")
            params.append(int(total_minutes))

        params.extend([int(session_id), expected_status.value])
        return self._guarded_update(
            session_id, expected_status, assignments, params, context="work_sessions.update_session"
        )

    def restore_session(self, *, previous: WorkSession, expected_status: SessionStatus) -> WorkSession:
        assignments = [
            "status=%s",
            "check_in=%s",
            "check_out=%s",
            "accumulated_seconds=%s",
            "total_minutes=%s",
        ]
        params: list[object] = [
            previous.status.value,
            to_db_datetime(previous.check_in),
            to_db_datetime(previous.check_out),
            int(previous.accumulated_seconds),
            int(previous.total_minutes),
            int(previous.session_id),
            expected_status.value,
        ]
        return self._guarded_update(
            previous.session_id, expected_status, assignments, params, context="work_sessions.restore_session"
        )

    def _guarded_update(
        self,
        session_id: int,
        expected_status: SessionStatus,
        assignments: list[str],
        params: list[object],
        *,
        context: str,
    ) -> WorkSession:
        current = None
        with db_cursor(self._conn_factory, context=context) as (_, cur):
            cur.execute(
                f"""
                UPDATE work_sessions
                SET {", ".join(assignments)}
                WHERE session_id=%s AND status=%s
                """,
                tuple(params),
            )
            updated = cur.rowcount > 0

            if not updated:
                cur.execute("SELECT status FROM work_sessions WHERE session_id=%s", (int(session_id),))
                current = fetchone(cur)

        if not updated:
            if current is None:
                raise NotFoundError(f"Jornada {session_id} no encontrada")
            raise ConflictError(
                f"La jornada {session_id} cambió en otro dispositivo "
                f"(estado {current['status']}, se esperaba {expected_status.value})"
            )

        result = self.get_by_id(session_id)
        if result is None:
            raise NotFoundError(f"Jornada {session_id} no encontrada")
        return result

    def list_completed(self, *, user_id: int, start_date: date, end_date: date) -> Sequence[WorkSession]:
        with db_cursor(self._conn_factory, context="work_sessions.list_completed") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_sessions
                WHERE user_id=%s AND status=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date DESC, started_at DESC
                """,
                (int(user_id), SessionStatus.COMPLETED.value, start_date, end_date),
            )
            rows = fetchall(cur)
        return self._with_breaks(rows)
