from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import from_db_datetime, to_db_datetime
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Break
from .repository import BreakRepository

_COLUMNS = "break_id, session_id, break_start, break_end, duration_minutes"


def _to_break(row: dict) -> Break:
    return Break(
        break_id=int(row["break_id"]),
        session_id=int(row["session_id"]),
        break_start=from_db_datetime(row["break_start"]),
        break_end=from_db_datetime(row.get("break_end")),
        duration_minutes=int(row.get("duration_minutes") or 0),
    )


class MySQLBreakRepository(BreakRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get(self, cur, break_id: int) -> Optional[Break]:
        cur.execute(f"SELECT {_COLUMNS} FROM breaks WHERE break_id=%s", (int(break_id),))
        row = fetchone(cur)
        return _to_break(row) if row else None

    def create_break(self, *, session_id: int, break_start: datetime) -> Break:
        with db_cursor(self._conn_factory, context="breaks.create_break") as (_, cur):
            cur.execute(
                """
                INSERT INTO breaks(session_id, break_start, duration_minutes)
                VALUES(%s,%s,0)
                """,
                (int(session_id), to_db_datetime(break_start)),
            )
            created = self._get(cur, int(cur.lastrowid))
        if created is None:
            raise NotFoundError(f"Pausa de la jornada {session_id} no encontrada tras crearla")
        return created

    def close_break(self, *, break_id: int, break_end: datetime, duration_minutes: int) -> Break:
        with db_cursor(self._conn_factory, context="breaks.close_break") as (_, cur):
            cur.execute(
                """
                UPDATE breaks
                SET break_end=%s, duration_minutes=%s
                WHERE break_id=%s AND break_end IS NULL
                """,
                (to_db_datetime(break_end), int(duration_minutes), int(break_id)),
            )
            closed = cur.rowcount > 0
            current = self._get(cur, break_id)

        if current is None:
            raise NotFoundError(f"Pausa {break_id} no encontrada")
        if not closed:
            raise ConflictError(f"La pausa {break_id} ya estaba cerrada")
        return current

    def find_open_for_session(self, session_id: int) -> Optional[Break]:
        with db_cursor(self._conn_factory, context="breaks.find_open_for_session") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM breaks
                WHERE session_id=%s AND break_end IS NULL
                ORDER BY break_start DESC
                LIMIT 1
                """,
                (int(session_id),),
            )
            row = fetchone(cur)
            return _to_break(row) if row else None

    def list_for_sessions(self, session_ids: Sequence[int]) -> dict[int, list[Break]]:
        if not session_ids:
            return {}
        ids = [int(s) for s in session_ids]
        with db_cursor(self._conn_factory, context="breaks.list_for_sessions") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM breaks
                WHERE session_id IN ({in_clause(ids)})
                ORDER BY break_start ASC
                """,
                tuple(ids),
            )
            rows = fetchall(cur)

        out: dict[int, list[Break]] = {}
        for r in rows:
            b = _to_break(r)
            out.setdefault(b.session_id, []).append(b)
        return out
