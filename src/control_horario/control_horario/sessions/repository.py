from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionStatus
from .model import Break, WorkSession


class WorkSessionRepository(Protocol):
    """Store operations the tracker consumes for sessions.

    Sessions returned by the find/get methods carry their breaks.
    """

    def find_open_for_user(self, user_id: int) -> Optional[WorkSession]:
        raise NotImplementedError

    def list_for_user_and_date(self, user_id: int, work_date: date) -> Sequence[WorkSession]:
        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        raise NotImplementedError

    def create_session(
        self,
        *,
        user_id: int,
        company_id: int,
        work_date: date,
        check_in: datetime,
    ) -> WorkSession:
        raise NotImplementedError

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
        """Partial update guarded by ``expected_status``.

        Raises NotFoundError when the id is absent and ConflictError when the
        stored status is no longer ``expected_status``.
        """

        raise NotImplementedError

    def restore_session(self, *, previous: WorkSession, expected_status: SessionStatus) -> WorkSession:
        """Write back every mutable field of ``previous``, guarded by ``expected_status``.

        Used to undo an update whose break write failed. Clears ``check_out``
        when ``previous`` had none.
        """

        raise NotImplementedError

    def list_completed(self, *, user_id: int, start_date: date, end_date: date) -> Sequence[WorkSession]:
        """Completed sessions in [start_date, end_date], newest date first."""

        raise NotImplementedError


class BreakRepository(Protocol):
    def create_break(self, *, session_id: int, break_start: datetime) -> Break:
        raise NotImplementedError

    def close_break(self, *, break_id: int, break_end: datetime, duration_minutes: int) -> Break:
        """Raises NotFoundError when absent and ConflictError when already closed."""

        raise NotImplementedError

    def find_open_for_session(self, session_id: int) -> Optional[Break]:
        raise NotImplementedError

    def list_for_sessions(self, session_ids: Sequence[int]) -> dict[int, list[Break]]:
        raise NotImplementedError
