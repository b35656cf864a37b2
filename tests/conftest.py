from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Sequence

import pytest

from src.control_horario.control_horario.core.enums import Role, SessionStatus
from src.control_horario.control_horario.core.exceptions import ConflictError, NotFoundError
from src.control_horario.control_horario.sessions.model import Break, WorkSession
from src.control_horario.control_horario.users.model import User


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemoryUsers:
    def __init__(self, users: Sequence[User] = ()):
        self._by_id: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self._by_id.values():
            if u.email == email:
                return u
        return None

    def create_user(self, *, full_name: str, email: str, password_hash: str, role: Role, company_id: int) -> int:
        user_id = max(self._by_id, default=0) + 1
        self._by_id[user_id] = User(
            user_id=user_id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            company_id=company_id,
        )
        return user_id


class InMemoryBreaks:
    def __init__(self):
        self.rows: dict[int, Break] = {}
        self._id = 0

    def create_break(self, *, session_id: int, break_start: datetime) -> Break:
        self._id += 1
        b = Break(break_id=self._id, session_id=session_id, break_start=break_start)
        self.rows[b.break_id] = b
        return b

    def close_break(self, *, break_id: int, break_end: datetime, duration_minutes: int) -> Break:
        b = self.rows.get(break_id)
        if b is None:
            raise NotFoundError(f"Pausa {break_id} no encontrada")
        if b.break_end is not None:
            raise ConflictError(f"La pausa {break_id} ya estaba cerrada")
        closed = replace(b, break_end=break_end, duration_minutes=duration_minutes)
        self.rows[break_id] = closed
        return closed

    def find_open_for_session(self, session_id: int) -> Optional[Break]:
        for b in self.rows.values():
            if b.session_id == session_id and b.break_end is None:
                return b
        return None

    def list_for_sessions(self, session_ids: Sequence[int]) -> dict[int, list[Break]]:
        out: dict[int, list[Break]] = {}
        for b in self.rows.values():
            if b.session_id in session_ids:
                out.setdefault(b.session_id, []).append(b)
        return out


class InMemorySessions:
    """Stores sessions without breaks and attaches them on read, like the MySQL repository."""

    def __init__(self, breaks: InMemoryBreaks):
        self.rows: dict[int, WorkSession] = {}
        self.breaks = breaks
        self._id = 0

    def _load(self, s: WorkSession) -> WorkSession:
        attached = self.breaks.list_for_sessions([s.session_id]).get(s.session_id, [])
        return replace(s, breaks=tuple(sorted(attached, key=lambda b: b.break_start)))

    def add(self, session: WorkSession) -> WorkSession:
        self._id = max(self._id, session.session_id)
        self.rows[session.session_id] = replace(session, breaks=())
        for b in session.breaks:
            self.breaks.rows[b.break_id] = b
            self.breaks._id = max(self.breaks._id, b.break_id)
        return self._load(self.rows[session.session_id])

    def find_open_for_user(self, user_id: int) -> Optional[WorkSession]:
        for s in self.rows.values():
            if s.user_id == user_id and s.status != SessionStatus.COMPLETED:
                return self._load(s)
        return None

    def list_for_user_and_date(self, user_id: int, work_date: date) -> list[WorkSession]:
        return [self._load(s) for s in self.rows.values() if s.user_id == user_id and s.work_date == work_date]

    def get_by_id(self, session_id: int) -> Optional[WorkSession]:
        s = self.rows.get(session_id)
        return self._load(s) if s else None

    def create_session(self, *, user_id: int, company_id: int, work_date: date, check_in: datetime) -> WorkSession:
        self._id += 1
        s = WorkSession(
            session_id=self._id,
            user_id=user_id,
            company_id=company_id,
            work_date=work_date,
            started_at=check_in,
            check_in=check_in,
            check_out=None,
            accumulated_seconds=0,
            total_minutes=0,
            status=SessionStatus.ACTIVE,
        )
        self.rows[s.session_id] = s
        return self._load(s)

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
        s = self.rows.get(session_id)
        if s is None:
            raise NotFoundError(f"Jornada {session_id} no encontrada")
        if s.status != expected_status:
            raise ConflictError(f"La jornada {session_id} cambió en otro dispositivo")

        changes = {"status": status}
        if check_in is not None:
            changes["check_in"] = check_in
        if check_out is not None:
            changes["check_out"] = check_out
        if accumulated_seconds is not None:
            changes["accumulated_seconds"] = accumulated_seconds
        if total_minutes is not None:
            changes["total_minutes"] = total_minutes
        self.rows[session_id] = replace(s, **changes)
        return self._load(self.rows[session_id])

    def restore_session(self, *, previous: WorkSession, expected_status: SessionStatus) -> WorkSession:
        s = self.rows.get(previous.session_id)
        if s is None:
            raise NotFoundError(f"Jornada {previous.session_id} no encontrada")
        if s.status != expected_status:
            raise ConflictError(f"La jornada {previous.session_id} cambió en otro dispositivo")
        self.rows[s.session_id] = replace(
            s,
            status=previous.status,
            check_in=previous.check_in,
            check_out=previous.check_out,
            accumulated_seconds=previous.accumulated_seconds,
            total_minutes=previous.total_minutes,
        )
        return self._load(self.rows[s.session_id])

    def list_completed(self, *, user_id: int, start_date: date, end_date: date) -> list[WorkSession]:
        items = [
            self._load(s)
            for s in self.rows.values()
            if s.user_id == user_id and s.status == SessionStatus.COMPLETED and start_date <= s.work_date <= end_date
        ]
        items.sort(key=lambda s: (s.work_date, s.started_at), reverse=True)
        return items


def make_user(user_id: int = 1, *, company_id: int = 10, email: str = "alex@techsolutions.com", password_hash: str = "x") -> User:
    return User(
        user_id=user_id,
        full_name="Alex Demo",
        email=email,
        password_hash=password_hash,
        role=Role.USER,
        company_id=company_id,
    )


def completed_session(
    session_id: int,
    work_date: date,
    total_minutes: int,
    *,
    user_id: int = 1,
    start_hour: int = 9,
    breaks: Sequence[Break] = (),
) -> WorkSession:
    """A completed session with no gaps: started_at + total_minutes + break time = check_out."""
    started = datetime(work_date.year, work_date.month, work_date.day, start_hour, tzinfo=timezone.utc)
    break_minutes = sum(b.duration_minutes for b in breaks)
    return WorkSession(
        session_id=session_id,
        user_id=user_id,
        company_id=10,
        work_date=work_date,
        started_at=started,
        check_in=started,
        check_out=started + timedelta(minutes=total_minutes + break_minutes),
        accumulated_seconds=total_minutes * 60,
        total_minutes=total_minutes,
        status=SessionStatus.COMPLETED,
        breaks=tuple(breaks),
    )


@pytest.fixture
def fixed_now() -> datetime:
    return utc(2025, 3, 12, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers([make_user()])


@pytest.fixture
def breaks_repo() -> InMemoryBreaks:
    return InMemoryBreaks()


@pytest.fixture
def sessions_repo(breaks_repo) -> InMemorySessions:
    return InMemorySessions(breaks_repo)
