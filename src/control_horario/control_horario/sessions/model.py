from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import SessionStatus


@dataclass(frozen=True)
class Break:
    """Domain entity: a pause interval inside a work session."""

    break_id: int
    session_id: int
    break_start: datetime
    break_end: Optional[datetime] = None
    duration_minutes: int = 0

    @property
    def is_open(self) -> bool:
        return self.break_end is None


@dataclass(frozen=True)
class WorkSession:
    """Domain entity: one user's work record.

    ``check_in`` is the start of the current active interval and moves on every
    resume; ``started_at`` keeps the original start. ``accumulated_seconds`` is
    the worked time of all intervals closed before ``check_in``.
    """

    session_id: int
    user_id: int
    company_id: int
    work_date: date
    started_at: datetime
    check_in: datetime
    check_out: Optional[datetime]
    accumulated_seconds: int
    total_minutes: int
    status: SessionStatus
    breaks: tuple[Break, ...] = field(default_factory=tuple)

    @property
    def open_break(self) -> Optional[Break]:
        for b in self.breaks:
            if b.is_open:
                return b
        return None

    @property
    def is_open(self) -> bool:
        return self.status != SessionStatus.COMPLETED


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-model for the presentation layer: stored state plus derived elapsed time."""

    session: Optional[WorkSession]
    elapsed_seconds: int
    computed_at: datetime
