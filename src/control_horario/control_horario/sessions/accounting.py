"""Elapsed-time accounting for work sessions.

Every function here is pure: results depend only on the stored timestamps and
the ``now`` passed in. The checkpoint fields (``accumulated_seconds``,
``check_in``) are the canonical representation; the break-subtraction
functions project the same fact from ``started_at`` and the break intervals
and exist for audit and display.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from ..core.enums import SessionStatus
from .model import Break, WorkSession


def seconds_between(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end, clamped at zero (clock skew never goes negative)."""
    return max(int((end - start).total_seconds()), 0)


def checkpoint_seconds(session: WorkSession, now: datetime) -> int:
    """accumulated_seconds after closing the current active interval at ``now``."""
    return int(session.accumulated_seconds) + seconds_between(session.check_in, now)


def elapsed_seconds(session: WorkSession, now: datetime) -> int:
    if session.status == SessionStatus.ACTIVE:
        return checkpoint_seconds(session, now)
    if session.status == SessionStatus.PAUSED:
        # check_in is stale while paused.
        return int(session.accumulated_seconds)
    return int(session.total_minutes) * 60


def break_duration_minutes(break_start: datetime, break_end: datetime) -> int:
    return seconds_between(break_start, break_end) // 60


def total_break_seconds(breaks: Iterable[Break], now: datetime) -> int:
    return sum(seconds_between(b.break_start, b.break_end or now) for b in breaks)


def worked_seconds_from_breaks(session: WorkSession, now: datetime) -> int:
    """Legacy projection: (check_out or now) - started_at - total break time."""
    end = session.check_out or now
    return max(seconds_between(session.started_at, end) - total_break_seconds(session.breaks, end), 0)


def projection_drift(session: WorkSession, now: datetime) -> int:
    """Difference between the two projections; 0 for records kept consistent."""
    if session.status == SessionStatus.COMPLETED:
        canonical = int(session.accumulated_seconds)
    else:
        canonical = elapsed_seconds(session, now)
    return worked_seconds_from_breaks(session, now) - canonical


def format_hms(total_seconds: int) -> tuple[str, str, str]:
    total_seconds = max(int(total_seconds), 0)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}", f"{minutes:02d}", f"{seconds:02d}"
