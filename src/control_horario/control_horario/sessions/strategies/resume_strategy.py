from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import SessionEvent, SessionStatus
from ..accounting import break_duration_minutes
from ..model import WorkSession
from .base import BreakClosure, TransitionPlan, TransitionStrategy


def close_open_break(session: WorkSession, now: datetime) -> Optional[BreakClosure]:
    open_break = session.open_break
    if open_break is None:
        return None
    return BreakClosure(
        break_id=open_break.break_id,
        break_end=now,
        duration_minutes=break_duration_minutes(open_break.break_start, now),
    )


class ResumeStrategy(TransitionStrategy):
    """paused -> active: close the open break and restart the active-interval anchor."""

    event = SessionEvent.RESUME

    def plan(self, *, session: WorkSession, now: datetime) -> TransitionPlan:
        return TransitionPlan(
            from_status=session.status,
            status=SessionStatus.ACTIVE,
            check_in=now,
            close_break=close_open_break(session, now),
        )
