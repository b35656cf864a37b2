from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from ...core.enums import SessionEvent, SessionStatus
from ..accounting import checkpoint_seconds
from ..model import WorkSession
from .base import TransitionPlan, TransitionStrategy
from .resume_strategy import close_open_break


class StopStrategy(TransitionStrategy):
    """active|paused -> completed.

    A paused session is implicitly resumed at ``now`` first, so the dangling
    break is closed and the final checkpoint adds nothing for the pause.
    """

    event = SessionEvent.STOP

    def plan(self, *, session: WorkSession, now: datetime) -> TransitionPlan:
        from_status = session.status
        closure = None
        check_in = None
        if from_status == SessionStatus.PAUSED:
            closure = close_open_break(session, now)
            check_in = now
            session = replace(session, check_in=now)

        accumulated = checkpoint_seconds(session, now)
        return TransitionPlan(
            from_status=from_status,
            status=SessionStatus.COMPLETED,
            check_in=check_in,
            check_out=now,
            accumulated_seconds=accumulated,
            total_minutes=accumulated // 60,
            close_break=closure,
        )
