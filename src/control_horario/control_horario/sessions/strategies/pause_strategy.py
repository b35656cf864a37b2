from __future__ import annotations

from datetime import datetime

from ...core.enums import SessionEvent, SessionStatus
from ..accounting import checkpoint_seconds
from ..model import WorkSession
from .base import TransitionPlan, TransitionStrategy


class PauseStrategy(TransitionStrategy):
    """active -> paused: checkpoint the running interval and open a break."""

    event = SessionEvent.PAUSE

    def plan(self, *, session: WorkSession, now: datetime) -> TransitionPlan:
        return TransitionPlan(
            from_status=session.status,
            status=SessionStatus.PAUSED,
            accumulated_seconds=checkpoint_seconds(session, now),
            open_break_at=now,
        )
