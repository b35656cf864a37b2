from __future__ import annotations

from ...core.enums import SessionStatus
from ...sessions.model import WorkSession
from .base import WorkedTimeCalculator


class CheckpointCalculator(WorkedTimeCalculator):
    """Standard rule: the persisted total_minutes snapshot of a completed session."""

    def worked_minutes(self, session: WorkSession) -> int:
        if session.status != SessionStatus.COMPLETED:
            return 0
        return max(int(session.total_minutes), 0)
