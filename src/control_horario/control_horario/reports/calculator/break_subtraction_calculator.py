from __future__ import annotations

from ...core.enums import SessionStatus
from ...sessions.accounting import worked_seconds_from_breaks
from ...sessions.model import WorkSession
from .base import WorkedTimeCalculator


class BreakSubtractionCalculator(WorkedTimeCalculator):
    """Legacy rule: (check_out - started_at) - sum(break intervals), not below 0.

    Used to audit the checkpoint totals; both agree for consistent records.
    """

    def worked_minutes(self, session: WorkSession) -> int:
        if session.status != SessionStatus.COMPLETED or session.check_out is None:
            return 0
        return worked_seconds_from_breaks(session, session.check_out) // 60
