from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import SessionEvent, SessionStatus
from ..model import WorkSession


@dataclass(frozen=True)
class BreakClosure:
    break_id: int
    break_end: datetime
    duration_minutes: int


@dataclass(frozen=True)
class TransitionPlan:
    """Everything a transition writes to the store, computed before any write.

    Session fields left as None are not touched by the update.
    """

    from_status: SessionStatus
    status: SessionStatus
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    accumulated_seconds: Optional[int] = None
    total_minutes: Optional[int] = None
    open_break_at: Optional[datetime] = None
    close_break: Optional[BreakClosure] = None


class TransitionStrategy(ABC):
    """Strategy Pattern: encapsulate how one event moves a session forward."""

    event: SessionEvent

    @abstractmethod
    def plan(self, *, session: WorkSession, now: datetime) -> TransitionPlan:
        raise NotImplementedError
