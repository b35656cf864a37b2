from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import SessionEvent, SessionStatus
from ..core.exceptions import InvalidTransitionError
from .strategies.base import TransitionStrategy
from .strategies.pause_strategy import PauseStrategy
from .strategies.resume_strategy import ResumeStrategy
from .strategies.stop_strategy import StopStrategy

_MESSAGES = {
    (SessionEvent.PAUSE, SessionStatus.PAUSED): "La jornada ya está en pausa",
    (SessionEvent.PAUSE, SessionStatus.COMPLETED): "La jornada ya ha finalizado",
    (SessionEvent.RESUME, SessionStatus.ACTIVE): "La jornada no está en pausa",
    (SessionEvent.RESUME, SessionStatus.COMPLETED): "La jornada ya ha finalizado",
    (SessionEvent.STOP, SessionStatus.COMPLETED): "La jornada ya ha finalizado",
}


@dataclass
class SessionTransitionFactory:
    """Factory Pattern: choose the transition strategy for (status, event)."""

    def for_event(self, *, event: SessionEvent, status: SessionStatus) -> TransitionStrategy:
        if event == SessionEvent.PAUSE and status == SessionStatus.ACTIVE:
            return PauseStrategy()
        if event == SessionEvent.RESUME and status == SessionStatus.PAUSED:
            return ResumeStrategy()
        if event == SessionEvent.STOP and status in {SessionStatus.ACTIVE, SessionStatus.PAUSED}:
            return StopStrategy()

        message = _MESSAGES.get((event, status), f"Transición no permitida: {event.value} desde {status.value}")
        raise InvalidTransitionError(message)
