from __future__ import annotations

from abc import ABC, abstractmethod

from ...sessions.model import WorkSession


class WorkedTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def worked_minutes(self, session: WorkSession) -> int:
        raise NotImplementedError
