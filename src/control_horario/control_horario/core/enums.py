from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    USER = "user"
    ADMIN = "admin"


class SessionStatus(str, Enum):
    """Lifecycle state of a work session as stored in the database."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class SessionEvent(str, Enum):
    """Commands the presentation layer can issue against a session."""

    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"


class DailySessionPolicy(str, Enum):
    """How many sessions a user may open on the same calendar day.

    MULTIPLE: only an open session blocks a new start (split shifts allowed).
    SINGLE: any session already recorded for the day blocks a new start.
    """

    MULTIPLE = "multiple"
    SINGLE = "single"


class Performance(str, Enum):
    EXCELLENT = "Excelente"
    GOOD = "Bueno"
    REGULAR = "Regular"


class AttendanceMark(str, Enum):
    """Punctuality mark shown in the history table."""

    PRESENT = "Asistencia"
    LATE = "Tardanza"
    PENDING = "Pendiente"
