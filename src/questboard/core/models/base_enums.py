# ♥♥─── Model Enums ────────────────────────────────────────────────────
from __future__ import annotations

from enum import StrEnum


class Priority(StrEnum):
    """Priority levels of a task."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class HabitPeriod(StrEnum):
    """Time-of-day bucket a habit belongs to."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class BookStatus(StrEnum):
    """Reading status of a book, derived from its progress."""

    NOT_STARTED = "not-started"
    READING = "reading"
    COMPLETED = "completed"


class CalendarItemKind(StrEnum):
    """Kind of item pushed to the calendar collaborator."""

    TASK = "task"
    EVENT = "event"


class SyncState(StrEnum):
    """States of the persistence synchronizer."""

    HYDRATING = "hydrating"
    IDLE = "idle"
    WRITE_PENDING = "write_pending"


class PenaltyState(StrEnum):
    """States of the daily penalty evaluator."""

    SETTLED = "settled"
    EVALUATING = "evaluating"
