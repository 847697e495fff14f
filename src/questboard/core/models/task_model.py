# ♥♥─── QuestBoard Task Models ─────────────────────────────────────────────────
from __future__ import annotations

from datetime import date as python_date

from pydantic import Field

from .base_enums import Priority, HabitPeriod
from .base_model import QuestBoardBaseModel


# ─── Task ─────────────────────────────────────────────────────────────────────
class Task(QuestBoardBaseModel):
    """A one-off task scheduled on a calendar day.

    :param duration: Free-form estimate shown to the user (wire name ``time``).
    :param day: The calendar day the task belongs to (wire name ``date``).
    """

    id: str
    title: str
    duration: str = Field(default="30m", alias="time")
    points: int = Field(default=0, ge=0)
    completed: bool = Field(default=False)
    day: python_date = Field(alias="date")
    priority: Priority = Field(default=Priority.MEDIUM)
    notes: str | None = Field(default=None)


# ─── Habit ────────────────────────────────────────────────────────────────────
class Habit(QuestBoardBaseModel):
    """A routine that can be completed once per day.

    ``must_do`` is informational and does not change scoring.
    """

    id: str
    title: str
    points: int = Field(default=0, ge=0)
    completed: bool = Field(default=False)
    period: HabitPeriod = Field(default=HabitPeriod.MORNING, alias="type")
    reset_time: str = Field(default="")
    must_do: bool = Field(default=False)
