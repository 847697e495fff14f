# ♥♥─── QuestBoard Calendar Models ─────────────────────────────────────────────
from __future__ import annotations

from datetime import date as python_date

from pydantic import Field

from .base_enums import CalendarItemKind
from .base_model import QuestBoardBaseModel


class CalendarSyncRequest(QuestBoardBaseModel):
    """An item the user opted to mirror into their calendar.

    :param scheduled_time: Start time as ``HH:MM``, absent for all-day items.
    :param end_time: End time as ``HH:MM``.
    """

    title: str = Field(min_length=1)
    scheduled_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    end_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    day: python_date | None = Field(default=None, alias="date")
    kind: CalendarItemKind = Field(default=CalendarItemKind.TASK, alias="type")
    notes: str | None = Field(default=None)
