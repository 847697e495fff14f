# ♥♥─── QuestBoard Journal Models ──────────────────────────────────────────────
from __future__ import annotations

from datetime import date, datetime

from pydantic import Field

from questboard.utils import DateTimeHandler

from .base_model import QuestBoardBaseModel


class JournalEntry(QuestBoardBaseModel):
    """A saved reflection. Audio content itself is kept outside the engine."""

    id: str
    text: str
    created_at: datetime = Field(default_factory=DateTimeHandler.get_utc_now, alias="date")
    has_audio: bool = Field(default=False)

    def written_on(self, day: date) -> bool:
        """Check whether the entry was created on ``day`` in local time."""
        return DateTimeHandler(timestamp=self.created_at).is_on_day(day)
