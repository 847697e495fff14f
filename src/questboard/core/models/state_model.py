# ♥♥─── QuestBoard State Models ────────────────────────────────────────────────
from __future__ import annotations

from datetime import date as python_date

from pydantic import Field

from .base_model import QuestBoardBaseModel
from .shop_model import WishlistItem
from .task_model import Task, Habit
from .library_model import Book
from .journal_model import JournalEntry


class LevelUpNotice(QuestBoardBaseModel):
    """Pending notification raised when lifetime XP crosses into a new tier."""

    show: bool = False
    new_rank: str = ""


class GameSnapshot(QuestBoardBaseModel):
    """The complete persisted state document of one user.

    Missing keys load as defaults so older documents stay readable.
    """

    points: int = Field(default=0, ge=0)
    lifetime_xp: int = Field(default=0, ge=0, alias="lifetimeXP")
    tasks: list[Task] = Field(default_factory=list)
    habits: list[Habit] = Field(default_factory=list)
    books: list[Book] = Field(default_factory=list)
    wishlist: list[WishlistItem] = Field(default_factory=list)
    journal_entries: list[JournalEntry] = Field(default_factory=list)
    last_evaluated_day: python_date | None = Field(default=None)
    daily_bonus_day: python_date | None = Field(default=None)
    bonus_withdrawn_day: python_date | None = Field(default=None)
    bonus_withdrawn_by: str | None = Field(default=None)


class DayMarkers(QuestBoardBaseModel):
    """Per-day flags persisted with the state.

    :param last_evaluated_day: Day the daily penalty evaluation last ran.
    :param daily_bonus_day: Day whose all-tasks-done bonus is currently held.
    :param bonus_withdrawn_day: Day on which a toggle-off withdrew the held bonus.
    :param bonus_withdrawn_by: Id of the task whose toggle-off withdrew it. Completing
        that task again on the same day re-grants the bonus.
    """

    last_evaluated_day: python_date | None = Field(default=None)
    daily_bonus_day: python_date | None = Field(default=None)
    bonus_withdrawn_day: python_date | None = Field(default=None)
    bonus_withdrawn_by: str | None = Field(default=None)
