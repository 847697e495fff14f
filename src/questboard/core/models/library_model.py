# ♥♥─── QuestBoard Library Models ──────────────────────────────────────────────
from __future__ import annotations

from datetime import date as python_date

from pydantic import Field

from .base_enums import BookStatus
from .base_model import QuestBoardBaseModel


PROGRESS_COMPLETE: int = 100


def progress_percent(current_page: int, total_pages: int) -> int:
    """Return reading progress as a whole percentage, rounding halves up.

    :param current_page: Pages read so far, already clamped to ``[0, total_pages]``.
    :param total_pages: Total pages of the book, greater than zero.
    :returns: The progress between 0 and 100.
    """
    return (current_page * 200 + total_pages) // (2 * total_pages)


def status_for_progress(progress: int) -> BookStatus:
    """Derive the reading status from a progress percentage."""
    if progress >= PROGRESS_COMPLETE:
        return BookStatus.COMPLETED
    if progress > 0:
        return BookStatus.READING
    return BookStatus.NOT_STARTED


# ─── Book ─────────────────────────────────────────────────────────────────────
class Book(QuestBoardBaseModel):
    """A reading goal. ``status`` and ``progress`` are derived from the page counters."""

    id: str
    title: str
    author: str = Field(default="")
    total_points: int = Field(default=0, ge=0)
    status: BookStatus = Field(default=BookStatus.NOT_STARTED)
    deadline: python_date
    total_pages: int = Field(gt=0)
    current_page: int = Field(default=0, ge=0)
    progress: int = Field(default=0, ge=0, le=PROGRESS_COMPLETE)
    image: str | None = Field(default=None)

    @property
    def is_finished(self) -> bool:
        """Whether the book sits at 100% progress."""
        return self.progress >= PROGRESS_COMPLETE
