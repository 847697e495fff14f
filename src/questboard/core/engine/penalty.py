# ♥♥─── Daily Penalty Evaluator ──────────────────────────────────────────────────
"""Day-rollover evaluation of everything left undone since the last session."""

from __future__ import annotations

from typing import TYPE_CHECKING
from datetime import date as python_date

from pydantic import Field

from questboard.utils import previous_day
from questboard.core.models import DayMarkers, PenaltyState, QuestBoardBaseModel
from questboard.custom_logger import log

from .events import EventBus, EventKind


if TYPE_CHECKING:
    from .ledger import Ledger
    from .stores import BookStore, HabitStore, TaskStore, JournalStore


class PenaltyRates(QuestBoardBaseModel):
    """Points lost per missed item."""

    task: int = Field(default=20, ge=0)
    habit: int = Field(default=10, ge=0)
    book: int = Field(default=20, ge=0)
    journal: int = Field(default=50, ge=0)


class PenaltyReport(QuestBoardBaseModel):
    """Breakdown of one evaluation.

    :param overdue_tasks: Titles of past tasks left incomplete.
    :param missed_habits: Titles of habits not completed before the rollover.
    :param overdue_books: Titles of unfinished books past their deadline.
    :param missed_journal: True when no entry was written yesterday.
    :param total: Penalty points charged to the ledger.
    :param deducted: Points actually removed after clamping at zero.
    """

    day: python_date
    overdue_tasks: list[str] = Field(default_factory=list)
    missed_habits: list[str] = Field(default_factory=list)
    overdue_books: list[str] = Field(default_factory=list)
    missed_journal: bool = False
    total: int = 0
    deducted: int = 0


class DailyPenaltyEvaluator:
    """Runs at most once per calendar day, keyed on ``markers.last_evaluated_day``."""

    def __init__(
        self,
        ledger: Ledger,
        tasks: TaskStore,
        habits: HabitStore,
        books: BookStore,
        journal: JournalStore,
        markers: DayMarkers,
        rates: PenaltyRates | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.ledger = ledger
        self.tasks = tasks
        self.habits = habits
        self.books = books
        self.journal = journal
        self.markers = markers
        self.rates = rates or PenaltyRates()
        self.events = events or ledger.events
        self.state = PenaltyState.SETTLED

    def run(self, today: python_date) -> PenaltyReport | None:
        """Evaluate penalties for the rollover into ``today``.

        The first session ever only records ``today``. A second call on the
        same day does nothing.

        :param today: The local calendar day of the session.
        :returns: The report when penalties were evaluated, otherwise None.
        """
        if self.state == PenaltyState.EVALUATING:
            log.warning("Penalty evaluation already in progress, skipping")
            return None

        last_day = self.markers.last_evaluated_day
        if last_day == today:
            log.debug("Penalties already evaluated for {}", today)
            return None

        if last_day is None:
            log.info("First session, starting penalty tracking from {}", today)
            self.markers.last_evaluated_day = today
            return None

        self.state = PenaltyState.EVALUATING
        try:
            report = self._evaluate(today)
            report.deducted = self.ledger.deduct(report.total)
            reset_count = self.habits.reset_completion()
            self.markers.last_evaluated_day = today
        finally:
            self.state = PenaltyState.SETTLED

        log.info(
            "Daily evaluation for {}: -{} pts ({} tasks, {} habits, {} books, journal missed: {}), {} habits reset",
            today,
            report.total,
            len(report.overdue_tasks),
            len(report.missed_habits),
            len(report.overdue_books),
            report.missed_journal,
            reset_count,
        )
        self.events.emit(EventKind.PENALTY_APPLIED, report=report)
        return report

    def _evaluate(self, today: python_date) -> PenaltyReport:
        overdue_tasks = [task.title for task in self.tasks if task.day < today and not task.completed]
        missed_habits = [habit.title for habit in self.habits if not habit.completed]
        overdue_books = [book.title for book in self.books.overdue(today)]
        missed_journal = not self.journal.entries_on(previous_day(today))

        total = (
            len(overdue_tasks) * self.rates.task
            + len(missed_habits) * self.rates.habit
            + len(overdue_books) * self.rates.book
            + (self.rates.journal if missed_journal else 0)
        )
        return PenaltyReport(
            day=today,
            overdue_tasks=overdue_tasks,
            missed_habits=missed_habits,
            overdue_books=overdue_books,
            missed_journal=missed_journal,
            total=total,
        )
