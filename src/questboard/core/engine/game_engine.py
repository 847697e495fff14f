# ♥♥─── Game Engine ──────────────────────────────────────────────────────────────
"""Composition root wiring the ledger, stores, penalty evaluator and synchronizer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
import asyncio

from questboard.ui import icons
from questboard.utils import local_today
from questboard.core.client import StateAPI, CalendarClient, SuggestionError, CalendarSyncError, StateServiceError, KeywordScoreSuggester
from questboard.core.models import RANK_TABLE, DayMarkers, GameSnapshot
from questboard.custom_logger import log, logged
from questboard.core.repositories import SnapshotVault
from questboard.core.services.sync_service import HydrationSource, PersistenceSynchronizer

from .events import EventBus
from .ledger import Ledger
from .stores import BookStore, TaskStore, HabitStore, JournalStore, WishlistStore
from .penalty import PenaltyRates, PenaltyReport, DailyPenaltyEvaluator


if TYPE_CHECKING:
    from datetime import date
    from collections.abc import Callable, Sequence

    from questboard.core.client import ScoreSuggester
    from questboard.core.models import RankTier, LevelUpNotice, CalendarSyncRequest
    from questboard.config.app_config_model import GameSettings
    from questboard.core.services.sync_service import StateService, SnapshotCache


class GameEngine:
    """The single owner of all mutable game state of one signed-in user.

    Collaborators default to the HTTP clients, the SQLite cache and the
    keyword suggester built from the application settings.

    :param settings: Point values and debounce timing.
    :param service: Remote state service.
    :param cache: Local snapshot cache.
    :param suggester: Task score suggester.
    :param calendar: Calendar sync collaborator, None disables calendar sync.
    :param clock: Returns the local calendar day.
    :param rank_table: Rank tiers, strictly increasing.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        *,
        service: StateService | None = None,
        cache: SnapshotCache | None = None,
        suggester: ScoreSuggester | None = None,
        calendar: CalendarClient | None = None,
        clock: Callable[[], date] = local_today,
        rank_table: Sequence[RankTier] = RANK_TABLE,
    ) -> None:
        if settings is None:
            from questboard.config.app_config import app_config

            settings = app_config.game
        self.settings: GameSettings = settings
        self.clock = clock

        self.events = EventBus()
        self.ledger = Ledger(self.events, rank_table)
        self.markers = DayMarkers()

        notify = self._notify_change
        self.tasks = TaskStore(
            self.ledger,
            self.events,
            notify,
            markers=self.markers,
            daily_bonus=settings.daily_bonus,
            clock=clock,
        )
        self.habits = HabitStore(self.ledger, self.events, notify)
        self.books = BookStore(self.ledger, self.events, notify)
        self.wishlist = WishlistStore(self.ledger, self.events, notify)
        self.journal = JournalStore(self.ledger, self.events, notify, bonus=settings.journal_bonus)

        self.evaluator = DailyPenaltyEvaluator(
            self.ledger,
            self.tasks,
            self.habits,
            self.books,
            self.journal,
            self.markers,
            rates=PenaltyRates(
                task=settings.task_penalty,
                habit=settings.habit_penalty,
                book=settings.book_penalty,
                journal=settings.journal_penalty,
            ),
            events=self.events,
        )
        self.synchronizer = PersistenceSynchronizer(
            service=service or StateAPI(),
            cache=cache or SnapshotVault(),
            take_snapshot=self.snapshot,
            apply_snapshot=self.apply_snapshot,
            events=self.events,
            debounce_seconds=settings.debounce_seconds,
        )
        self.suggester: ScoreSuggester = suggester or KeywordScoreSuggester()
        self.calendar: CalendarClient | None = calendar
        self._background: set[asyncio.Task[Any]] = set()

    # ─── Ledger Views ──────────────────────────────────────────────────────────
    @property
    def points(self) -> int:
        return self.ledger.points

    @property
    def lifetime_xp(self) -> int:
        return self.ledger.lifetime_xp

    @property
    def rank(self) -> str:
        return self.ledger.rank

    @property
    def next_rank_xp(self) -> float:
        return self.ledger.next_rank_xp

    @property
    def level_up(self) -> LevelUpNotice:
        return self.ledger.level_up

    def dismiss_level_up(self) -> None:
        """Clear the pending level-up notice."""
        self.ledger.dismiss_level_up()

    def award(self, amount: int) -> None:
        """Award points outside any store, e.g. a manual bonus."""
        self.ledger.award(amount)
        self._notify_change()

    def deduct(self, amount: int) -> int:
        """Deduct points outside any store.

        :returns: The points actually removed.
        """
        removed = self.ledger.deduct(amount)
        self._notify_change()
        return removed

    # ─── Snapshots ─────────────────────────────────────────────────────────────
    def snapshot(self) -> GameSnapshot:
        """Return the complete current state as one document."""
        return GameSnapshot(
            points=self.ledger.points,
            lifetime_xp=self.ledger.lifetime_xp,
            tasks=[task.model_copy() for task in self.tasks.items],
            habits=[habit.model_copy() for habit in self.habits.items],
            books=[book.model_copy() for book in self.books.items],
            wishlist=[item.model_copy() for item in self.wishlist.items],
            journal_entries=[entry.model_copy() for entry in self.journal.items],
            last_evaluated_day=self.markers.last_evaluated_day,
            daily_bonus_day=self.markers.daily_bonus_day,
            bonus_withdrawn_day=self.markers.bonus_withdrawn_day,
            bonus_withdrawn_by=self.markers.bonus_withdrawn_by,
        )

    @logged
    def apply_snapshot(self, snapshot: GameSnapshot | None) -> None:
        """Replace every collection and counter, None meaning a fresh state.

        No awards, deductions or events result from applying a snapshot.
        """
        snapshot = snapshot or GameSnapshot()
        self.ledger.load(snapshot.points, snapshot.lifetime_xp)
        self.tasks.replace_all(task.model_copy() for task in snapshot.tasks)
        self.habits.replace_all(habit.model_copy() for habit in snapshot.habits)
        self.books.replace_all(book.model_copy() for book in snapshot.books)
        self.wishlist.replace_all(item.model_copy() for item in snapshot.wishlist)
        self.journal.replace_all(entry.model_copy() for entry in snapshot.journal_entries)
        self.markers.last_evaluated_day = snapshot.last_evaluated_day
        self.markers.daily_bonus_day = snapshot.daily_bonus_day
        self.markers.bonus_withdrawn_day = snapshot.bonus_withdrawn_day
        self.markers.bonus_withdrawn_by = snapshot.bonus_withdrawn_by

    # ─── Session ───────────────────────────────────────────────────────────────
    async def start_session(self, user_id: str) -> PenaltyReport | None:
        """Hydrate the state of ``user_id`` then evaluate the day rollover.

        :returns: The penalty report when a rollover was evaluated.
        """
        source = await self.synchronizer.hydrate(user_id)
        log.info("{} Session started for {} ({})", icons.STAR, user_id, source)

        marker_before = self.markers.last_evaluated_day
        report = self.evaluator.run(self.clock())
        if report is not None or self.markers.last_evaluated_day != marker_before or source == HydrationSource.CACHE:
            self._notify_change()
        return report

    def evaluate_day(self) -> PenaltyReport | None:
        """Re-run the daily evaluation, for sessions that stay open past midnight."""
        report = self.evaluator.run(self.clock())
        if report is not None:
            self._notify_change()
        return report

    async def end_session(self) -> None:
        """Flush pending writes, wait for background work and release clients."""
        await self.synchronizer.flush()
        self.synchronizer.close()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        for collaborator in (self.synchronizer.service, self.calendar):
            close = getattr(collaborator, "close_client_session", None)
            if close is not None:
                await close()

    async def logout(self) -> None:
        """Save what is pending, then forget the user and return to a fresh state."""
        await self.synchronizer.flush()
        self.synchronizer.detach()
        self.reset()

    def reset(self) -> None:
        """Return every collection and counter to defaults without persisting."""
        self.apply_snapshot(None)

    def _notify_change(self) -> None:
        self.synchronizer.notify_change()

    # ─── Collaborators ─────────────────────────────────────────────────────────
    async def suggest_points(self, title: str) -> int:
        """Suggested points for a new task, the configured default when unavailable."""
        try:
            return await self.suggester.suggest(title)
        except (SuggestionError, StateServiceError, TimeoutError) as e:
            log.warning("Score suggestion failed for '{}': {}", title, e)
            return self.settings.default_points

    def sync_to_calendar(self, request: CalendarSyncRequest) -> asyncio.Task[bool] | None:
        """Mirror an item into the user's calendar in the background.

        Failures are logged and never reach the caller.

        :returns: The background task, or None when calendar sync is disabled.
        """
        if self.calendar is None:
            log.debug("Calendar sync disabled, skipping '{}'", request.title)
            return None

        task = asyncio.create_task(self._push_calendar(request))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _push_calendar(self, request: CalendarSyncRequest) -> bool:
        if self.calendar is None:
            return False
        try:
            return await self.calendar.sync(request)
        except CalendarSyncError as e:
            log.warning("{} Calendar sync failed for '{}': {}", icons.CALENDAR, request.title, e)
            return False
