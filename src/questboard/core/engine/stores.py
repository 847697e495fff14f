# ♥♥─── Entity Stores ────────────────────────────────────────────────────────────
"""In-memory collections of tasks, habits, books, wishlist items and journal entries.

Completion toggles, book progress, redemptions and journal saves are the only
operations that move points. Each one finishes its flip and its ledger update
before the change hook runs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, cast
from collections.abc import Mapping

from pydantic import BaseModel

from questboard.utils import local_today
from questboard.core.models import (
    Book,
    Task,
    Habit,
    TaskCreate,
    BookCreate,
    DayMarkers,
    BookStatus,
    HabitCreate,
    JournalEntry,
    WishlistItem,
    RedeemOutcome,
    WishlistItemCreate,
    QuestBoardBaseModel,
    new_entity_id,
    progress_percent,
    status_for_progress,
)
from questboard.custom_logger import log

from .events import EventBus, EventKind


if TYPE_CHECKING:
    from datetime import date
    from collections.abc import Callable, Iterable, Iterator

    from .ledger import Ledger


Draft = BaseModel | Mapping[str, Any]


def _noop() -> None:
    return None


# ─── Base Store ───────────────────────────────────────────────────────────────
class EntityStore[T_Entity: QuestBoardBaseModel](ABC):
    """Ordered collection with add/update/remove keyed by entity id.

    Unknown ids are treated as no-ops so a delete racing a pending edit never
    raises. Fields listed in ``protected_fields`` are owned by the store and
    cannot be changed through :meth:`update`.
    """

    entity_name: ClassVar[str] = "entity"
    draft_model: ClassVar[type[QuestBoardBaseModel]]
    protected_fields: ClassVar[frozenset[str]] = frozenset({"id"})

    def __init__(self, ledger: Ledger, events: EventBus | None = None, on_change: Callable[[], None] | None = None) -> None:
        self.ledger: Ledger = ledger
        self.events: EventBus = events or ledger.events
        self.on_change: Callable[[], None] = on_change or _noop
        self._items: list[T_Entity] = []

    # ─── Reads ─────────────────────────────────────────────────────────────────
    @property
    def items(self) -> list[T_Entity]:
        """A shallow copy of the stored entities in insertion order."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T_Entity]:
        return iter(list(self._items))

    def get(self, entity_id: str) -> T_Entity | None:
        """Return the entity with ``entity_id`` or None."""
        index = self._index_of(entity_id)
        return None if index is None else self._items[index]

    def _index_of(self, entity_id: Any) -> int | None:
        if not isinstance(entity_id, str) or not entity_id:
            return None
        for index, item in enumerate(self._items):
            if cast("Any", item).id == entity_id:
                return index
        return None

    # ─── CRUD ──────────────────────────────────────────────────────────────────
    def add(self, draft: Draft) -> None:
        """Validate ``draft``, assign a fresh id and defaults, and append it.

        :param draft: A creation model or a mapping of its fields.
        :raises pydantic.ValidationError: If the draft is malformed.
        """
        payload = draft.model_dump() if isinstance(draft, BaseModel) else dict(draft)
        validated = self.draft_model.model_validate(payload)
        entity = self._build(new_entity_id(), validated)
        self._items.append(entity)
        log.debug("Added {} {}", self.entity_name, cast("Any", entity).id)
        self._on_added(entity)
        self.on_change()

    def update(self, entity_id: str, fields: Mapping[str, Any]) -> bool:
        """Merge ``fields`` into the matching entity.

        Keys may be field names or wire aliases. Protected and unknown keys are
        ignored with a warning, as are fields locked by the entity's current
        state (the points of a completed task, for instance).

        :param entity_id: Id of the entity to change.
        :param fields: Partial set of new values.
        :returns: True if an entity was updated, False if the id is unknown.
        :raises pydantic.ValidationError: If a new value is invalid.
        """
        index = self._index_of(entity_id)
        if index is None:
            log.debug("Ignoring update of unknown {} {}", self.entity_name, entity_id)
            return False

        previous = self._items[index]
        accepted = self._accept_fields(fields, self._locked_fields(previous))
        if not accepted:
            return False

        updated = type(previous).model_validate({**previous.model_dump(), **accepted})
        self._items[index] = updated
        self._on_updated(index, previous, updated)
        log.debug("Updated {} {}: {}", self.entity_name, entity_id, sorted(accepted))
        self.on_change()
        return True

    def remove(self, entity_id: str) -> bool:
        """Delete the matching entity. Points already earned are kept.

        :returns: True if an entity was removed, False if the id is unknown.
        """
        index = self._index_of(entity_id)
        if index is None:
            log.debug("Ignoring removal of unknown {} {}", self.entity_name, entity_id)
            return False

        del self._items[index]
        log.debug("Removed {} {}", self.entity_name, entity_id)
        self.on_change()
        return True

    def replace_all(self, items: Iterable[T_Entity]) -> None:
        """Swap the whole collection, used by hydration. No ledger effects, no change hook."""
        self._items = [self._normalize(item) for item in items]

    def clear(self) -> None:
        """Drop every entity without ledger effects."""
        self._items = []

    # ─── Hooks ─────────────────────────────────────────────────────────────────
    @abstractmethod
    def _build(self, entity_id: str, draft: Any) -> T_Entity:
        """Create a stored entity from a validated draft."""

    def _on_added(self, entity: T_Entity) -> None:
        """React to a freshly added entity."""

    def _on_updated(self, index: int, previous: T_Entity, updated: T_Entity) -> None:
        """React to a merged update stored at ``index``."""

    def _normalize(self, item: T_Entity) -> T_Entity:
        return item

    def _locked_fields(self, entity: T_Entity) -> frozenset[str]:
        """Fields that cannot change while ``entity`` is in its current state."""
        return frozenset()

    def _accept_fields(self, fields: Mapping[str, Any], locked: frozenset[str] = frozenset()) -> dict[str, Any]:
        model_fields = self._entity_type().model_fields
        by_alias = {info.alias: name for name, info in model_fields.items() if info.alias}
        accepted: dict[str, Any] = {}
        for key, value in fields.items():
            name = key if key in model_fields else by_alias.get(key)
            if name is None:
                log.warning("Ignoring unknown {} field '{}'", self.entity_name, key)
                continue
            if name in self.protected_fields:
                log.warning("Ignoring protected {} field '{}'", self.entity_name, key)
                continue
            if name in locked:
                log.warning("Ignoring {} field '{}' while its points are held", self.entity_name, key)
                continue
            accepted[name] = value
        return accepted

    @classmethod
    @abstractmethod
    def _entity_type(cls) -> type[T_Entity]:
        """The stored model class."""


# ─── Toggle Support ───────────────────────────────────────────────────────────
class ToggleableStore[T_Entity: Task | Habit](EntityStore[T_Entity]):
    """Store whose entities carry a ``completed`` flag worth ``points``.

    Completing awards the points, un-completing deducts them, so two toggles
    leave the ledger where it started.
    """

    protected_fields: ClassVar[frozenset[str]] = frozenset({"id", "completed"})
    completed_event: ClassVar[EventKind]

    def toggle(self, entity_id: str) -> bool | None:
        """Flip ``completed`` and move the entity's points accordingly.

        :returns: The new completion state, or None if the id is unknown.
        """
        entity = self.get(entity_id)
        if entity is None:
            log.debug("Ignoring toggle of unknown {} {}", self.entity_name, entity_id)
            return None

        completing = not entity.completed
        entity.completed = completing
        if completing:
            self.ledger.award(entity.points)
            self.events.emit(self.completed_event, id=entity.id, title=entity.title, points=entity.points)
        else:
            self.ledger.deduct(entity.points)

        self._after_toggle(entity)
        self.on_change()
        return completing

    def _locked_fields(self, entity: T_Entity) -> frozenset[str]:
        return frozenset({"points"}) if entity.completed else frozenset()

    def _after_toggle(self, entity: T_Entity) -> None:
        """React to a completed toggle before the change hook runs."""


# ─── Tasks ────────────────────────────────────────────────────────────────────
class TaskStore(ToggleableStore[Task]):
    """Tasks of every day, plus the once-per-day all-done bonus."""

    entity_name = "task"
    draft_model = TaskCreate
    completed_event = EventKind.TASK_COMPLETED

    def __init__(
        self,
        ledger: Ledger,
        events: EventBus | None = None,
        on_change: Callable[[], None] | None = None,
        *,
        markers: DayMarkers | None = None,
        daily_bonus: int = 500,
        clock: Callable[[], date] = local_today,
    ) -> None:
        super().__init__(ledger, events, on_change)
        self.markers: DayMarkers = markers or DayMarkers()
        self.daily_bonus: int = daily_bonus
        self.clock: Callable[[], date] = clock

    @classmethod
    def _entity_type(cls) -> type[Task]:
        return Task

    def _build(self, entity_id: str, draft: TaskCreate) -> Task:
        return Task(id=entity_id, completed=False, **draft.model_dump())

    def tasks_on(self, day: date) -> list[Task]:
        """Tasks scheduled on ``day``."""
        return [task for task in self._items if task.day == day]

    def _after_toggle(self, entity: Task) -> None:
        today = self.clock()
        if entity.day != today:
            return

        todays_tasks = self.tasks_on(today)
        others_done = all(task.completed for task in todays_tasks if task.id != entity.id)
        bonus_held = self.markers.daily_bonus_day == today

        if entity.completed:
            withdrawn_by_this = self.markers.bonus_withdrawn_day == today and self.markers.bonus_withdrawn_by == entity.id
            if not bonus_held and (others_done or withdrawn_by_this):
                self._grant_bonus(today)
        elif bonus_held and others_done:
            self.ledger.deduct(self.daily_bonus)
            self.markers.daily_bonus_day = None
            self.markers.bonus_withdrawn_day = today
            self.markers.bonus_withdrawn_by = entity.id
            log.info("Day no longer complete, bonus of {} withdrawn", self.daily_bonus)

    def _grant_bonus(self, today: date) -> None:
        self.ledger.award(self.daily_bonus)
        self.markers.daily_bonus_day = today
        self.markers.bonus_withdrawn_day = None
        self.markers.bonus_withdrawn_by = None
        log.success("Every task for {} is done, +{} bonus", today, self.daily_bonus)
        self.events.emit(EventKind.DAILY_BONUS, day=today, points=self.daily_bonus)


# ─── Habits ───────────────────────────────────────────────────────────────────
class HabitStore(ToggleableStore[Habit]):
    """Daily routines. Completion flags are cleared at each day rollover."""

    entity_name = "habit"
    draft_model = HabitCreate
    completed_event = EventKind.HABIT_COMPLETED

    @classmethod
    def _entity_type(cls) -> type[Habit]:
        return Habit

    def _build(self, entity_id: str, draft: HabitCreate) -> Habit:
        return Habit(id=entity_id, completed=False, **draft.model_dump())

    def reset_completion(self) -> int:
        """Mark every habit incomplete without touching the ledger.

        :returns: How many habits were completed before the reset.
        """
        completed = 0
        for habit in self._items:
            if habit.completed:
                completed += 1
                habit.completed = False
        return completed


# ─── Books ────────────────────────────────────────────────────────────────────
class BookStore(EntityStore[Book]):
    """Reading goals. Finishing a book awards its points once, un-finishing takes them back."""

    entity_name = "book"
    draft_model = BookCreate
    protected_fields: ClassVar[frozenset[str]] = frozenset({"id", "status", "progress", "current_page"})

    @classmethod
    def _entity_type(cls) -> type[Book]:
        return Book

    def _build(self, entity_id: str, draft: BookCreate) -> Book:
        return Book(id=entity_id, status=BookStatus.NOT_STARTED, progress=0, current_page=0, **draft.model_dump())

    def set_progress(self, book_id: str, page: int) -> bool:
        """Move the reading position of a book.

        ``page`` is clamped to ``[0, total_pages]``. Reaching 100% awards
        ``total_points``; dropping below 100% deducts them. Calls that stay on
        the same side of 100% never move points.

        :returns: True if the book exists, False otherwise.
        """
        index = self._index_of(book_id)
        if index is None:
            log.debug("Ignoring progress of unknown book {}", book_id)
            return False

        book = self._items[index]
        self._items[index] = self._settle(book, page, was_finished=book.is_finished)
        self.on_change()
        return True

    def _locked_fields(self, entity: Book) -> frozenset[str]:
        return frozenset({"total_points"}) if entity.is_finished else frozenset()

    def overdue(self, today: date) -> list[Book]:
        """Unfinished books whose deadline is before ``today``."""
        return [book for book in self._items if book.deadline < today and not book.is_finished]

    def _on_updated(self, index: int, previous: Book, updated: Book) -> None:
        if updated.total_pages != previous.total_pages:
            self._items[index] = self._settle(updated, updated.current_page, was_finished=previous.is_finished)

    def _settle(self, book: Book, page: int, *, was_finished: bool) -> Book:
        current_page = min(max(int(page), 0), book.total_pages)
        progress = progress_percent(current_page, book.total_pages)
        settled = book.model_copy(update={"current_page": current_page, "progress": progress, "status": status_for_progress(progress)})

        if settled.is_finished and not was_finished:
            self.ledger.award(settled.total_points)
            log.success("Finished '{}', +{} pts", settled.title, settled.total_points)
            self.events.emit(EventKind.BOOK_FINISHED, id=settled.id, title=settled.title, points=settled.total_points)
        elif was_finished and not settled.is_finished:
            self.ledger.deduct(settled.total_points)
            log.info("'{}' reopened at {}%, -{} pts", settled.title, progress, settled.total_points)
        return settled

    def _normalize(self, item: Book) -> Book:
        current_page = min(max(item.current_page, 0), item.total_pages)
        progress = progress_percent(current_page, item.total_pages)
        return item.model_copy(update={"current_page": current_page, "progress": progress, "status": status_for_progress(progress)})


# ─── Wishlist ─────────────────────────────────────────────────────────────────
class WishlistStore(EntityStore[WishlistItem]):
    """Rewards bought with points. Redemption is one-way, spent points are not refunded."""

    entity_name = "wishlist item"
    draft_model = WishlistItemCreate
    protected_fields: ClassVar[frozenset[str]] = frozenset({"id", "redeemed"})

    @classmethod
    def _entity_type(cls) -> type[WishlistItem]:
        return WishlistItem

    def _build(self, entity_id: str, draft: WishlistItemCreate) -> WishlistItem:
        return WishlistItem(id=entity_id, redeemed=False, **draft.model_dump())

    def redeem(self, item_id: str) -> RedeemOutcome | None:
        """Spend the item's cost if the balance allows it.

        An unaffordable item is reported through the outcome's ``shortfall``
        and an ``INSUFFICIENT_FUNDS`` event; nothing changes.

        :returns: The outcome, or None if the id is unknown.
        """
        item = self.get(item_id)
        if item is None:
            log.debug("Ignoring redemption of unknown wishlist item {}", item_id)
            return None

        if item.redeemed:
            log.info("'{}' was already redeemed", item.name)
            return RedeemOutcome(item_id=item.id, already_redeemed=True)

        if not self.ledger.can_afford(item.cost):
            shortfall = item.cost - self.ledger.points
            log.info("Cannot redeem '{}': {} more points needed", item.name, shortfall)
            self.events.emit(EventKind.INSUFFICIENT_FUNDS, id=item.id, name=item.name, shortfall=shortfall)
            return RedeemOutcome(item_id=item.id, shortfall=shortfall)

        self.ledger.deduct(item.cost)
        item.redeemed = True
        log.success("Redeemed '{}' for {} pts", item.name, item.cost)
        self.events.emit(EventKind.ITEM_REDEEMED, id=item.id, name=item.name, cost=item.cost)
        self.on_change()
        return RedeemOutcome(item_id=item.id, redeemed=True)


# ─── Journal ──────────────────────────────────────────────────────────────────
class JournalDraft(QuestBoardBaseModel):
    """Fields of a journal save."""

    text: str
    has_audio: bool = False


class JournalStore(EntityStore[JournalEntry]):
    """Journal entries. Every save earns a fixed bonus that is never taken back."""

    entity_name = "journal entry"
    draft_model = JournalDraft
    protected_fields: ClassVar[frozenset[str]] = frozenset({"id", "created_at", "has_audio"})

    def __init__(
        self,
        ledger: Ledger,
        events: EventBus | None = None,
        on_change: Callable[[], None] | None = None,
        *,
        bonus: int = 50,
    ) -> None:
        super().__init__(ledger, events, on_change)
        self.bonus: int = bonus

    @classmethod
    def _entity_type(cls) -> type[JournalEntry]:
        return JournalEntry

    def _build(self, entity_id: str, draft: JournalDraft) -> JournalEntry:
        return JournalEntry(id=entity_id, text=draft.text, has_audio=draft.has_audio)

    def _on_added(self, entity: JournalEntry) -> None:
        self.ledger.award(self.bonus)
        self.events.emit(EventKind.JOURNAL_SAVED, id=entity.id, points=self.bonus, has_audio=entity.has_audio)

    def save_entry(self, text: str, has_audio: bool = False) -> None:
        """Record a journal entry stamped now and award the journal bonus."""
        self.add(JournalDraft(text=text, has_audio=has_audio))

    def entries_on(self, day: date) -> list[JournalEntry]:
        """Entries created on ``day`` in local time."""
        return [entry for entry in self._items if entry.written_on(day)]
