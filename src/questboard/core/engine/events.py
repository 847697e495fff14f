# ♥♥─── Engine Events ────────────────────────────────────────────────────────────
"""Output events a presentation layer can subscribe to (toasts, sounds, haptics)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from collections import defaultdict
from dataclasses import field, dataclass
from enum import StrEnum

from questboard.custom_logger import log


if TYPE_CHECKING:
    from collections.abc import Callable


class EventKind(StrEnum):
    """Kinds of events raised by the engine."""

    TASK_COMPLETED = "task_completed"
    HABIT_COMPLETED = "habit_completed"
    BOOK_FINISHED = "book_finished"
    ITEM_REDEEMED = "item_redeemed"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    JOURNAL_SAVED = "journal_saved"
    DAILY_BONUS = "daily_bonus"
    LEVEL_UP = "level_up"
    PENALTY_APPLIED = "penalty_applied"
    STORAGE_WARNING = "storage_warning"


@dataclass(frozen=True)
class EngineEvent:
    """A single notification with its kind-specific payload."""

    kind: EventKind
    payload: dict[str, Any] = field(default_factory=dict)


class EventBus:
    """Synchronous publish/subscribe hub for engine events.

    Handlers run in subscription order. A failing handler is logged and does
    not stop the others or the mutation that raised the event.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[EventKind | None, list[Callable[[EngineEvent], None]]] = defaultdict(list)

    def subscribe(self, kind: EventKind | None, handler: Callable[[EngineEvent], None]) -> Callable[[], None]:
        """Register ``handler`` for ``kind``, or for every kind when ``kind`` is None.

        :param kind: The event kind to listen to.
        :param handler: Callable receiving the event.
        :returns: A function that removes the subscription.
        """
        self._handlers[kind].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[kind]:
                self._handlers[kind].remove(handler)

        return unsubscribe

    def emit(self, kind: EventKind, **payload: Any) -> EngineEvent:
        """Build an event and deliver it to its subscribers."""
        event = EngineEvent(kind=kind, payload=payload)
        log.trace("Event {} {}", kind, payload)
        for handler in [*self._handlers[kind], *self._handlers[None]]:
            try:
                handler(event)
            except Exception as e:  # noqa: BLE001
                log.error("Event handler for {} failed: {}", kind, e)
        return event
