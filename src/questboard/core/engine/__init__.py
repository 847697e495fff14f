from __future__ import annotations

from .events import EventBus, EventKind, EngineEvent
from .ledger import Ledger
from .stores import BookStore, TaskStore, HabitStore, EntityStore, JournalStore, WishlistStore
from .penalty import PenaltyRates, PenaltyReport, DailyPenaltyEvaluator


__all__ = [
    "BookStore",
    "DailyPenaltyEvaluator",
    "EngineEvent",
    "EntityStore",
    "EventBus",
    "EventKind",
    "HabitStore",
    "JournalStore",
    "Ledger",
    "PenaltyRates",
    "PenaltyReport",
    "TaskStore",
    "WishlistStore",
]
