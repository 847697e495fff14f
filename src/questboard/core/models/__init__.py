# ♥♥─── QuestBoard Model Initialization ────────────────────────────────────────
"""Initialize the models package."""

from __future__ import annotations

from .base_enums import Priority, SyncState, BookStatus, HabitPeriod, PenaltyState, CalendarItemKind
from .base_model import QuestBoardSQLModel, QuestBoardBaseModel, new_entity_id
from .rank_model import RANK_TABLE, UNBOUNDED_XP, RankTier, RankStanding, rank_for_xp, validate_rank_table
from .shop_model import RedeemOutcome, WishlistItem
from .task_model import Task, Habit
from .state_model import DayMarkers, GameSnapshot, LevelUpNotice
from .journal_model import JournalEntry
from .library_model import PROGRESS_COMPLETE, Book, progress_percent, status_for_progress
from .cache_model import SnapshotJSON, CachedSnapshot
from .calendar_model import CalendarSyncRequest
from .creation_model import TaskCreate, BookCreate, HabitCreate, WishlistItemCreate


__all__ = [
    "PROGRESS_COMPLETE",
    "RANK_TABLE",
    "UNBOUNDED_XP",
    "Book",
    "BookCreate",
    "BookStatus",
    "CalendarItemKind",
    "CachedSnapshot",
    "CalendarSyncRequest",
    "DayMarkers",
    "GameSnapshot",
    "Habit",
    "HabitCreate",
    "HabitPeriod",
    "JournalEntry",
    "LevelUpNotice",
    "PenaltyState",
    "Priority",
    "QuestBoardBaseModel",
    "QuestBoardSQLModel",
    "RankStanding",
    "RankTier",
    "RedeemOutcome",
    "SnapshotJSON",
    "SyncState",
    "Task",
    "TaskCreate",
    "WishlistItem",
    "WishlistItemCreate",
    "new_entity_id",
    "progress_percent",
    "rank_for_xp",
    "status_for_progress",
    "validate_rank_table",
]
