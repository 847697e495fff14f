# ♥♥─── QuestBoard Cache Models ────────────────────────────────────────────────
from __future__ import annotations

from typing import Any
from datetime import datetime

from sqlmodel import Field, Column
from sqlalchemy import JSON as SA_JSON
from sqlalchemy.types import TypeDecorator

from questboard.utils import DateTimeHandler

from .base_model import QuestBoardSQLModel


class SnapshotJSON(TypeDecorator):
    """SQLAlchemy type storing a state document as JSON with its wire names."""

    impl = SA_JSON()
    cache_ok = True

    def process_bind_param(self, value: Any | None, _dialect: Any) -> Any | None:
        """Serialize pydantic models before binding."""
        if value is None:
            return None
        if hasattr(value, "to_api_dict"):
            return value.to_api_dict()
        if hasattr(value, "model_dump"):
            return value.model_dump(mode="json", by_alias=True)
        return value

    def process_result_value(self, value: Any | None, _dialect: Any) -> Any | None:
        """Return the stored JSON as plain data."""
        return value


# ─── Cached Snapshot ──────────────────────────────────────────────────────────
class CachedSnapshot(QuestBoardSQLModel, table=True):
    """Last known state of one user, keyed by user id."""

    __tablename__ = "cached_snapshot"  # type: ignore

    payload: dict[str, Any] = Field(default_factory=dict, sa_column=Column(SnapshotJSON))
    saved_at: datetime = Field(default_factory=DateTimeHandler.get_utc_now)
