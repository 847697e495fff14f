# ♥♥─── QuestBoard Creation Models ─────────────────────────────────────────────
"""Drafts validated before a new entity is added to a store."""

from __future__ import annotations

from typing import Any
from datetime import date as python_date

from pydantic import Field, field_validator

from questboard.utils import local_today

from .base_enums import Priority, HabitPeriod
from .base_model import QuestBoardBaseModel


def _clean_text(value: Any) -> str:
    return str(value or "").strip()


class TaskCreate(QuestBoardBaseModel):
    """Fields supplied by the user for a new task."""

    title: str = Field(min_length=1)
    duration: str = Field(default="30m", alias="time")
    points: int = Field(default=0, ge=0)
    day: python_date = Field(default_factory=local_today, alias="date")
    priority: Priority = Field(default=Priority.MEDIUM)
    notes: str | None = Field(default=None)

    @field_validator("title", mode="before")
    @classmethod
    def _parse_title(cls, value: Any) -> str:
        return _clean_text(value)


class HabitCreate(QuestBoardBaseModel):
    """Fields supplied by the user for a new habit."""

    title: str = Field(min_length=1)
    points: int = Field(default=0, ge=0)
    period: HabitPeriod = Field(default=HabitPeriod.MORNING, alias="type")
    reset_time: str = Field(default="")
    must_do: bool = Field(default=False)

    @field_validator("title", mode="before")
    @classmethod
    def _parse_title(cls, value: Any) -> str:
        return _clean_text(value)


class BookCreate(QuestBoardBaseModel):
    """Fields supplied by the user for a new book. Progress always starts at zero."""

    title: str = Field(min_length=1)
    author: str = Field(default="")
    total_points: int = Field(default=0, ge=0)
    deadline: python_date
    total_pages: int = Field(gt=0)
    image: str | None = Field(default=None)

    @field_validator("title", mode="before")
    @classmethod
    def _parse_title(cls, value: Any) -> str:
        return _clean_text(value)


class WishlistItemCreate(QuestBoardBaseModel):
    """Fields supplied by the user for a new wishlist item."""

    name: str = Field(min_length=1)
    cost: int = Field(default=0, ge=0)
    image: str | None = Field(default=None)

    @field_validator("name", mode="before")
    @classmethod
    def _parse_name(cls, value: Any) -> str:
        return _clean_text(value)
