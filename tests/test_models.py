"""Wire names, defaults and derived reading progress."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from questboard.core.models import (
    Task,
    BookStatus,
    HabitCreate,
    GameSnapshot,
    CalendarSyncRequest,
    progress_percent,
    status_for_progress,
)


class TestWireFormat:
    def test_task_uses_time_and_date_aliases(self) -> None:
        task = Task.from_api_dict({"id": "t", "title": "Run", "time": "20m", "points": 25, "date": "2025-03-14", "priority": "low"})

        assert task.duration == "20m"
        assert task.day == date(2025, 3, 14)
        assert task.to_api_dict() == {
            "id": "t",
            "title": "Run",
            "time": "20m",
            "points": 25,
            "completed": False,
            "date": "2025-03-14",
            "priority": "low",
            "notes": None,
        }

    def test_snapshot_missing_keys_load_as_defaults(self) -> None:
        snapshot = GameSnapshot.from_api_dict({"points": 12})

        assert snapshot.lifetime_xp == 0
        assert snapshot.tasks == []
        assert snapshot.last_evaluated_day is None

    def test_snapshot_ignores_unknown_keys(self) -> None:
        snapshot = GameSnapshot.from_api_dict({"points": 1, "user": {"email": "a@b.c"}})

        assert snapshot.points == 1

    def test_negative_points_are_invalid(self) -> None:
        with pytest.raises(ValidationError):
            GameSnapshot.from_api_dict({"points": -3})
        with pytest.raises(ValidationError):
            HabitCreate(title="Walk", points=-1)

    def test_calendar_times_must_be_clock_times(self) -> None:
        with pytest.raises(ValidationError):
            CalendarSyncRequest(title="Lunch", scheduled_time="noon")


class TestReadingProgress:
    @pytest.mark.parametrize(
        ("current", "total", "expected"),
        [(0, 300, 0), (1, 200, 1), (1, 8, 13), (3, 8, 38), (150, 300, 50), (299, 300, 100), (300, 300, 100)],
    )
    def test_progress_percent(self, current: int, total: int, expected: int) -> None:
        assert progress_percent(current, total) == expected

    def test_status_follows_progress(self) -> None:
        assert status_for_progress(0) == BookStatus.NOT_STARTED
        assert status_for_progress(1) == BookStatus.READING
        assert status_for_progress(99) == BookStatus.READING
        assert status_for_progress(100) == BookStatus.COMPLETED
