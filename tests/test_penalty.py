"""Day rollover penalties and habit resets."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

from freezegun import freeze_time

from questboard.core.models import GameSnapshot, JournalEntry, PenaltyState
from questboard.core.engine import EventKind
from questboard.core.engine.game_engine import GameEngine

from .conftest import Recorder


def _seed_rollover(engine: GameEngine, today: date) -> None:
    """Put the engine in the state left by a session that ended yesterday."""
    yesterday = today - timedelta(days=1)
    engine.ledger.load(1000, 1000)
    engine.markers.last_evaluated_day = yesterday
    engine.tasks.add({"title": "Overdue report", "points": 40, "date": yesterday.isoformat()})
    engine.tasks.add({"title": "Done yesterday", "points": 40, "date": yesterday.isoformat()})
    engine.tasks.toggle(engine.tasks.items[1].id)
    engine.tasks.add({"title": "Due today", "points": 40, "date": today.isoformat()})
    engine.habits.add({"title": "Walk", "points": 15})
    engine.habits.add({"title": "Floss", "points": 5})
    engine.habits.toggle(engine.habits.items[1].id)
    engine.books.add({"title": "Late book", "totalPages": 100, "deadline": yesterday.isoformat()})
    engine.books.add({"title": "On time", "totalPages": 100, "deadline": today.isoformat()})
    engine.ledger.load(1000, 1000)


class TestDailyPenalty:
    def test_first_session_only_records_the_day(self, engine: GameEngine, today: date) -> None:
        engine.ledger.load(100, 100)
        engine.habits.add({"title": "Walk", "points": 15})

        report = engine.evaluator.run(today)

        assert report is None
        assert engine.markers.last_evaluated_day == today
        assert engine.points == 100

    def test_rollover_charges_each_missed_item(self, engine: GameEngine, recorder: Recorder, today: date) -> None:
        _seed_rollover(engine, today)

        report = engine.evaluator.run(today)

        assert report is not None
        assert report.overdue_tasks == ["Overdue report"]
        assert report.missed_habits == ["Walk"]
        assert report.overdue_books == ["Late book"]
        assert report.missed_journal is True
        assert report.total == 20 + 10 + 20 + 50
        assert engine.points == 1000 - 100
        assert engine.lifetime_xp == 1000 - 100
        assert recorder.seen[-1].kind == EventKind.PENALTY_APPLIED
        assert recorder.seen[-1].payload["report"] == report

    def test_habits_are_reset_without_ledger_effect(self, engine: GameEngine, today: date) -> None:
        _seed_rollover(engine, today)

        report = engine.evaluator.run(today)

        assert report is not None
        assert all(not habit.completed for habit in engine.habits)
        assert engine.points == 1000 - report.total

    def test_runs_at_most_once_per_day(self, engine: GameEngine, today: date) -> None:
        _seed_rollover(engine, today)

        first = engine.evaluator.run(today)
        second = engine.evaluator.run(today)

        assert first is not None
        assert second is None
        assert engine.points == 1000 - first.total
        assert engine.evaluator.state == PenaltyState.SETTLED

    def test_penalty_clamps_at_zero(self, engine: GameEngine, today: date) -> None:
        _seed_rollover(engine, today)
        engine.ledger.load(30, 30)

        report = engine.evaluator.run(today)

        assert report is not None
        assert report.deducted == 30
        assert (engine.points, engine.lifetime_xp) == (0, 0)

    def test_journal_entry_yesterday_avoids_journal_penalty(self, engine: GameEngine, today: date) -> None:
        _seed_rollover(engine, today)
        written = datetime.combine(today - timedelta(days=1), datetime.min.time()).replace(hour=12)
        engine.journal.replace_all([JournalEntry(id="j1", text="Reflected", created_at=written.astimezone(UTC))])

        report = engine.evaluator.run(today)

        assert report is not None
        assert report.missed_journal is False
        assert report.total == 50

    def test_nothing_missed_means_zero_penalty(self, engine: GameEngine, today: date) -> None:
        engine.apply_snapshot(
            GameSnapshot.model_validate({
                "points": 10,
                "lifetimeXP": 10,
                "lastEvaluatedDay": (today - timedelta(days=3)).isoformat(),
                "journalEntries": [{"id": "j", "text": "x", "date": datetime.combine(today - timedelta(days=1), datetime.min.time()).replace(hour=12).astimezone(UTC).isoformat()}],
            })
        )

        report = engine.evaluator.run(today)

        assert report is not None
        assert report.total == 0
        assert engine.points == 10


class TestPenaltyAcrossSessions:
    async def test_reload_on_same_day_does_not_reapply(self, engine: GameEngine, service, cache, game_settings, today: date) -> None:
        _seed_rollover(engine, today)
        service.documents["alice"] = engine.snapshot()

        report = await engine.start_session("alice")
        assert report is not None
        await engine.end_session()
        points_after_first = engine.points

        reloaded = GameEngine(game_settings, service=service, cache=cache, clock=lambda: today)
        second = await reloaded.start_session("alice")

        assert second is None
        assert reloaded.points == points_after_first
        assert reloaded.markers.last_evaluated_day == today
        await reloaded.end_session()

    @freeze_time("2025-03-15 12:00:00")
    async def test_wall_clock_rollover(self, game_settings, service, cache) -> None:
        engine = GameEngine(game_settings, service=service, cache=cache)
        service.documents["bob"] = GameSnapshot.model_validate({
            "points": 500,
            "lifetimeXP": 500,
            "lastEvaluatedDay": "2025-03-13",
            "habits": [{"id": "h1", "title": "Walk", "points": 15, "completed": True}],
        })

        report = await engine.start_session("bob")

        assert report is not None
        assert report.day == date(2025, 3, 15)
        assert report.missed_habits == []
        assert report.missed_journal is True
        assert engine.points == 450
        assert engine.habits.items[0].completed is False
