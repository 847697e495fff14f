"""HTTP clients against a mocked transport, and the score suggester."""

from __future__ import annotations

import json
import random
from datetime import date

import httpx
import pytest

from questboard.core.client import (
    StateAPI,
    CalendarClient,
    SuggestionError,
    CalendarSyncError,
    StateServiceError,
    KeywordScoreSuggester,
    keyword_score,
)
from questboard.core.models import GameSnapshot, CalendarSyncRequest
from questboard.config.app_config_model import RemoteSettings
from questboard.core.engine.game_engine import GameEngine


def _settings(token: str | None = "s3cret") -> RemoteSettings:
    return RemoteSettings(base_url="http://state.test", api_token=token, timeout_seconds=5)


class TestStateAPI:
    async def test_load_parses_wire_document(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"points": 40, "lifetimeXP": 900, "habits": [{"id": "h", "title": "Walk", "type": "night", "resetTime": "21:00 - 22:00"}]})

        async with StateAPI(_settings(), transport=httpx.MockTransport(handler)) as api:
            snapshot = await api.load_state("alice")

        assert snapshot is not None
        assert snapshot.lifetime_xp == 900
        assert snapshot.habits[0].period == "night"
        assert snapshot.habits[0].reset_time == "21:00 - 22:00"
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/api/state/alice"
        assert seen[0].headers["Authorization"] == "Bearer s3cret"

    async def test_not_found_returns_none(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(404, json={"error": "NotFound", "message": "no state"}))

        async with StateAPI(_settings(), transport=transport) as api:
            assert await api.load_state("ghost") is None

    async def test_server_error_raises(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(503, json={"message": "maintenance"}))

        async with StateAPI(_settings(), transport=transport) as api:
            with pytest.raises(StateServiceError) as excinfo:
                await api.load_state("alice")

        assert excinfo.value.status_code == 503
        assert "maintenance" in str(excinfo.value)

    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with StateAPI(_settings(), transport=httpx.MockTransport(handler)) as api:
            with pytest.raises(StateServiceError) as excinfo:
                await api.save_state("alice", GameSnapshot())

        assert excinfo.value.status_code is None

    async def test_save_puts_camel_case_document(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(204)

        snapshot = GameSnapshot(points=10, lifetime_xp=20, last_evaluated_day=date(2025, 3, 14))
        async with StateAPI(_settings(token=None), transport=httpx.MockTransport(handler)) as api:
            assert await api.save_state("alice", snapshot)

        assert bodies[0]["lifetimeXP"] == 20
        assert bodies[0]["lastEvaluatedDay"] == "2025-03-14"
        assert bodies[0]["journalEntries"] == []


class TestCalendarClient:
    async def test_sync_posts_request(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/calendar/sync"
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True})

        request = CalendarSyncRequest(title="Dentist", scheduled_time="09:30", end_time="10:00", day=date(2025, 3, 20), kind="event")
        async with CalendarClient(_settings(), transport=httpx.MockTransport(handler)) as calendar:
            assert await calendar.sync(request)

        assert bodies[0] == {"title": "Dentist", "scheduledTime": "09:30", "endTime": "10:00", "date": "2025-03-20", "type": "event"}

    async def test_engine_swallows_calendar_failures(self, game_settings, service, cache, today) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"message": "calendar not connected"}))
        calendar = CalendarClient(_settings(), transport=transport)
        engine = GameEngine(game_settings, service=service, cache=cache, calendar=calendar, clock=lambda: today)

        task = engine.sync_to_calendar(CalendarSyncRequest(title="Standup"))

        assert task is not None
        assert await task is False
        await engine.end_session()

    async def test_calendar_error_type(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(500))

        async with CalendarClient(_settings(), transport=transport) as calendar:
            with pytest.raises(CalendarSyncError):
                await calendar.sync(CalendarSyncRequest(title="Standup"))


class TestSuggestions:
    @pytest.mark.parametrize(
        ("title", "score"),
        [
            ("Gym session", 300),
            ("Morning RUN", 250),
            ("Study chapter 4", 150),
            ("Code review", 500),
            ("Yoga flow", 200),
            ("Clean kitchen", 120),
            ("Journal prompt", 180),
            ("Call grandma", 100),
        ],
    )
    def test_keyword_score(self, title: str, score: int) -> None:
        assert keyword_score(title) == score

    async def test_suggestion_jitter_stays_in_range(self) -> None:
        suggester = KeywordScoreSuggester(rng=random.Random(7))

        scores = [await suggester.suggest("workout") for _ in range(50)]

        assert all(290 <= score <= 309 for score in scores)

    async def test_engine_falls_back_to_default_points(self, engine: GameEngine) -> None:
        class Broken:
            async def suggest(self, title: str) -> int:
                raise TimeoutError

        engine.suggester = Broken()

        assert await engine.suggest_points("anything") == engine.settings.default_points

    async def test_blank_title_has_no_suggestion(self) -> None:
        with pytest.raises(SuggestionError):
            await KeywordScoreSuggester().suggest("   ")

    async def test_engine_uses_default_for_blank_titles(self, engine: GameEngine) -> None:
        assert await engine.suggest_points("") == engine.settings.default_points
