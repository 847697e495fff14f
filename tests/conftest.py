from __future__ import annotations

from typing import Any
from collections.abc import Iterator
import asyncio
from datetime import date

import pytest

from questboard.core.client import StateServiceError
from questboard.core.models import GameSnapshot
from questboard.core.engine import EventBus, EventKind, Ledger
from questboard.config.app_config_model import GameSettings
from questboard.core.repositories import IN_MEMORY_URL, SnapshotVault
from questboard.core.engine.game_engine import GameEngine


TODAY = date(2025, 3, 14)


class FakeStateService:
    """In-memory stand-in for the remote state service."""

    def __init__(self, documents: dict[str, GameSnapshot] | None = None, load_delay: float = 0.0, save_delay: float = 0.0) -> None:
        self.documents: dict[str, GameSnapshot] = dict(documents or {})
        self.load_delay = load_delay
        self.save_delay = save_delay
        self.active_saves = 0
        self.peak_saves = 0
        self.fail_loads = False
        self.fail_saves = False
        self.load_calls: list[str] = []
        self.saved: list[tuple[str, GameSnapshot]] = []

    async def load_state(self, user_id: str) -> GameSnapshot | None:
        self.load_calls.append(user_id)
        if self.load_delay:
            await asyncio.sleep(self.load_delay)
        if self.fail_loads:
            raise StateServiceError("service down", status_code=503)
        document = self.documents.get(user_id)
        return None if document is None else document.model_copy(deep=True)

    async def save_state(self, user_id: str, snapshot: GameSnapshot) -> bool:
        if self.fail_saves:
            raise StateServiceError("write rejected", status_code=500)
        self.active_saves += 1
        self.peak_saves = max(self.peak_saves, self.active_saves)
        try:
            if self.save_delay:
                await asyncio.sleep(self.save_delay)
            self.saved.append((user_id, snapshot))
            self.documents[user_id] = snapshot
        finally:
            self.active_saves -= 1
        return True


class FakeCache:
    """Dictionary cache that can be told to fail like a full disk."""

    def __init__(self) -> None:
        self.rows: dict[str, GameSnapshot] = {}
        self.fail_writes = False
        self.write_attempts = 0

    def save(self, key: str, content: GameSnapshot) -> None:
        self.write_attempts += 1
        if self.fail_writes:
            raise OSError(28, "No space left on device")
        self.rows[key] = content

    def load(self, key: str) -> GameSnapshot | None:
        return self.rows.get(key)

    def clear(self, key: str) -> None:
        self.rows.pop(key, None)


class Recorder:
    """Collects every event emitted on a bus."""

    def __init__(self, events: EventBus) -> None:
        self.seen: list[Any] = []
        events.subscribe(None, self.seen.append)

    def kinds(self) -> list[EventKind]:
        return [event.kind for event in self.seen]


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def game_settings() -> GameSettings:
    return GameSettings(debounce_seconds=0.05)


@pytest.fixture
def ledger() -> Ledger:
    return Ledger()


@pytest.fixture
def service() -> FakeStateService:
    return FakeStateService()


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def vault() -> Iterator[SnapshotVault]:
    snapshot_vault = SnapshotVault(db_url=IN_MEMORY_URL)
    yield snapshot_vault
    snapshot_vault.dispose()


@pytest.fixture
def engine(game_settings: GameSettings, service: FakeStateService, cache: FakeCache, today: date) -> GameEngine:
    return GameEngine(game_settings, service=service, cache=cache, clock=lambda: today)


@pytest.fixture
def recorder(engine: GameEngine) -> Recorder:
    return Recorder(engine.events)
