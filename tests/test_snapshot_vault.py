"""SQLite snapshot cache."""

from __future__ import annotations

from datetime import date

from sqlmodel import Session

from questboard.core.models import GameSnapshot, CachedSnapshot
from questboard.core.repositories import SnapshotVault


def _snapshot() -> GameSnapshot:
    return GameSnapshot.model_validate({
        "points": 320,
        "lifetimeXP": 1450,
        "tasks": [{"id": "t1", "title": "Plan sprint", "points": 40, "date": "2025-03-14", "time": "1h", "priority": "high"}],
        "books": [{"id": "b1", "title": "Dune", "totalPages": 412, "currentPage": 206, "progress": 50, "status": "reading", "deadline": "2025-04-01", "totalPoints": 400}],
        "wishlist": [{"id": "w1", "name": "Headphones", "cost": 500}],
        "lastEvaluatedDay": "2025-03-14",
        "dailyBonusDay": None,
    })


class TestSnapshotVault:
    def test_missing_user_loads_none(self, vault: SnapshotVault) -> None:
        assert vault.load("nobody") is None

    def test_save_then_load(self, vault: SnapshotVault) -> None:
        vault.save("alice", _snapshot())

        loaded = vault.load("alice")

        assert loaded is not None
        assert loaded.points == 320
        assert loaded.lifetime_xp == 1450
        assert loaded.tasks[0].duration == "1h"
        assert loaded.books[0].current_page == 206
        assert loaded.last_evaluated_day == date(2025, 3, 14)

    def test_payload_uses_wire_names(self, vault: SnapshotVault) -> None:
        vault.save("alice", _snapshot())

        with Session(vault.engine) as session:
            row = session.get(CachedSnapshot, "alice")
            assert row is not None
            assert row.payload["lifetimeXP"] == 1450
            assert row.payload["tasks"][0]["date"] == "2025-03-14"
            assert "totalPages" in row.payload["books"][0]

    def test_save_replaces_previous_snapshot(self, vault: SnapshotVault) -> None:
        vault.save("alice", _snapshot())
        vault.save("alice", GameSnapshot(points=5))

        loaded = vault.load("alice")

        assert loaded is not None
        assert loaded.points == 5
        assert loaded.tasks == []
        assert vault.count(CachedSnapshot) == 1

    def test_users_are_isolated_and_clearable(self, vault: SnapshotVault) -> None:
        vault.save("alice", _snapshot())
        vault.save("bob", GameSnapshot(points=1))

        vault.clear("alice")
        vault.clear("alice")

        assert vault.load("alice") is None
        assert not vault.exists(CachedSnapshot, "alice")
        loaded = vault.load("bob")
        assert loaded is not None
        assert loaded.points == 1
