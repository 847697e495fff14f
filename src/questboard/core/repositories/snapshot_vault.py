# ♥♥─── Snapshot Vault ───────────────────────────────────────────────────────────
"""Local SQLite cache of the last known state of each user."""

from __future__ import annotations

from pydantic import ValidationError
from sqlmodel import Session

from questboard.utils import DateTimeHandler
from questboard.core.models import GameSnapshot, CachedSnapshot
from questboard.custom_logger import log

from .base_vault import BaseVault


class SnapshotVault(BaseVault[GameSnapshot]):
    """Vault holding one cached :class:`GameSnapshot` per user id."""

    def __init__(self, vault_name: str = "snapshot_vault", db_url: str | None = None, echo: bool = False) -> None:
        super().__init__(vault_name=vault_name, db_url=db_url, echo=echo)

    def save(self, key: str, content: GameSnapshot) -> None:
        """Upsert the snapshot of user ``key``.

        :raises sqlalchemy.exc.SQLAlchemyError: If the database rejects the write.
        """
        with Session(self.engine) as session:
            try:
                row = session.get(CachedSnapshot, key)
                if row is None:
                    row = CachedSnapshot(id=key)
                row.payload = content.to_api_dict()
                row.saved_at = DateTimeHandler.get_utc_now()
                session.add(row)
                session.commit()
            except Exception as e:
                log.error("Snapshot cache commit failed: {}", e)
                session.rollback()
                raise
        log.debug("Cached snapshot for {}", key)

    def load(self, key: str) -> GameSnapshot | None:
        """Return the cached snapshot of user ``key``.

        A payload that no longer validates is logged and treated as missing.
        """
        row = self.get_by_id(CachedSnapshot, key)
        if row is None:
            log.debug("No cached snapshot for {}", key)
            return None
        try:
            return GameSnapshot.from_api_dict(row.payload)
        except ValidationError as e:
            log.warning("Discarding unreadable cached snapshot for {}: {}", key, e.errors(include_input=False))
            return None

    def clear(self, key: str) -> None:
        """Delete the cached snapshot of user ``key`` if present."""
        with Session(self.engine) as session:
            row = session.get(CachedSnapshot, key)
            if row is not None:
                session.delete(row)
                session.commit()
                log.debug("Cleared cached snapshot for {}", key)
