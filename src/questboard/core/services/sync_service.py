# ♥♥─── Persistence Synchronizer ─────────────────────────────────────────────────
"""Hydration-guarded, debounced write-through of the game state.

Nothing is written until the state of the current user has been hydrated.
After that every change lands in the local cache immediately and reaches the
remote service once changes stop arriving for ``debounce_seconds``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol
import asyncio
from enum import StrEnum

from sqlalchemy.exc import SQLAlchemyError

from questboard.ui import icons
from questboard.core.client import StateServiceError
from questboard.core.models import SyncState, GameSnapshot
from questboard.custom_logger import log
from questboard.core.engine.events import EventBus, EventKind


if TYPE_CHECKING:
    from collections.abc import Callable


# ─── Collaborator Protocols ───────────────────────────────────────────────────
class StateService(Protocol):
    """Remote store of whole state documents."""

    async def load_state(self, user_id: str) -> GameSnapshot | None: ...

    async def save_state(self, user_id: str, snapshot: GameSnapshot) -> bool: ...


class SnapshotCache(Protocol):
    """Synchronous local store of the last known state."""

    def save(self, key: str, content: GameSnapshot) -> None: ...

    def load(self, key: str) -> GameSnapshot | None: ...

    def clear(self, key: str) -> None: ...


class HydrationSource(StrEnum):
    """Where the hydrated state came from."""

    REMOTE = "remote"
    CACHE = "cache"
    DEFAULTS = "defaults"


# ─── Synchronizer ─────────────────────────────────────────────────────────────
class PersistenceSynchronizer:
    """Moves snapshots between the engine, the local cache and the remote service.

    :param service: Remote state service.
    :param cache: Local snapshot cache.
    :param take_snapshot: Returns the full current state.
    :param apply_snapshot: Replaces the current state, None meaning defaults.
    :param events: Bus receiving ``STORAGE_WARNING``.
    :param debounce_seconds: Quiet period before a remote write.
    """

    def __init__(
        self,
        service: StateService,
        cache: SnapshotCache,
        take_snapshot: Callable[[], GameSnapshot],
        apply_snapshot: Callable[[GameSnapshot | None], None],
        events: EventBus | None = None,
        debounce_seconds: float = 1.0,
    ) -> None:
        self.service = service
        self.cache = cache
        self.take_snapshot = take_snapshot
        self.apply_snapshot = apply_snapshot
        self.events = events or EventBus()
        self.debounce_seconds = debounce_seconds
        self.state: SyncState = SyncState.HYDRATING
        self.user_id: str | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._inflight: asyncio.Task[bool] | None = None
        self._dirty = False
        self._storage_warned = False

    @property
    def is_hydrated(self) -> bool:
        """Whether writes are currently allowed."""
        return self.state != SyncState.HYDRATING

    # ─── Hydration ─────────────────────────────────────────────────────────────
    async def hydrate(self, user_id: str) -> HydrationSource:
        """Load the state of ``user_id`` and apply it wholesale.

        Falls back to the local cache when the service has nothing or fails,
        and to defaults when the cache is empty too. Writes stay suppressed
        until this returns.

        :param user_id: The signed-in user.
        :returns: Which source the applied state came from.
        """
        self._cancel_timer()
        self.state = SyncState.HYDRATING
        self.user_id = user_id
        self._storage_warned = False
        try:
            snapshot = await self._load_remote(user_id)
            if snapshot is not None:
                self.apply_snapshot(snapshot)
                log.info("{} Hydrated {} from remote service", icons.CLOUD, user_id)
                return HydrationSource.REMOTE

            cached = self._load_cached(user_id)
            if cached is not None:
                self.apply_snapshot(cached)
                log.info("{} Hydrated {} from local cache", icons.DATABASE, user_id)
                return HydrationSource.CACHE

            self.apply_snapshot(None)
            log.info("No stored state for {}, starting fresh", user_id)
            return HydrationSource.DEFAULTS
        finally:
            self.state = SyncState.IDLE

    async def _load_remote(self, user_id: str) -> GameSnapshot | None:
        try:
            return await self.service.load_state(user_id)
        except StateServiceError as e:
            log.warning("Remote state unavailable, using local data: {}", e)
            return None

    def _load_cached(self, user_id: str) -> GameSnapshot | None:
        try:
            return self.cache.load(user_id)
        except (SQLAlchemyError, OSError) as e:
            log.warning("Local cache unreadable: {}", e)
            return None

    # ─── Writes ────────────────────────────────────────────────────────────────
    def notify_change(self) -> None:
        """Record that the state changed.

        Ignored while hydrating. Otherwise the local cache is written now and
        the remote write is (re)scheduled.
        """
        if not self.is_hydrated or self.user_id is None:
            log.trace("Change ignored while hydrating")
            return

        snapshot = self.take_snapshot()
        self._write_cache(self.user_id, snapshot)

        self._cancel_timer()
        self.state = SyncState.WRITE_PENDING
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.debug("No running event loop, remote write waits for flush()")
            return
        self._timer = loop.call_later(self.debounce_seconds, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if self._inflight is not None and not self._inflight.done():
            self._dirty = True
            return
        self._inflight = asyncio.ensure_future(self._drain())

    async def _drain(self) -> bool:
        """Save until no change arrived during the last save. One save runs at a time."""
        while True:
            self._dirty = False
            saved = await self._write_remote()
            if not self._dirty:
                return saved

    async def _write_remote(self) -> bool:
        if self.state != SyncState.WRITE_PENDING or self.user_id is None:
            return False

        user_id = self.user_id
        self.state = SyncState.IDLE
        snapshot = self.take_snapshot()
        try:
            saved = await self.service.save_state(user_id, snapshot)
        except StateServiceError as e:
            log.error("{} Remote save failed, retrying on next change: {}", icons.ERROR, e)
            return False
        if saved:
            log.debug("{} Remote state saved for {}", icons.CLOUD, user_id)
        return saved

    def _write_cache(self, user_id: str, snapshot: GameSnapshot) -> None:
        try:
            self.cache.save(user_id, snapshot)
        except (SQLAlchemyError, OSError) as e:
            if self._storage_warned:
                log.debug("Local cache write failed again: {}", e)
                return
            self._storage_warned = True
            log.warning("{} Local cache write failed: {}", icons.WARNING, e)
            self.events.emit(EventKind.STORAGE_WARNING, error=str(e))

    # ─── Lifecycle ─────────────────────────────────────────────────────────────
    async def flush(self) -> bool:
        """Write any pending change now and wait until no save is in flight.

        :returns: True if the last write happened and succeeded.
        """
        saved = False
        while True:
            self._cancel_timer()
            if self._inflight is not None and not self._inflight.done():
                if self.state == SyncState.WRITE_PENDING:
                    self._dirty = True
                saved = await self._inflight
                continue
            if self.state != SyncState.WRITE_PENDING or self.user_id is None:
                return saved
            self._inflight = asyncio.ensure_future(self._drain())

    def close(self) -> None:
        """Drop any scheduled write."""
        self._cancel_timer()
        if self.state == SyncState.WRITE_PENDING:
            log.warning("Closing with an unsaved remote change for {}", self.user_id)
            self.state = SyncState.IDLE

    def detach(self) -> None:
        """Forget the current user and suppress writes until the next hydration."""
        self._cancel_timer()
        self.state = SyncState.HYDRATING
        self.user_id = None
        self._storage_warned = False

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
