# ♥♥─── Ledger ───────────────────────────────────────────────────────────────────
"""Spendable points, lifetime XP and the rank derived from them.

Every deduction reverses XP as well as points, so an award followed by a
deduction of the same amount restores both counters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from questboard.core.models import RANK_TABLE, RankStanding, LevelUpNotice, rank_for_xp, validate_rank_table
from questboard.custom_logger import log

from .events import EventBus, EventKind


if TYPE_CHECKING:
    from collections.abc import Sequence

    from questboard.core.models import RankTier


def _check_amount(amount: int) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        msg = f"Point amounts must be integers, got {type(amount).__name__}."
        raise TypeError(msg)
    if amount < 0:
        msg = f"Point amounts must be non-negative, got {amount}."
        raise ValueError(msg)
    return amount


class Ledger:
    """Owns ``points`` (spendable, never negative) and ``lifetime_xp`` (drives rank)."""

    def __init__(self, events: EventBus | None = None, rank_table: Sequence[RankTier] = RANK_TABLE) -> None:
        validate_rank_table(rank_table)
        self.events: EventBus = events or EventBus()
        self.rank_table: Sequence[RankTier] = rank_table
        self.points: int = 0
        self.lifetime_xp: int = 0
        self.level_up: LevelUpNotice = LevelUpNotice()

    # ─── Rank ──────────────────────────────────────────────────────────────────
    @property
    def standing(self) -> RankStanding:
        """Current rank standing derived from lifetime XP."""
        return rank_for_xp(self.lifetime_xp, self.rank_table)

    @property
    def rank(self) -> str:
        """Name of the current rank tier."""
        return self.standing.name

    @property
    def next_rank_xp(self) -> float:
        """Lifetime XP at which the next tier starts, infinite at the top tier."""
        return self.standing.next_threshold

    # ─── Mutations ─────────────────────────────────────────────────────────────
    def award(self, amount: int) -> None:
        """Add ``amount`` to both points and lifetime XP.

        :param amount: Non-negative integer, 0 is a no-op.
        :raises ValueError: If ``amount`` is negative.
        """
        if _check_amount(amount) == 0:
            return

        previous_rank = self.rank
        self.points += amount
        self.lifetime_xp += amount
        current_rank = self.rank
        log.debug("Awarded {} pts (points={}, xp={})", amount, self.points, self.lifetime_xp)

        if current_rank != previous_rank:
            self.level_up = LevelUpNotice(show=True, new_rank=current_rank)
            log.info("Rank up: {} → {}", previous_rank, current_rank)
            self.events.emit(EventKind.LEVEL_UP, previous_rank=previous_rank, new_rank=current_rank)

    def deduct(self, amount: int) -> int:
        """Remove ``amount`` from points and lifetime XP, clamping both at zero.

        :param amount: Non-negative integer, 0 is a no-op.
        :returns: The points actually removed from the balance.
        :raises ValueError: If ``amount`` is negative.
        """
        if _check_amount(amount) == 0:
            return 0

        removed = min(self.points, amount)
        self.points -= removed
        self.lifetime_xp = max(0, self.lifetime_xp - amount)
        log.debug("Deducted {} pts (points={}, xp={})", amount, self.points, self.lifetime_xp)
        return removed

    def can_afford(self, cost: int) -> bool:
        """Whether the balance covers ``cost``."""
        return self.points >= cost

    def dismiss_level_up(self) -> None:
        """Clear the pending level-up notice."""
        self.level_up = LevelUpNotice()

    # ─── Hydration ─────────────────────────────────────────────────────────────
    def load(self, points: int, lifetime_xp: int) -> None:
        """Replace both counters without raising level-up notices."""
        self.points = max(0, _check_amount(points))
        self.lifetime_xp = max(0, _check_amount(lifetime_xp))
        self.level_up = LevelUpNotice()

    def reset(self) -> None:
        """Return to a zero balance."""
        self.load(0, 0)
