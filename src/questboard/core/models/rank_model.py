# ♥♥─── QuestBoard Rank Models ─────────────────────────────────────────────────
"""Static rank table and the lookup deriving a rank from lifetime XP."""

from __future__ import annotations

import math
from bisect import bisect_right
from typing import TYPE_CHECKING

from pydantic import Field

from .base_model import QuestBoardBaseModel


if TYPE_CHECKING:
    from collections.abc import Sequence


UNBOUNDED_XP: float = math.inf


class RankTier(QuestBoardBaseModel):
    """A named progression tier reached at ``minimum_xp`` lifetime XP."""

    name: str
    minimum_xp: int = Field(ge=0)


class RankStanding(QuestBoardBaseModel):
    """Rank held at some XP value and the XP needed for the next tier."""

    name: str
    tier_index: int
    next_threshold: float


def _tier(name: str, minimum_xp: int) -> RankTier:
    return RankTier(name=name, minimum_xp=minimum_xp)


RANK_TABLE: tuple[RankTier, ...] = (
    _tier("Iron 1", 0),
    _tier("Iron 2", 500),
    _tier("Iron 3", 1000),
    _tier("Bronze 1", 1500),
    _tier("Bronze 2", 2500),
    _tier("Bronze 3", 3500),
    _tier("Silver 1", 5000),
    _tier("Silver 2", 6000),
    _tier("Silver 3", 7000),
    _tier("Gold 1", 8500),
    _tier("Gold 2", 10000),
    _tier("Gold 3", 11500),
    _tier("Platinum 1", 13500),
    _tier("Platinum 2", 15500),
    _tier("Platinum 3", 17500),
    _tier("Diamond 1", 20000),
    _tier("Diamond 2", 23000),
    _tier("Diamond 3", 26000),
    _tier("Ascendant 1", 30000),
    _tier("Ascendant 2", 35000),
    _tier("Ascendant 3", 40000),
    _tier("Immortal 1", 50000),
    _tier("Immortal 2", 60000),
    _tier("Immortal 3", 70000),
    _tier("Radiant", 80000),
)


def validate_rank_table(table: Sequence[RankTier]) -> None:
    """Check that a rank table starts at zero and strictly increases.

    :param table: The ordered tiers.
    :raises ValueError: If the table is empty, does not start at 0, or is not strictly increasing.
    """
    if not table:
        msg = "Rank table must contain at least one tier."
        raise ValueError(msg)
    if table[0].minimum_xp != 0:
        msg = "The first rank tier must start at 0 XP."
        raise ValueError(msg)
    for lower, upper in zip(table, table[1:], strict=False):
        if upper.minimum_xp <= lower.minimum_xp:
            msg = f"Rank tier '{upper.name}' must require more XP than '{lower.name}'."
            raise ValueError(msg)


def rank_for_xp(lifetime_xp: int, table: Sequence[RankTier] = RANK_TABLE) -> RankStanding:
    """Find the highest tier whose minimum is at or below ``lifetime_xp``.

    :param lifetime_xp: Lifetime XP, negative values are treated as 0.
    :param table: The ordered rank table.
    :returns: The standing with the next tier's threshold, or ``UNBOUNDED_XP`` at the top.
    """
    thresholds = [tier.minimum_xp for tier in table]
    index = max(bisect_right(thresholds, max(lifetime_xp, 0)) - 1, 0)
    next_threshold = float(thresholds[index + 1]) if index + 1 < len(thresholds) else UNBOUNDED_XP
    return RankStanding(name=table[index].name, tier_index=index, next_threshold=next_threshold)
