# ♥♥─── QuestBoard Wishlist Models ─────────────────────────────────────────────
from __future__ import annotations

from pydantic import Field

from .base_model import QuestBoardBaseModel


# ─── Wishlist Item ────────────────────────────────────────────────────────────
class WishlistItem(QuestBoardBaseModel):
    """A reward the user can buy with points."""

    id: str
    name: str
    cost: int = Field(default=0, ge=0)
    redeemed: bool = Field(default=False)
    image: str | None = Field(default=None)


class RedeemOutcome(QuestBoardBaseModel):
    """Result of a redemption attempt.

    :param redeemed: True when the cost was spent and the item marked redeemed.
    :param shortfall: Points still needed when the balance was too low.
    :param already_redeemed: True when the item had been redeemed before.
    """

    item_id: str
    redeemed: bool = False
    shortfall: int = Field(default=0, ge=0)
    already_redeemed: bool = False
