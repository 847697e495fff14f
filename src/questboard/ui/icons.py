# ♥♥─── Log Icons ────────────────────────────────────────────────────────────────
from __future__ import annotations

from enum import StrEnum


class Icons(StrEnum):
    """Glyphs prefixed to log lines and status output."""

    ERROR = "󰅚"
    WARNING = "󰀪"
    CLOUD = "󰅟"
    DATABASE = "󰆼"
    STAR = "󰓎"
    COIN = "󰆬"
    BOOK = "󰂺"
    CALENDAR = "󰃭"


icons = Icons
