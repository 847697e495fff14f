# ♥♥─── Utils Init ───────────────────────────────────────────────────────────────
from __future__ import annotations

from .datetime_handler import DateTimeHandler, local_today, previous_day


__all__ = [
    "DateTimeHandler",
    "local_today",
    "previous_day",
]
