# ♥♥─── UI Init ──────────────────────────────────────────────────────────────
from __future__ import annotations

from .icons import icons
from .console import print, console  # noqa: A004


__all__ = ["console", "icons", "print"]
