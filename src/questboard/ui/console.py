# ♥♥─── Global Console and Utilities ───────────────────────────────────────────
from typing import Any

from rich.theme import Theme
from rich.console import Console
from rich.traceback import install as install_rich_traceback


# ─── Definitions ─────────────────────────────────────────────────────────────
ROSE_PINE_STYLES: dict[str, str] = {
    "primary": "bold #31748f",
    "success": "#9ccfd8",
    "warning": "#f6c177",
    "error": "#eb6f92",
    "muted": "#6e6a86",
    "points": "bold #f6c177",
    "xp": "bold #c4a7e7",
    "rank": "bold #ebbcba",
    "table.header": "bold #31748f",
    "log.time": "#6e6a86",
    "log.separator": "#403d52",
    "log.module": "italic #908caa",
    "log.level.trace": "#908caa",
    "log.level.debug": "#6e6a86",
    "log.level.info": "#31748f",
    "log.level.success": "#9ccfd8",
    "log.level.warning": "#f6c177",
    "log.level.error": "#eb6f92",
    "log.level.critical": "bold #eb6f92",
}


# ─── Initialization ────────────────────────────────────────────────────────────
def create_console(styles: dict[str, str] | None = None) -> Console:
    """Create a Rich console with the project styles registered."""
    return Console(theme=Theme(styles or ROSE_PINE_STYLES), highlight=False)


console = create_console()

install_rich_traceback(console=console, show_locals=False, word_wrap=True, extra_lines=3, suppress=[])


# ─── Console Utilities ─────────────────────────────────────────────────────────


def print(*args: Any, **kwargs: Any) -> None:  # noqa: A001
    """Print to the console using Rich."""
    console.print(*args, **kwargs)
