# ♥♥─── QuestBoard Logger ──────────────────────────────────────────────────────
from __future__ import annotations

from typing import TYPE_CHECKING, Any
import os
from pathlib import Path
from functools import wraps
import inspect

from loguru import logger
import logging

from rich.text import Text
from rich.errors import MarkupError

from .ui.console import console


if TYPE_CHECKING:
    from collections.abc import Callable

# ─── Levels ────────────────────────────────────────────────────────────────────

LEVEL_GLYPHS: dict[str, str] = {
    "TRACE": "󱐋",
    "DEBUG": "󱏿",
    "INFO": "󰫍",
    "SUCCESS": "󰸞",
    "WARNING": "󱍢",
    "ERROR": "󱎘",
    "CRITICAL": "󰚌",
}

NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "sqlalchemy.engine", "asyncio")

CONSOLE_LEVEL_ENV = "QUESTBOARD_LOG_LEVEL"
LOG_DIR_ENV = "QUESTBOARD_LOG_DIR"


def resolve_log_dir() -> Path:
    """Return the log directory, creating it when needed.

    ``QUESTBOARD_LOG_DIR`` wins. Otherwise logs go to ``app_data/logs`` under the
    nearest directory holding a ``pyproject.toml``, or under the working directory.
    """
    override = os.environ.get(LOG_DIR_ENV)
    if override:
        directory = Path(override)
    else:
        cwd = Path.cwd()
        root = next((p for p in (cwd, *cwd.parents) if (p / "pyproject.toml").exists()), cwd)
        directory = root / "app_data" / "logs"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


# ─── Sinks ─────────────────────────────────────────────────────────────────────


def _rich_sink(message: Any) -> None:
    record = message.record
    level = record["level"].name
    style = f"log.level.{level.lower()}"
    user = record["extra"].get("user_id")

    try:
        body = Text.from_markup(record["message"], style=style)
    except MarkupError:
        body = Text(record["message"], style=style)

    parts = [
        Text(record["time"].strftime("%H:%M:%S"), style="log.time"),
        Text(record["module"], style="log.module"),
        Text(f"{LEVEL_GLYPHS.get(level, '•'):<2}", style=style),
    ]
    if user:
        parts.append(Text(f"[{user}]", style="log.separator"))
    console.print(*parts, body, sep=" ")


class _InterceptHandler(logging.Handler):
    """Forward stdlib records (httpx, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


# ─── Setup ─────────────────────────────────────────────────────────────────────


class LoggerSetup:
    """Owns the loguru sink ids so the configuration can be applied again."""

    def __init__(self) -> None:
        self.sink_ids: list[int] = []
        self.log_dir: Path | None = None

    @property
    def configured(self) -> bool:
        return bool(self.sink_ids)

    def apply(
        self,
        console_level: str | None = None,
        file_level: str = "DEBUG",
        log_file: str = "questboard.log",
        rotation: str = "10 MB",
        retention: str = "7 days",
    ) -> None:
        """
        Replace every loguru sink with the console and file sinks.

        :param console_level: Console threshold. Falls back to ``QUESTBOARD_LOG_LEVEL``, then INFO
        :param file_level: File threshold
        :param log_file: File name inside the log directory
        :param rotation: Loguru rotation policy
        :param retention: Loguru retention policy
        """
        level = (console_level or os.environ.get(CONSOLE_LEVEL_ENV) or "INFO").upper()
        self.log_dir = resolve_log_dir()

        logger.remove()
        logger.configure(extra={"user_id": None})
        self.sink_ids = [
            logger.add(_rich_sink, level=level, colorize=True, backtrace=False, diagnose=False),
            logger.add(
                self.log_dir / log_file,
                level=file_level,
                format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[user_id]} | {name}:{function}:{line} - {message}",
                rotation=rotation,
                retention=retention,
                compression="zip",
                encoding="utf-8",
                backtrace=True,
                diagnose=False,
            ),
        ]

        logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


logger_setup = LoggerSetup()


def setup_logging(console_level: str | None = None, **kwargs: str) -> None:
    """Reconfigure the global sinks, e.g. to raise verbosity from the CLI."""
    logger_setup.apply(console_level, **kwargs)


def logged(func: Callable) -> Callable:
    """Log entry, completion and failure of ``func`` at debug level.

    Coroutine functions are wrapped with an async wrapper so the log lines
    bracket the awaited body rather than coroutine creation.

    :param func: The function to be decorated
    :returns: The wrapped function
    """
    name = f"[i]{func.__qualname__}[/i]"

    if inspect.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            logger.debug("→ {}", name)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.error("Error in {}: {}", name, e)
                raise
            logger.debug("{} {} done", LEVEL_GLYPHS["SUCCESS"], name)
            return result

        return async_wrapper

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger.debug("→ {}", name)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error("Error in {}: {}", name, e)
            raise
        logger.debug("{} {} done", LEVEL_GLYPHS["SUCCESS"], name)
        return result

    return wrapper


if not logger_setup.configured:
    setup_logging()
log = logger
