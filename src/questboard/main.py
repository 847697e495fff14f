from __future__ import annotations

import sys
import asyncio

from rich.table import Table

from questboard.ui import icons, console
from questboard.custom_logger import log, setup_logging
from questboard.config.app_config import get_settings
from questboard.core.engine.game_engine import GameEngine


def build_status_table(engine: GameEngine) -> Table:
    """Summarize the ledger and today's open items."""
    today = engine.clock()
    next_rank = "max" if engine.next_rank_xp == float("inf") else f"{int(engine.next_rank_xp):,}"
    open_tasks = [task for task in engine.tasks.tasks_on(today) if not task.completed]
    open_habits = [habit for habit in engine.habits if not habit.completed]

    table = Table(title=f"{icons.STAR} QuestBoard · {today.isoformat()}", header_style="table.header")
    table.add_column("Stat", style="muted")
    table.add_column("Value", justify="right")
    table.add_row("Rank", f"[rank]{engine.rank}[/rank]")
    table.add_row(f"{icons.COIN} Points", f"[points]{engine.points:,}[/points]")
    table.add_row("Lifetime XP", f"[xp]{engine.lifetime_xp:,}[/xp] / {next_rank}")
    table.add_row("Open tasks today", str(len(open_tasks)))
    table.add_row("Open habits", str(len(open_habits)))
    table.add_row(f"{icons.BOOK} Books reading", str(sum(1 for book in engine.books if not book.is_finished)))
    return table


async def run_session(user_id: str) -> None:
    """Start a session, print the status table and close cleanly."""
    engine = GameEngine()
    with log.contextualize(user_id=user_id):
        try:
            report = await engine.start_session(user_id)
            if report is not None and report.total:
                console.print(f"[warning]{icons.WARNING} Daily penalty: -{report.total} pts[/warning]")
            console.print(build_status_table(engine))
        finally:
            await engine.end_session()


def main() -> None:
    """Entry point for the QuestBoard status command."""
    if "--debug" in sys.argv[1:]:
        setup_logging("DEBUG")
    settings = get_settings()
    settings.paths.ensure_env_file()
    log.debug("Configuration: {}", settings.get_configuration_summary())
    user_id = settings.session.user_id
    if not user_id:
        log.error("No user configured. Set SESSION_USER_ID in {}", settings.paths.env_file_path)
        sys.exit(1)
    try:
        asyncio.run(run_session(user_id))
    except Exception as e:
        log.error("An unexpected error occurred: {}", str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
