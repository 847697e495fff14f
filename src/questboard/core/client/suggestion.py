# ♥♥─── Score Suggestion ─────────────────────────────────────────────────────────
"""Point suggestions for new tasks, derived from keywords in the title."""

from __future__ import annotations

import random
from typing import Protocol
import asyncio

from .api_models import SuggestionError


# first matching group wins, so the order matters
KEYWORD_SCORES: tuple[tuple[tuple[str, ...], int], ...] = (
    (("gym", "workout", "exercise"), 300),
    (("run", "cardio"), 250),
    (("read", "study", "learn"), 150),
    (("code", "dev", "project"), 500),
    (("meditate", "yoga"), 200),
    (("clean", "chores"), 120),
    (("write", "journal"), 180),
)
BASE_SCORE = 100
JITTER_LOW, JITTER_HIGH = -10, 9


class ScoreSuggester(Protocol):
    """Anything that can propose a point value for a task title."""

    async def suggest(self, title: str) -> int:
        """Return suggested points, raising :class:`SuggestionError` when none can be given."""
        ...


def keyword_score(title: str) -> int:
    """Score of the first keyword group found in ``title``, case-insensitively."""
    lowered = title.lower()
    for keywords, score in KEYWORD_SCORES:
        if any(keyword in lowered for keyword in keywords):
            return score
    return BASE_SCORE


class KeywordScoreSuggester:
    """Keyword heuristic with a small random variation.

    :param rng: Random source, seeded in tests.
    :param latency_seconds: Artificial delay before answering.
    """

    def __init__(self, rng: random.Random | None = None, latency_seconds: float = 0.0) -> None:
        self.rng = rng or random.Random()
        self.latency_seconds = latency_seconds

    async def suggest(self, title: str) -> int:
        """Propose points for ``title``, never below zero.

        :raises SuggestionError: If the title is blank.
        """
        if not title.strip():
            raise SuggestionError("cannot score an empty title")
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)
        return max(0, keyword_score(title) + self.rng.randint(JITTER_LOW, JITTER_HIGH))
