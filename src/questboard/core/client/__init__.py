from __future__ import annotations

from .state_api import StateAPI, ServiceHTTPClient
from .api_models import SuggestionError, CalendarSyncError, StateServiceError
from .suggestion import KEYWORD_SCORES, ScoreSuggester, KeywordScoreSuggester, keyword_score
from .calendar_client import CalendarClient


__all__ = [
    "KEYWORD_SCORES",
    "CalendarClient",
    "CalendarSyncError",
    "KeywordScoreSuggester",
    "ScoreSuggester",
    "ServiceHTTPClient",
    "StateAPI",
    "StateServiceError",
    "SuggestionError",
    "keyword_score",
]
