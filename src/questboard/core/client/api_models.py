# ♥♥─── API Models ───────────────────────────────────────────────────────────────
from __future__ import annotations

from typing import Any

from pydantic import Field, BaseModel, ConfigDict


# ─── Service Error Body ───────────────────────────────────────────────────────
class ServiceErrorBody(BaseModel):
    """Error document returned by the remote services on a failed request."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
    error: str | None = Field(default=None)
    message: str | None = Field(default=None)


# ─── State Service Error ──────────────────────────────────────────────────────
class StateServiceError(Exception):
    """Raised for failures talking to the remote state service.

    :param message: The primary error message.
    :param status_code: The HTTP status code of the response, if one was received.
    :param response_data: The raw response body, if available.
    """

    def __init__(self, message: str, status_code: int | None = None, response_data: Any | None = None) -> None:
        super().__init__(message)
        self.status_code: int | None = status_code
        self.response_data: Any | None = response_data

    def __str__(self) -> str:
        """Return the message, with the status code when known."""
        base_error_message = self.args[0] if self.args else "State service error"
        if self.status_code is not None:
            return f"{base_error_message} (Status Code: {self.status_code})"
        return base_error_message


class CalendarSyncError(StateServiceError):
    """Raised when the calendar collaborator rejects or cannot receive an item."""


class SuggestionError(Exception):
    """Raised when a score suggestion cannot be produced."""
