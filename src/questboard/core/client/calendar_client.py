# ♥♥─── Calendar Client ──────────────────────────────────────────────────────────
from __future__ import annotations

from typing import TYPE_CHECKING

from questboard.custom_logger import log

from .api_models import CalendarSyncError
from .state_api import ServiceHTTPClient


if TYPE_CHECKING:
    from questboard.core.models import CalendarSyncRequest

CALENDAR_SYNC_ENDPOINT = "api/calendar/sync"


class CalendarClient(ServiceHTTPClient):
    """Pushes tasks and events to the user's external calendar through the backend."""

    error_cls = CalendarSyncError

    async def sync(self, request: CalendarSyncRequest) -> bool:
        """Post one item to the calendar connector.

        :param request: The item to mirror.
        :returns: True once the connector accepted it.
        :raises CalendarSyncError: If the connector is unreachable or refuses the item.
        """
        await self._execute_request("POST", CALENDAR_SYNC_ENDPOINT, json=self._prepare_request_data(request))
        log.info("Synced '{}' to calendar", request.title)
        return True
