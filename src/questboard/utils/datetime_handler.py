# ♥♥─── Datetime Handler ─────────────────────────────────────────────────────────
from __future__ import annotations

from datetime import UTC, date, tzinfo, datetime, timedelta

from pydantic import Field, BaseModel, ConfigDict, PrivateAttr, computed_field
from dateutil.tz import tzlocal
import dateutil.parser

from questboard.custom_logger import log


# ─── DateTimeHandler Class ─────────────────────────────────────────────────────


class DateTimeHandler(BaseModel):
    """Normalize stored timestamps and answer local calendar-day questions.

    Journal entries carry a UTC instant while penalties and bonuses work on the
    local calendar day, so every day comparison goes through this class.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)
    MILLISECONDS_TIMESTAMP_THRESHOLD: int = 2_000_000_000

    timestamp: str | datetime | int | float | None = Field(default=None)
    _local_timezone: tzinfo = PrivateAttr(default_factory=tzlocal)

    @computed_field
    @property
    def utc_datetime(self) -> datetime | None:
        """The timestamp as an aware UTC datetime. Naive values are taken as UTC."""
        value = self.timestamp
        try:
            match value:
                case None:
                    return None
                case datetime():
                    parsed = value
                case int() | float():
                    seconds = value / 1000 if abs(value) > self.MILLISECONDS_TIMESTAMP_THRESHOLD else value
                    return datetime.fromtimestamp(seconds, tz=UTC)
                case str():
                    parsed = dateutil.parser.isoparse(value)
        except (ValueError, OverflowError) as e:
            log.warning("Could not parse timestamp '{}': {}", value, e)
            return None

        return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed.astimezone(UTC)

    @property
    def local_date(self) -> date | None:
        """Calendar day of the timestamp in the local timezone."""
        instant = self.utc_datetime
        return instant.astimezone(self._local_timezone).date() if instant else None

    def is_on_day(self, day: date) -> bool:
        """
        Check whether the timestamp falls on ``day`` in the local timezone.

        :param day: The calendar day to compare against.
        :returns: False when the timestamp is unset or unparseable.
        """
        return self.local_date == day

    @staticmethod
    def get_utc_now() -> datetime:
        return datetime.now(UTC)

    @staticmethod
    def get_local_now() -> datetime:
        return datetime.now(tzlocal())


# ─── Calendar Day Helpers ──────────────────────────────────────────────────────
def local_today() -> date:
    """Return today's calendar day in the local timezone."""
    return DateTimeHandler.get_local_now().date()


def previous_day(day: date) -> date:
    """Return the calendar day before ``day``."""
    return day - timedelta(days=1)
