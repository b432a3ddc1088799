from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if value is None or not str(value).strip():
        return None
    return parse_iso_date(str(value))


def isoformat(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


class EventClock:
    """Source of "now" for the event venue.

    Attendance days are calendar days in the venue time zone. Timestamps are
    handed out as naive datetimes in that zone, which is how they are stored.
    """

    def __init__(self, tz_name: str = "UTC"):
        try:
            self._tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown EVENT_TIMEZONE: {tz_name!r}")
        self.tz_name = tz_name

    def now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None, microsecond=0)

    def today(self) -> date:
        return self.now().date()

    def to_local(self, value: datetime) -> datetime:
        """Convert to the venue's naive local time, in whole seconds.

        DATETIME columns drop fractions; trimming here keeps returned values
        equal to what a later read gives back.
        """
        if value.tzinfo is not None:
            value = value.astimezone(self._tz).replace(tzinfo=None)
        return value.replace(microsecond=0)

    def parse_datetime(self, value: str) -> datetime:
        """Parse an ISO-8601 timestamp as sent by the admin UI.

        A trailing ``Z`` or an explicit offset is converted to venue time; a
        naive timestamp is taken as venue time already.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"Invalid datetime: {value!r}")
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid datetime: {value!r}")
        return self.to_local(parsed)
