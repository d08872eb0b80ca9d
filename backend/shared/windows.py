"""
Time windows and UTC timestamp helpers for scheduled jobs.

All arithmetic happens on timezone-aware UTC datetimes so the result never
depends on the host's local timezone setting.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import NamedTuple

from dateutil import parser as date_parser

DAY = timedelta(hours=24)


class InvalidInstantError(ValueError):
    """Raised when a value cannot be interpreted as a point in time."""


class TimeWindow(NamedTuple):
    """Half-open interval [start, end) of UTC instants."""

    start: datetime
    end: datetime

    def contains(self, instant: datetime | str | int | float) -> bool:
        moment = to_utc_instant(instant)
        return self.start <= moment < self.end

    def as_iso(self) -> tuple[str, str]:
        """Start and end formatted for database filters."""
        return format_instant(self.start), format_instant(self.end)


def to_utc_instant(value: datetime | str | int | float) -> datetime:
    """
    Convert a timestamp into an aware UTC datetime.

    Naive datetimes and ISO strings without an offset are read as UTC, never
    as host-local time. Numbers are epoch seconds.

    Args:
        value: datetime, ISO-8601 string or epoch seconds

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        InvalidInstantError: If the value is missing, non-finite or unparseable
    """
    if isinstance(value, datetime):
        if value.tzinfo is None or value.utcoffset() is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, bool):
        raise InvalidInstantError(f"Invalid timestamp: {value!r} is not a time")

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidInstantError(f"Invalid timestamp: {value!r} is not finite")
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidInstantError(
                f"Invalid timestamp: {value!r} is out of range"
            ) from e

    if isinstance(value, str):
        if not value.strip():
            raise InvalidInstantError("Invalid timestamp: empty string")
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError) as e:
            raise InvalidInstantError(
                f"Invalid timestamp: could not parse {value!r}"
            ) from e
        return to_utc_instant(parsed)

    raise InvalidInstantError(
        f"Invalid timestamp: unsupported type {type(value).__name__}"
    )


def format_instant(instant: datetime) -> str:
    """ISO-8601 UTC string with millisecond precision, e.g. 2025-10-12T00:00:00.000Z"""
    moment = to_utc_instant(instant)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def day_window(now: datetime | str | int | float) -> TimeWindow:
    """
    UTC calendar day containing ``now``.

    Args:
        now: Reference instant

    Returns:
        TimeWindow from 00:00:00.000 UTC of that day to 24 hours later
    """
    moment = to_utc_instant(now)
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return TimeWindow(start, start + DAY)


def look_ahead_window(
    now: datetime | str | int | float,
    lead_minutes: float,
    window_minutes: float,
) -> TimeWindow:
    """
    Future slice of time starting ``lead_minutes`` after ``now``.

    Used to find events starting soon, e.g. 23-24 hours ahead for reminders.

    Args:
        now: Reference instant
        lead_minutes: Minutes between now and the window start
        window_minutes: Length of the window in minutes

    Returns:
        TimeWindow [now + lead, now + lead + window)

    Raises:
        InvalidInstantError: If now is invalid or a minute count is negative
            or non-finite
    """
    moment = to_utc_instant(now)
    for name, minutes in (
        ("lead_minutes", lead_minutes),
        ("window_minutes", window_minutes),
    ):
        if (
            isinstance(minutes, bool)
            or not isinstance(minutes, (int, float))
            or not math.isfinite(minutes)
            or minutes < 0
        ):
            raise InvalidInstantError(
                f"Invalid {name}: {minutes!r} must be a finite, non-negative number"
            )

    start = moment + timedelta(minutes=lead_minutes)
    return TimeWindow(start, start + timedelta(minutes=window_minutes))
