"""Occurrence arithmetic for recurring opportunities (UTC only)."""

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from models.opportunity import RECURRING_FREQUENCIES, Frequency
from shared.windows import TimeWindow, to_utc_instant
from shared.utils import DEFAULT_EVENT_DURATION

_STEPS = {
    Frequency.DAILY: relativedelta(days=1),
    Frequency.WEEKLY: relativedelta(weeks=1),
    Frequency.MONTHLY: relativedelta(months=1),
}


def advance(
    instant: datetime | str, frequency: Frequency | str, steps: int = 1
) -> datetime:
    """
    Move an instant forward by whole recurrence periods.

    Months are calendar months counted from ``instant``, so Jan 31 + 1 month
    is Feb 28 (or 29) and + 2 months is Mar 31.

    Raises:
        ValueError: If the frequency does not recur
    """
    frequency = Frequency(frequency)
    if frequency not in RECURRING_FREQUENCIES:
        raise ValueError(f"Frequency '{frequency.value}' does not recur")
    return to_utc_instant(instant) + _STEPS[frequency] * steps


def occurrence_duration(
    start: datetime | None,
    end: datetime | None,
    duration_hours: float | None = None,
) -> timedelta:
    """Length of one occurrence: end - start, else duration_hours, else 2 hours."""
    if start is not None and end is not None:
        return to_utc_instant(end) - to_utc_instant(start)
    if duration_hours:
        return timedelta(hours=duration_hours)
    return DEFAULT_EVENT_DURATION


def next_occurrence(
    start: datetime | str,
    end: datetime | str | None,
    frequency: Frequency | str,
    now: datetime | str,
    duration_hours: float | None = None,
) -> TimeWindow:
    """
    First future occurrence of a recurring opportunity.

    Always advances at least one period, then keeps going until the
    occurrence ends after ``now`` (covers missed scheduler runs).

    Returns:
        TimeWindow with the next start and end
    """
    first_start = to_utc_instant(start)
    first_end = to_utc_instant(end) if end is not None else None
    moment = to_utc_instant(now)
    duration = occurrence_duration(first_start, first_end, duration_hours)

    steps = 1
    while True:
        next_start = advance(first_start, frequency, steps)
        if next_start + duration > moment:
            return TimeWindow(next_start, next_start + duration)
        steps += 1
