from datetime import datetime, timedelta, timezone

DEFAULT_EVENT_DURATION = timedelta(hours=2)


def estimate_hours(
    start: datetime | None,
    end: datetime | None,
    default: timedelta | None = DEFAULT_EVENT_DURATION,
) -> float:
    """Event length in hours rounded to one decimal.

    A missing end falls back to ``default``; with no default (or no start)
    the estimate is 0.
    """
    if start is None:
        return 0.0
    if end is None:
        if default is None:
            return 0.0
        end = start + default
    hours = (end - start).total_seconds() / 3600
    return round(hours, 1)


def format_display_time(value: datetime | None) -> str:
    """Human readable UTC timestamp for emails."""
    if value is None:
        return "Time to be announced"
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%B %d, %Y at %I:%M %p UTC")


def format_display_date(value: datetime | None) -> str:
    if value is None:
        return "Unknown date"
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%B %d, %Y")


def print_summary(title: str, stats: dict[str, int]) -> None:
    """Print job summary."""
    print(f"\n{'=' * 60}")
    print(f"[{datetime.now(timezone.utc)}] {title} Complete")
    print(f"{'=' * 60}")
    for name, count in stats.items():
        print(f"{name.capitalize() + ':':<10}{count}")
    print(f"{'=' * 60}\n")
