"""
CLI script for running scheduled notification and maintenance jobs.

Usage:
    # Reminders for opportunities starting 23-24 hours from now
    uv run python -m notifications.process_scheduled_jobs --job reminder-emails

    # Roll-call prompts (run every few minutes)
    uv run python -m notifications.process_scheduled_jobs --job roll-call-emails

    # Re-run today's organization digest as of a specific time
    uv run python -m notifications.process_scheduled_jobs --job daily-digest-emails --now 2025-10-12T23:00:00Z

    # Dry run (don't send emails or write updates)
    uv run python -m notifications.process_scheduled_jobs --job roll-forward-opportunities --dry-run
"""

import argparse
import sys
from datetime import datetime
from typing import Any, Callable

from notifications.daily_digest import (
    send_organization_digests,
    send_senior_project_digests,
)
from notifications.reminders import send_reminder_emails
from notifications.roll_call import send_roll_call_emails
from shared.windows import InvalidInstantError, to_utc_instant, utc_now
from opportunities.roll_forward import roll_forward_opportunities

JOBS: dict[str, Callable[..., dict[str, int]]] = {
    "reminder-emails": send_reminder_emails,
    "roll-call-emails": send_roll_call_emails,
    "daily-digest-emails": send_organization_digests,
    "senior-project-daily-digest": send_senior_project_digests,
    "roll-forward-opportunities": roll_forward_opportunities,
}

# Jobs that search a look-ahead window and accept lead/window overrides
WINDOWED_JOBS = {"reminder-emails", "roll-call-emails"}


def run_job(
    job: str,
    now: datetime | str | None = None,
    supabase: Any = None,
    dry_run: bool = False,
    lead_minutes: float | None = None,
    window_minutes: float | None = None,
) -> dict[str, int]:
    """
    Run one scheduled job.

    Args:
        job: Job name (see JOBS)
        now: Reference time; validated before any query runs
        supabase: Supabase client (defaults to the service-role client)
        dry_run: If True, don't send emails or write updates
        lead_minutes: Look-ahead override for windowed jobs
        window_minutes: Window length override for windowed jobs

    Returns:
        The job's stats dictionary

    Raises:
        ValueError: Unknown job, or overrides given to a job without a window
        InvalidInstantError: If ``now`` is not a valid timestamp
    """
    if job not in JOBS:
        raise ValueError(f"Invalid job type: {job}")

    moment = to_utc_instant(utc_now() if now is None else now)
    kwargs: dict[str, Any] = {"now": moment, "supabase": supabase, "dry_run": dry_run}

    if lead_minutes is not None or window_minutes is not None:
        if job not in WINDOWED_JOBS:
            raise ValueError(f"Job {job} does not take lead/window overrides")
        if lead_minutes is not None:
            kwargs["lead_minutes"] = lead_minutes
        if window_minutes is not None:
            kwargs["window_minutes"] = window_minutes

    print(f"[Cron] Starting job: {job} (now={moment.isoformat()})")
    stats = JOBS[job](**kwargs)
    print(f"[Cron] Job {job} completed: {stats}")
    return stats


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Run scheduled Voluna jobs")

    parser.add_argument(
        "--job", required=True, choices=sorted(JOBS), help="Job to run"
    )

    parser.add_argument(
        "--now",
        type=str,
        help="Reference time as ISO-8601 (defaults to the current UTC time)",
    )

    parser.add_argument(
        "--lead-minutes",
        type=float,
        help="Minutes ahead to start looking (reminder/roll-call jobs only)",
    )

    parser.add_argument(
        "--window-minutes",
        type=float,
        help="Length of the look-ahead window in minutes (reminder/roll-call jobs only)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run mode (don't send emails or write updates)",
    )

    args = parser.parse_args(argv)

    try:
        run_job(
            args.job,
            now=args.now,
            dry_run=args.dry_run,
            lead_minutes=args.lead_minutes,
            window_minutes=args.window_minutes,
        )
    except (InvalidInstantError, ValueError) as e:
        print(f"✗ {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
