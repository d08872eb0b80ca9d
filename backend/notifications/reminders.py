"""
Reminder emails for volunteers whose opportunity starts in about a day.
"""

import os
import time
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from models.opportunity import Opportunity
from models.signup import Signup
from models.types import JobStats
from notifications.email_sender import send_content
from notifications.email_templates import build_reminder_email
from notifications.error_logger import record_failure
from shared.windows import look_ahead_window, utc_now
from shared.db import get_supabase_client
from shared.utils import print_summary

JOB_NAME = "reminder-emails"

REMINDER_LEAD_MINUTES = 23 * 60
REMINDER_WINDOW_MINUTES = 60

SEND_DELAY_SECONDS = float(os.getenv("EMAIL_SEND_DELAY", "0.1"))


def send_reminder_emails(
    now: datetime | str | None = None,
    supabase: Any = None,
    dry_run: bool = False,
    lead_minutes: float = REMINDER_LEAD_MINUTES,
    window_minutes: float = REMINDER_WINDOW_MINUTES,
) -> JobStats:
    """
    Email every volunteer signed up for an opportunity starting 23-24 hours from now.

    Args:
        now: Reference time (defaults to the current UTC time)
        supabase: Supabase client (defaults to the service-role client)
        dry_run: If True, don't actually send emails
        lead_minutes: Minutes from now to the start of the search window
        window_minutes: Length of the search window

    Returns:
        Dictionary with stats: matched (opportunities in window), sent, failed, skipped
    """
    window = look_ahead_window(
        utc_now() if now is None else now, lead_minutes, window_minutes
    )
    start_iso, end_iso = window.as_iso()
    print(f"[Reminder] Looking for opportunities starting between {start_iso} and {end_iso}")

    supabase = supabase or get_supabase_client()
    response = (
        supabase.table("opportunities")
        .select("id, title, start_time, end_time, location")
        .gte("start_time", start_iso)
        .lt("start_time", end_iso)
        .execute()
    )

    rows = response.data or []
    stats = {"matched": len(rows), "sent": 0, "failed": 0, "skipped": 0}

    if not rows:
        print("[Reminder] No upcoming opportunities in the reminder window.")
        return stats

    for row in rows:
        context = {"opportunity_id": row.get("id")}

        try:
            opportunity = Opportunity.model_validate(row)
            print(f"\nProcessing opportunity: {opportunity.title} ({opportunity.id})")
            signups_response = (
                supabase.table("signups")
                .select("user_id, name, email")
                .eq("opportunity_id", opportunity.id)
                .execute()
            )
        except Exception as e:
            record_failure(
                JOB_NAME,
                stats,
                f"Could not fetch signups: {e}",
                context,
            )
            continue

        for signup_row in signups_response.data or []:
            try:
                signup = Signup.model_validate(signup_row)
            except ValidationError as e:
                record_failure(JOB_NAME, stats, f"Invalid signup row: {e}", context)
                continue

            if not signup.email:
                record_failure(
                    JOB_NAME,
                    stats,
                    "Missing email for signup",
                    {"opportunity_id": opportunity.id, "user_id": signup.user_id},
                )
                continue

            content = build_reminder_email(signup.name, opportunity)

            if dry_run:
                print(f"  [DRY RUN] Would send reminder to {signup.email}")
                stats["sent"] += 1
                continue

            result = send_content(signup.email, content)
            if result["success"]:
                print(f"  ✓ Sent reminder to {signup.email}")
                stats["sent"] += 1
            else:
                record_failure(
                    JOB_NAME,
                    stats,
                    f"Failed to send reminder to {signup.email}: {result.get('error')}",
                    {"opportunity_id": opportunity.id, "email": signup.email},
                )

            # Rate limiting: max 10 emails/second
            time.sleep(SEND_DELAY_SECONDS)

    print_summary("Reminder Emails", stats)
    return stats
