"""
Roll-call prompts for organizers a few minutes before an opportunity starts.

The scheduler runs every few minutes, so the query looks a little further
ahead than the send range. Opportunities found early are skipped and picked
up by a later run; ``rollcall_email_sent_at`` prevents duplicates.
"""

import os
import time
from datetime import datetime, timedelta
from typing import Any, cast

from pydantic import ValidationError

from models.opportunity import Opportunity
from models.signup import Organization
from models.types import JobStats
from notifications.email_sender import send_content
from notifications.email_templates import SITE_URL, build_roll_call_email
from notifications.error_logger import record_failure
from shared.windows import (
    format_instant,
    look_ahead_window,
    to_utc_instant,
    utc_now,
)
from shared.db import get_supabase_client
from shared.utils import print_summary

JOB_NAME = "roll-call-emails"

BUFFER_LEAD_MINUTES = 2
BUFFER_WINDOW_MINUTES = 10
# Sent when the start is [lead, lead + SEND_SPAN] minutes away
SEND_SPAN_MINUTES = 7

SEND_DELAY_SECONDS = float(os.getenv("EMAIL_SEND_DELAY", "0.1"))


def roll_call_url(opportunity_id: str) -> str:
    return f"{SITE_URL}/roll-call/{opportunity_id}"


def send_roll_call_emails(
    now: datetime | str | None = None,
    supabase: Any = None,
    dry_run: bool = False,
    lead_minutes: float = BUFFER_LEAD_MINUTES,
    window_minutes: float = BUFFER_WINDOW_MINUTES,
) -> JobStats:
    """
    Send organizers a roll-call link for opportunities starting in ~5 minutes.

    Args:
        now: Reference time (defaults to the current UTC time)
        supabase: Supabase client (defaults to the service-role client)
        dry_run: If True, don't send emails or mark opportunities
        lead_minutes: Minutes from now to the start of the search window
        window_minutes: Length of the search window

    Returns:
        Dictionary with stats: matched (opportunities in window), sent, failed, skipped
    """
    moment = to_utc_instant(utc_now() if now is None else now)
    window = look_ahead_window(moment, lead_minutes, window_minutes)
    start_iso, end_iso = window.as_iso()
    print(f"[Roll Call] Looking for opportunities starting between {start_iso} and {end_iso}")

    supabase = supabase or get_supabase_client()
    response = (
        supabase.table("opportunities")
        .select("id, title, start_time, end_time, location, org_id, rollcall_email_sent_at, closed")
        .gte("start_time", start_iso)
        .lt("start_time", end_iso)
        .or_("closed.is.null,closed.eq.false")
        .is_("rollcall_email_sent_at", "null")
        .execute()
    )

    rows = response.data or []
    stats = {"matched": len(rows), "sent": 0, "failed": 0, "skipped": 0}

    if not rows:
        print("[Roll Call] No opportunities starting in buffer window.")
        return stats

    min_lead = timedelta(minutes=lead_minutes)
    max_lead = min(
        timedelta(minutes=lead_minutes + SEND_SPAN_MINUTES),
        timedelta(minutes=lead_minutes + window_minutes),
    )

    for row in rows:
        try:
            opportunity = Opportunity.model_validate(row)
        except ValidationError as e:
            record_failure(
                JOB_NAME, stats, f"Invalid opportunity row: {e}", {"opportunity_id": row.get("id")}
            )
            continue

        lead = opportunity.start_time - moment if opportunity.start_time else None
        if lead is None or lead < min_lead or lead > max_lead:
            print(f"  ⊘ Skipping {opportunity.title} ({opportunity.id}): starts in {lead}")
            stats["skipped"] += 1
            continue

        print(f"\nProcessing opportunity: {opportunity.title} ({opportunity.id})")
        context = {"opportunity_id": opportunity.id, "org_id": opportunity.org_id}

        try:
            signups_response = (
                supabase.table("signups")
                .select("user_id, name")
                .eq("opportunity_id", opportunity.id)
                .execute()
            )
            org_response = (
                supabase.table("organizations")
                .select("id, name, owner, contact_email")
                .eq("id", opportunity.org_id)
                .single()
                .execute()
            )
        except Exception as e:
            record_failure(JOB_NAME, stats, f"Could not load roll-call data: {e}", context)
            continue

        if not org_response.data:
            record_failure(JOB_NAME, stats, "Organization not found", context)
            continue

        try:
            organization = Organization.model_validate(cast(dict[str, Any], org_response.data))
        except ValidationError as e:
            record_failure(JOB_NAME, stats, f"Invalid organization row: {e}", context)
            continue

        if not organization.contact_email:
            record_failure(
                JOB_NAME,
                stats,
                f"No contact email for organization {organization.name}",
                context,
            )
            continue

        signup_count = len(signups_response.data or [])
        content = build_roll_call_email(
            opportunity, signup_count, roll_call_url(cast(str, opportunity.id))
        )

        if dry_run:
            print(f"  [DRY RUN] Would send roll call to {organization.contact_email}")
            stats["sent"] += 1
            continue

        result = send_content(organization.contact_email, content)
        if not result["success"]:
            record_failure(
                JOB_NAME,
                stats,
                f"Failed to send roll call to {organization.contact_email}: {result.get('error')}",
                context,
            )
            continue

        print(f"  ✓ Sent roll call to {organization.contact_email}")
        stats["sent"] += 1

        # Mark as sent so later runs skip this occurrence
        try:
            supabase.table("opportunities").update(
                {"rollcall_email_sent_at": format_instant(moment)}
            ).eq("id", opportunity.id).execute()
        except Exception as e:
            print(f"  ⚠️  Failed to mark roll call as sent for {opportunity.id}: {e}")

        time.sleep(SEND_DELAY_SECONDS)

    print_summary("Roll Call Emails", stats)
    return stats
