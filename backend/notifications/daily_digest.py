"""
Daily sign-up digests for organizations and senior project owners.

"Today" is the UTC calendar day containing the run time, computed with
``day_window`` so the result does not depend on the host's timezone.
"""

import os
import time
from datetime import datetime
from typing import Any

from models.signup import Organization, SeniorProject, SeniorProjectSignup, Signup
from models.types import JobStats
from notifications.email_sender import send_content
from notifications.email_templates import (
    build_organization_digest_email,
    build_senior_project_digest_email,
)
from notifications.error_logger import record_failure
from shared.windows import day_window, utc_now
from shared.db import get_supabase_client
from shared.utils import print_summary

ORGANIZATION_JOB_NAME = "daily-digest-emails"
SENIOR_PROJECT_JOB_NAME = "senior-project-daily-digest"

SEND_DELAY_SECONDS = float(os.getenv("EMAIL_SEND_DELAY", "0.1"))


def send_organization_digests(
    now: datetime | str | None = None,
    supabase: Any = None,
    dry_run: bool = False,
) -> JobStats:
    """
    Send each organization one email listing today's volunteer sign-ups.

    Only organizations with a reach-out email are considered. Organizations
    with no opportunities or no sign-ups today are skipped.

    Args:
        now: Reference time (defaults to the current UTC time)
        supabase: Supabase client (defaults to the service-role client)
        dry_run: If True, don't actually send emails

    Returns:
        Dictionary with stats: matched (sign-ups today), sent, failed, skipped
    """
    window = day_window(utc_now() if now is None else now)
    start_iso, end_iso = window.as_iso()
    print(f"[Daily Digest] Collecting sign-ups created between {start_iso} and {end_iso}")

    supabase = supabase or get_supabase_client()
    response = (
        supabase.table("organizations")
        .select("id, name, reach_out_email")
        .not_.is_("reach_out_email", "null")
        .neq("reach_out_email", "")
        .execute()
    )

    stats = {"matched": 0, "sent": 0, "failed": 0, "skipped": 0}

    if not response.data:
        print("[Daily Digest] No organizations with reach-out emails found.")
        return stats

    for row in response.data:
        context = {"org_id": row.get("id"), "batch_start": start_iso}

        try:
            organization = Organization.model_validate(row)
            opportunities_response = (
                supabase.table("opportunities")
                .select("id, title")
                .eq("org_id", organization.id)
                .execute()
            )
            opportunities = opportunities_response.data or []
            if not opportunities:
                print(f"  ⊘ No opportunities for {organization.name}, skipping")
                stats["skipped"] += 1
                continue

            opportunity_titles = {opp["id"]: opp.get("title") or "Untitled" for opp in opportunities}
            signups_response = (
                supabase.table("signups")
                .select("name, email, phone, institute, opportunity_id, created_at")
                .in_("opportunity_id", list(opportunity_titles))
                .gte("created_at", start_iso)
                .lt("created_at", end_iso)
                .execute()
            )
            signups = [Signup.model_validate(s) for s in signups_response.data or []]
        except Exception as e:
            record_failure(
                ORGANIZATION_JOB_NAME, stats, f"Could not load sign-ups: {e}", context
            )
            continue

        if not signups:
            print(f"  ⊘ No sign-ups today for {organization.name}, skipping")
            stats["skipped"] += 1
            continue

        stats["matched"] += len(signups)
        print(f"\nProcessing {organization.name}: {len(signups)} sign-ups today")
        content = build_organization_digest_email(organization, signups, opportunity_titles)

        if dry_run:
            print(f"  [DRY RUN] Would send digest to {organization.reach_out_email}")
            stats["sent"] += 1
            continue

        result = send_content(organization.reach_out_email, content)
        if result["success"]:
            print(f"  ✓ Sent digest to {organization.reach_out_email}")
            stats["sent"] += 1
        else:
            record_failure(
                ORGANIZATION_JOB_NAME,
                stats,
                f"Failed to send digest to {organization.reach_out_email}: {result.get('error')}",
                {**context, "signup_count": len(signups)},
            )

        # Rate limiting: max 10 emails/second
        time.sleep(SEND_DELAY_SECONDS)

    print_summary("Organization Daily Digest", stats)
    return stats


def _owner_email(supabase: Any, user_id: str) -> str | None:
    """Look up a user's email through the auth admin API."""
    response = supabase.auth.admin.get_user_by_id(user_id)
    user = getattr(response, "user", None)
    return getattr(user, "email", None) if user else None


def send_senior_project_digests(
    now: datetime | str | None = None,
    supabase: Any = None,
    dry_run: bool = False,
) -> JobStats:
    """
    Send each senior project owner one email listing today's sign-ups.

    Args:
        now: Reference time (defaults to the current UTC time)
        supabase: Supabase client (defaults to the service-role client)
        dry_run: If True, don't actually send emails

    Returns:
        Dictionary with stats: matched (sign-ups today), sent, failed, skipped
    """
    window = day_window(utc_now() if now is None else now)
    start_iso, end_iso = window.as_iso()
    print(f"[Senior Project Digest] Collecting sign-ups created between {start_iso} and {end_iso}")

    supabase = supabase or get_supabase_client()
    response = supabase.table("senior_projects").select("id, title, user_id").execute()

    stats = {"matched": 0, "sent": 0, "failed": 0, "skipped": 0}

    if not response.data:
        print("[Senior Project Digest] No senior projects found.")
        return stats

    for row in response.data:
        context = {"project_id": row.get("id"), "batch_start": start_iso}

        try:
            project = SeniorProject.model_validate(row)
            signups_response = (
                supabase.table("senior_project_signups")
                .select("name, email, created_at")
                .eq("project_id", project.id)
                .gte("created_at", start_iso)
                .lt("created_at", end_iso)
                .execute()
            )
            signups = [
                SeniorProjectSignup.model_validate(s) for s in signups_response.data or []
            ]
        except Exception as e:
            record_failure(
                SENIOR_PROJECT_JOB_NAME, stats, f"Could not load sign-ups: {e}", context
            )
            continue

        if not signups:
            print(f"  ⊘ No sign-ups today for {project.title}, skipping")
            stats["skipped"] += 1
            continue

        stats["matched"] += len(signups)

        try:
            owner_email = _owner_email(supabase, project.user_id)
        except Exception as e:
            record_failure(
                SENIOR_PROJECT_JOB_NAME, stats, f"Could not look up owner: {e}", context
            )
            continue

        if not owner_email:
            record_failure(
                SENIOR_PROJECT_JOB_NAME, stats, "Project owner has no email", context
            )
            continue

        print(f"\nProcessing {project.title}: {len(signups)} sign-ups today")
        content = build_senior_project_digest_email(project, signups)

        if dry_run:
            print(f"  [DRY RUN] Would send digest to {owner_email}")
            stats["sent"] += 1
            continue

        result = send_content(owner_email, content)
        if result["success"]:
            print(f"  ✓ Sent digest to {owner_email}")
            stats["sent"] += 1
        else:
            record_failure(
                SENIOR_PROJECT_JOB_NAME,
                stats,
                f"Failed to send digest to {owner_email}: {result.get('error')}",
                {**context, "signup_count": len(signups)},
            )

        time.sleep(SEND_DELAY_SECONDS)

    print_summary("Senior Project Daily Digest", stats)
    return stats
