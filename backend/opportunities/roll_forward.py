"""
Roll recurring opportunities forward to their next occurrence.

Two entry points:
- ``roll_forward_opportunities``: scheduled job that moves every ended
  daily/weekly/monthly opportunity to its next occurrence in place
- ``roll_forward_opportunity``: organization owner clones the next
  occurrence as a new row and closes the current one
"""

from datetime import datetime
from typing import Any, cast

from models.opportunity import RECURRING_FREQUENCIES, Frequency, Opportunity
from models.types import JobStats
from notifications.error_logger import record_failure
from shared.windows import format_instant, to_utc_instant, utc_now
from opportunities.recurrence import advance, next_occurrence, occurrence_duration
from shared.db import get_supabase_client
from shared.utils import print_summary

JOB_NAME = "roll-forward-opportunities"

RECURRING_VALUES = sorted(f.value for f in RECURRING_FREQUENCIES)

# Columns copied onto a cloned occurrence, with defaults for missing values
CLONED_COLUMNS: dict[str, Any] = {
    "org_id": None,
    "title": None,
    "description": None,
    "location": None,
    "needed": None,
    "photos": [],
    "cause_tags": [],
    "skills_needed": [],
    "is_remote": False,
    "age_group": "all",
    "difficulty_level": "beginner",
}


def roll_forward_opportunities(
    now: datetime | str | None = None,
    supabase: Any = None,
    dry_run: bool = False,
) -> JobStats:
    """
    Move ended recurring opportunities to their next occurrence.

    The roll-call marker is cleared so the new occurrence gets its own
    roll-call email.

    Args:
        now: Reference time (defaults to the current UTC time)
        supabase: Supabase client (defaults to the service-role client)
        dry_run: If True, compute but don't write updates

    Returns:
        Dictionary with stats: matched, updated, failed
    """
    moment = to_utc_instant(utc_now() if now is None else now)
    now_iso = format_instant(moment)
    print(f"[Roll Forward] Looking for recurring opportunities that ended before {now_iso}")

    supabase = supabase or get_supabase_client()
    response = (
        supabase.table("opportunities")
        .select("id, start_time, end_time, duration_hours, frequency")
        .or_("closed.is.null,closed.eq.false")
        .in_("frequency", RECURRING_VALUES)
        .lte("end_time", now_iso)
        .execute()
    )

    rows = response.data or []
    stats = {"matched": len(rows), "updated": 0, "failed": 0}

    if not rows:
        print("[Roll Forward] No recurring opportunities to roll forward.")
        return stats

    for row in rows:
        context = {"opportunity_id": row.get("id")}

        try:
            opportunity = Opportunity.model_validate(row)
            if opportunity.start_time is None or opportunity.frequency is None:
                raise ValueError("Opportunity has no start time or frequency")

            occurrence = next_occurrence(
                opportunity.start_time,
                opportunity.end_time,
                opportunity.frequency,
                moment,
                opportunity.duration_hours,
            )
            next_start, next_end = occurrence.as_iso()

            if dry_run:
                print(f"  [DRY RUN] Would move {opportunity.id} to {next_start}")
                stats["updated"] += 1
                continue

            supabase.table("opportunities").update(
                {
                    "start_time": next_start,
                    "end_time": next_end,
                    "rollcall_email_sent_at": None,
                }
            ).eq("id", opportunity.id).execute()

            print(f"  ✓ Moved {opportunity.id} to {next_start}")
            stats["updated"] += 1

        except Exception as e:
            record_failure(JOB_NAME, stats, f"Could not roll forward: {e}", context)

    print_summary("Roll Forward", stats)
    return stats


def _organization_owner(row: dict[str, Any]) -> str | None:
    organization = row.get("organizations")
    if isinstance(organization, list):
        organization = organization[0] if organization else None
    return organization.get("owner") if organization else None


def roll_forward_opportunity(
    opportunity_id: str,
    owner_id: str,
    overrides: dict[str, Any] | None = None,
    supabase: Any = None,
) -> dict[str, Any]:
    """
    Create the next occurrence of an opportunity and close the current one.

    Args:
        opportunity_id: Opportunity to roll forward
        owner_id: User requesting the change; must own the organization
        overrides: Optional column values for the new occurrence
        supabase: Supabase client (defaults to the service-role client)

    Returns:
        Dictionary with 'success' (bool), 'next_opportunity' (dict if success),
        'error' (str if failed) and 'warning' (str if the old row stayed open)
    """
    overrides = overrides or {}
    supabase = supabase or get_supabase_client()

    try:
        response = (
            supabase.table("opportunities")
            .select("*, organizations!inner(owner)")
            .eq("id", opportunity_id)
            .single()
            .execute()
        )
        row = cast(dict[str, Any] | None, response.data)
    except Exception:
        row = None

    if not row:
        return {"success": False, "error": "Opportunity not found"}

    if _organization_owner(row) != owner_id:
        return {"success": False, "error": "Forbidden"}

    try:
        frequency = Frequency(overrides.get("frequency") or row.get("frequency"))
    except ValueError:
        frequency = None
    if frequency not in RECURRING_FREQUENCIES:
        return {
            "success": False,
            "error": "Only daily/weekly/monthly can be rolled forward",
        }

    try:
        current_start = to_utc_instant(overrides.get("start_time") or row.get("start_time"))
        current_end_value = overrides.get("end_time") or row.get("end_time")
        current_end = to_utc_instant(current_end_value) if current_end_value else None
    except ValueError as e:
        return {"success": False, "error": str(e)}

    duration_hours = overrides.get("duration_hours", row.get("duration_hours"))
    duration = occurrence_duration(current_start, current_end, duration_hours)

    next_start = advance(current_start, frequency)
    next_end = next_start + duration

    new_row = {
        column: overrides.get(column, row.get(column) if row.get(column) is not None else default)
        for column, default in CLONED_COLUMNS.items()
    }
    new_row.update(
        {
            "start_time": format_instant(next_start),
            "end_time": format_instant(next_end),
            "duration_hours": duration_hours or duration.total_seconds() / 3600,
            "frequency": frequency.value,
            "rollcall_email_sent_at": None,
        }
    )

    try:
        insert_response = supabase.table("opportunities").insert(new_row).execute()
    except Exception as e:
        return {"success": False, "error": str(e)}

    inserted = insert_response.data
    if isinstance(inserted, list):
        inserted = inserted[0] if inserted else None

    try:
        supabase.table("opportunities").update({"closed": True}).eq(
            "id", opportunity_id
        ).execute()
    except Exception as e:
        print(f"  ⚠️  Created next occurrence but failed to close {opportunity_id}: {e}")
        return {
            "success": True,
            "next_opportunity": inserted,
            "warning": "Created next occurrence but failed to close current.",
        }

    return {"success": True, "next_opportunity": inserted}
