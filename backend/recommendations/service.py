"""
Recommendation retrieval for a single volunteer.

Loads the volunteer's preferences, queries open upcoming opportunities with
the preference pre-filters, and returns the best matches as JSON-ready dicts.
"""

from datetime import datetime
from typing import Any, cast

from models.opportunity import Opportunity
from models.preferences import Preferences, TimeCommitment
from shared.windows import format_instant, to_utc_instant, utc_now
from recommendations.scorer import DEFAULT_RECOMMENDATION_LIMIT, rank_opportunities
from shared.db import get_supabase_client

OPPORTUNITY_COLUMNS = (
    "id, title, description, location, start_time, end_time, needed, closed, photos, "
    "cause_tags, skills_needed, is_remote, duration_hours, frequency, "
    "organizations(name)"
)

PREFERENCE_FIELDS = (
    "interests",
    "skills",
    "remote_ok",
    "time_commitment",
    "location_preference",
)


class RecommendationError(Exception):
    """Recommendations could not be computed."""


class PreferencesNotFoundError(RecommendationError):
    """The volunteer has not saved any preferences."""


def fetch_preferences(supabase: Any, user_id: str) -> dict[str, Any]:
    """Load the raw user_preferences row for a volunteer."""
    try:
        response = (
            supabase.table("user_preferences")
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise RecommendationError(f"Failed to fetch preferences: {e}") from e

    if not response.data:
        raise PreferencesNotFoundError(f"No preferences found for user {user_id}")

    return cast(dict[str, Any], response.data[0])


def fetch_candidates(
    supabase: Any, preferences: Preferences, now: datetime
) -> list[Opportunity]:
    """Open opportunities starting from ``now`` that pass the preference filters."""
    query = (
        supabase.table("opportunities")
        .select(OPPORTUNITY_COLUMNS)
        .gte("start_time", format_instant(now))
        .or_("closed.is.null,closed.eq.false")
    )

    if preferences.interests:
        query = query.overlaps("cause_tags", sorted(preferences.interests))

    # Skills only affect scoring, never filtering

    if preferences.remote_ok is False:
        query = query.eq("is_remote", False)

    if preferences.time_commitment is not TimeCommitment.FLEXIBLE:
        query = query.eq("frequency", preferences.time_commitment.value)

    try:
        response = query.order("start_time").execute()
    except Exception as e:
        raise RecommendationError(f"Failed to fetch opportunities: {e}") from e

    return [Opportunity.model_validate(row) for row in response.data or []]


def get_recommendations(
    user_id: str,
    now: datetime | str | None = None,
    supabase: Any = None,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
) -> dict[str, Any]:
    """
    Recommend upcoming opportunities for a volunteer.

    Args:
        user_id: The volunteer's user ID
        now: Only opportunities starting at or after this time are considered
        supabase: Supabase client (defaults to the service-role client)
        limit: Maximum number of recommendations

    Returns:
        Dictionary with 'recommendations' (list of opportunity dicts including
        match_score and match_reasons) and 'user_preferences'

    Raises:
        PreferencesNotFoundError: If the volunteer has no saved preferences
        RecommendationError: If a query fails
        InvalidInstantError: If ``now`` is not a valid timestamp
    """
    moment = to_utc_instant(utc_now() if now is None else now)
    supabase = supabase or get_supabase_client()

    raw_preferences = fetch_preferences(supabase, user_id)
    preferences = Preferences.model_validate(raw_preferences)

    candidates = fetch_candidates(supabase, preferences, moment)
    ranked = rank_opportunities(candidates, preferences, limit=limit)

    return {
        "recommendations": [opp.model_dump(mode="json") for opp in ranked],
        "user_preferences": {
            field: raw_preferences.get(field) for field in PREFERENCE_FIELDS
        },
    }
