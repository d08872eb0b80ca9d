"""
Preference scoring for opportunity recommendations.

Scores candidate opportunities against a volunteer's stored preferences and
ranks them by relevance.
"""

from typing import Iterable, NamedTuple

from models.opportunity import Opportunity, ScoredOpportunity
from models.preferences import Preferences

INTEREST_WEIGHT = 3
SKILL_WEIGHT = 2
REMOTE_WEIGHT = 2
TIME_COMMITMENT_WEIGHT = 1
LOCATION_WEIGHT = 1

DEFAULT_RECOMMENDATION_LIMIT = 10


class MatchResult(NamedTuple):
    score: int
    reasons: list[str]


def _matching_tags(tags: list[str], wanted: frozenset[str]) -> list[str]:
    """Tags present in ``wanted``, deduplicated, in their original order."""
    return list(dict.fromkeys(tag for tag in tags if tag in wanted))


def score_opportunity(
    opportunity: Opportunity, preferences: Preferences
) -> MatchResult:
    """
    Score how well an opportunity fits a volunteer's preferences.

    Each rule is evaluated independently and contributes a fixed weight.
    Missing or empty fields simply contribute nothing.

    Args:
        opportunity: Candidate opportunity
        preferences: The volunteer's stored preferences

    Returns:
        MatchResult with the total score and one reason per contributing
        rule (interest, skill, remote, time, location order)
    """
    score = 0
    reasons: list[str] = []

    # Interest match
    interest_matches = _matching_tags(opportunity.cause_tags, preferences.interests)
    if interest_matches:
        score += INTEREST_WEIGHT * len(interest_matches)
        reasons.append(f"Matches your interests: {', '.join(interest_matches)}")

    # Skill match
    skill_matches = _matching_tags(opportunity.skills_needed, preferences.skills)
    if skill_matches:
        score += SKILL_WEIGHT * len(skill_matches)
        skills_text = ", ".join(skill.replace("_", " ") for skill in skill_matches)
        reasons.append(f"Uses your skills: {skills_text}")

    # Remote preference: agreement scores, disagreement is neutral
    if preferences.remote_ok is True and opportunity.is_remote:
        score += REMOTE_WEIGHT
        reasons.append("Remote opportunity")
    elif preferences.remote_ok is False and not opportunity.is_remote:
        score += REMOTE_WEIGHT
        reasons.append("In-person opportunity")

    # Time commitment
    if preferences.time_commitment.matches(opportunity.frequency):
        score += TIME_COMMITMENT_WEIGHT
        reasons.append(
            f"Matches your preferred commitment: {preferences.time_commitment.value}"
        )

    # Location (substring either way, case-insensitive)
    if preferences.location_preference and opportunity.location:
        opp_location = opportunity.location.lower()
        pref_location = preferences.location_preference.lower()
        if pref_location in opp_location or opp_location in pref_location:
            score += LOCATION_WEIGHT
            reasons.append("Near your preferred location")

    return MatchResult(score, reasons)


def rank_opportunities(
    opportunities: Iterable[Opportunity],
    preferences: Preferences,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
) -> list[ScoredOpportunity]:
    """
    Score every candidate and return the best matches first.

    The sort is stable, so equally scored opportunities keep their input
    order.

    Args:
        opportunities: Candidate opportunities
        preferences: The volunteer's stored preferences
        limit: Maximum number of results

    Returns:
        Up to ``limit`` scored opportunities, highest score first
    """
    scored = []
    for opportunity in opportunities:
        score, reasons = score_opportunity(opportunity, preferences)
        scored.append(
            ScoredOpportunity(
                **opportunity.model_dump(exclude={"match_score", "match_reasons"}),
                match_score=score,
                match_reasons=reasons,
            )
        )

    scored.sort(key=lambda opp: opp.match_score, reverse=True)
    return scored[:limit]
