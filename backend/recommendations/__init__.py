"""
Opportunity recommendations for volunteers.

This module handles:
- Scoring opportunities against a volunteer's stored preferences
- Ranking candidates and returning the top matches
"""

from .scorer import MatchResult, rank_opportunities, score_opportunity
from .service import PreferencesNotFoundError, RecommendationError, get_recommendations

__all__ = [
    'MatchResult',
    'score_opportunity',
    'rank_opportunities',
    'get_recommendations',
    'RecommendationError',
    'PreferencesNotFoundError',
]
