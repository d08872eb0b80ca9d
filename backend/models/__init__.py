"""Pydantic models for data validation and type checking."""

from models.opportunity import (
    RECURRING_FREQUENCIES,
    Frequency,
    Opportunity,
    ScoredOpportunity,
)
from models.preferences import Preferences, TimeCommitment
from models.signup import Organization, SeniorProject, SeniorProjectSignup, Signup

__all__ = [
    "Frequency",
    "RECURRING_FREQUENCIES",
    "Opportunity",
    "ScoredOpportunity",
    "Preferences",
    "TimeCommitment",
    "Organization",
    "Signup",
    "SeniorProject",
    "SeniorProjectSignup",
]
