"""Pydantic models for volunteer preferences."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.opportunity import Frequency
from models.types import TagSet, UserID


class TimeCommitment(str, Enum):
    """Commitment a volunteer is looking for. FLEXIBLE accepts anything."""

    ONE_OFF = "one-off"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ONGOING = "ongoing"
    FLEXIBLE = "flexible"

    def matches(self, frequency: Frequency | None) -> bool:
        """True when this commitment names exactly the given frequency."""
        if self is TimeCommitment.FLEXIBLE or frequency is None:
            return False
        return self.value == frequency.value


class Preferences(BaseModel):
    """A volunteer's stored preferences (user_preferences table)."""

    model_config = ConfigDict(extra="ignore")

    user_id: UserID | None = None
    interests: TagSet = Field(default_factory=frozenset)
    skills: TagSet = Field(default_factory=frozenset)
    remote_ok: bool | None = None
    time_commitment: TimeCommitment = TimeCommitment.FLEXIBLE
    location_preference: str | None = None

    @field_validator("interests", "skills", mode="before")
    @classmethod
    def _none_as_empty_set(cls, value: Any) -> Any:
        return frozenset() if value is None else value

    @field_validator("time_commitment", mode="before")
    @classmethod
    def _unknown_commitment_as_flexible(cls, value: Any) -> Any:
        if isinstance(value, TimeCommitment):
            return value
        try:
            return TimeCommitment(value)
        except ValueError:
            return TimeCommitment.FLEXIBLE
