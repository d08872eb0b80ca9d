"""Pydantic models for opportunity data."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import OpportunityID, OrganizationID, TagList


class Frequency(str, Enum):
    """How often an opportunity takes place."""

    ONE_OFF = "one-off"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ONGOING = "ongoing"

    @property
    def is_recurring(self) -> bool:
        return self in RECURRING_FREQUENCIES


RECURRING_FREQUENCIES = frozenset(
    {Frequency.DAILY, Frequency.WEEKLY, Frequency.MONTHLY}
)


class Opportunity(BaseModel):
    """Opportunity record from database.

    Unknown columns (nested organization, photos, ...) are kept so that a
    scored opportunity can be returned with every original field.
    """

    model_config = ConfigDict(extra="allow")

    id: OpportunityID | None = None
    org_id: OrganizationID | None = None
    title: str | None = None
    description: str | None = None
    location: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration_hours: float | None = Field(None, ge=0)
    cause_tags: TagList = Field(default_factory=list)
    skills_needed: TagList = Field(default_factory=list)
    is_remote: bool = False
    frequency: Frequency | None = None
    closed: bool | None = None
    rollcall_email_sent_at: datetime | None = None

    @field_validator("start_time", "end_time", "rollcall_email_sent_at")
    @classmethod
    def _naive_as_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("cause_tags", "skills_needed", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("is_remote", mode="before")
    @classmethod
    def _none_as_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("frequency", mode="before")
    @classmethod
    def _unknown_frequency_as_none(cls, value: Any) -> Any:
        if isinstance(value, Frequency):
            return value
        try:
            return Frequency(value)
        except ValueError:
            return None


class ScoredOpportunity(Opportunity):
    """Opportunity annotated with its relevance to one volunteer."""

    match_score: int = Field(0, ge=0)
    match_reasons: list[str] = Field(default_factory=list)
