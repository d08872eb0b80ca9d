"""Pydantic models for organizations, senior projects and their sign-ups."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import OpportunityID, OrganizationID, ProjectID, UserID


class Organization(BaseModel):
    """Organization that posts opportunities."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: OrganizationID | None = None
    name: str = Field(..., min_length=1)
    owner: UserID | None = None
    contact_email: str | None = None
    reach_out_email: str | None = None


class Signup(BaseModel):
    """Volunteer sign-up for an opportunity."""

    model_config = ConfigDict(str_strip_whitespace=True)

    opportunity_id: OpportunityID | None = None
    user_id: UserID | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    institute: str | None = None
    created_at: datetime | None = None

    @field_validator("created_at")
    @classmethod
    def _naive_as_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class SeniorProject(BaseModel):
    """Student senior project accepting volunteers."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: ProjectID
    title: str = Field(..., min_length=1)
    user_id: UserID


class SeniorProjectSignup(BaseModel):
    """Volunteer sign-up for a senior project."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = None
    email: str | None = None
    created_at: datetime | None = None
