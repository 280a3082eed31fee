import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

BudgetLevel = Literal["1", "2", "3", "4"]


class PreferencesWrite(BaseModel):
    """Full preference record. PUT replaces every field, omitted lists become empty."""

    age: int | None = Field(None, ge=0, le=150)
    location: str | None = None
    dietary_restrictions: list[str] = []
    activity_preferences: list[str] = []
    budget: BudgetLevel | None = None
    travel_style: list[str] = []
    lifestyle_choices: list[str] = []
    accessibility_needs: list[str] = []
    preferred_transportation: list[str] = []
    typical_trip_length: str | None = None
    planning_role: str | None = None
    typical_audience: list[str] = []

    @field_validator("dietary_restrictions")
    @classmethod
    def _dedupe_dietary(cls, v: list[str]) -> list[str]:
        # dietary restrictions are a set
        return list(dict.fromkeys(v))


class PreferencesResponse(PreferencesWrite):
    id: uuid.UUID
    user_id: uuid.UUID
    budget: str | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class PreferenceSummaryWrite(BaseModel):
    """Client-supplied group summary. Send all five maps, or none to aggregate server-side."""

    activity_counts: dict[str, int] | None = None
    dietary_counts: dict[str, int] | None = None
    lifestyle_counts: dict[str, int] | None = None
    travel_style_counts: dict[str, int] | None = None
    budget_counts: dict[BudgetLevel, int] | None = None

    def provided_fields(self) -> list[str]:
        return [name for name, value in self if value is not None]


class PreferenceSummaryResponse(BaseModel):
    trip_id: uuid.UUID
    activity_counts: dict[str, int]
    dietary_counts: dict[str, int]
    lifestyle_counts: dict[str, int]
    travel_style_counts: dict[str, int]
    budget_counts: dict[str, int]
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
