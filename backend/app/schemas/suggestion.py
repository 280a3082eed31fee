import uuid
from datetime import date

from pydantic import BaseModel

from app.schemas.preferences import PreferenceSummaryWrite
from app.services.prompt_formatter import TripContext


class SuggestionRequest(BaseModel):
    """Optional context for a user-scoped request. Unknown fields are passed to the prompt."""

    destination: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    model_config = {"extra": "allow"}

    def to_context(self) -> TripContext:
        return TripContext(
            destination=self.destination,
            start_date=self.start_date.isoformat() if self.start_date else None,
            end_date=self.end_date.isoformat() if self.end_date else None,
            extra=dict(self.model_extra or {}),
        )


class TripSuggestionRequest(SuggestionRequest):
    user_id: uuid.UUID | None = None
    trip_preferences: PreferenceSummaryWrite | None = None

    def group_summary(self) -> dict | None:
        # An empty object means "use the stored summary", as on PUT /preference-summary
        if self.trip_preferences is None or not self.trip_preferences.provided_fields():
            return None
        return self.trip_preferences.model_dump(exclude_none=True)


class LocationSuggestion(BaseModel):
    city: str
    description: str
    best_for: list[str]


class LocationSuggestionsResponse(BaseModel):
    locations: list[LocationSuggestion]


class TripIdea(BaseModel):
    title: str
    description: str
    city: str
    duration_days: int
    suggested_activities: list[str]


class TripIdeasResponse(BaseModel):
    suggestions: list[TripIdea]
