"""Group preferences and AI suggestions for a trip."""

import logging
import uuid

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_suggestion_service
from app.errors import ValidationError
from app.schemas.preferences import PreferenceSummaryResponse, PreferenceSummaryWrite
from app.schemas.suggestion import LocationSuggestionsResponse, TripSuggestionRequest
from app.services.preference_aggregator import (
    BUDGET_LEVELS,
    GroupPreferenceSummary,
    preference_aggregator,
)
from app.services.suggestion_service import SuggestionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.put("/{trip_id}/preference-summary", response_model=PreferenceSummaryResponse)
async def put_preference_summary(
    trip_id: uuid.UUID,
    req: PreferenceSummaryWrite | None = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Replace the trip's group preference summary.

    With no body (or an empty one) the summary is recomputed from the host and
    every member who has not declined. Otherwise all five maps must be sent.
    """
    provided = req.provided_fields() if req else []

    if not provided:
        row = await preference_aggregator.refresh(db, trip_id)
        return PreferenceSummaryResponse.model_validate(row)

    if len(provided) != len(PreferenceSummaryWrite.model_fields):
        raise ValidationError(
            "Send all five summary maps, or none to aggregate from the trip's members."
        )

    summary = GroupPreferenceSummary(
        activity_counts=dict(req.activity_counts),
        dietary_counts=dict(req.dietary_counts),
        lifestyle_counts=dict(req.lifestyle_counts),
        travel_style_counts=dict(req.travel_style_counts),
        budget_counts={level: req.budget_counts.get(level, 0) for level in BUDGET_LEVELS},
    )
    row = await preference_aggregator.upsert(db, trip_id, summary)
    return PreferenceSummaryResponse.model_validate(row)


@router.get("/{trip_id}/preference-summary", response_model=PreferenceSummaryResponse)
async def get_preference_summary(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    row = await preference_aggregator.get(db, trip_id)
    if row is None:
        raise HTTPException(status_code=404, detail="No preference summary for this trip.")
    return PreferenceSummaryResponse.model_validate(row)


@router.post(
    "/{trip_id}/suggestions",
    responses={200: {"model": LocationSuggestionsResponse}},
)
async def generate_trip_location_suggestions(
    trip_id: uuid.UUID,
    req: TripSuggestionRequest | None = Body(None),
    service: SuggestionService = Depends(get_suggestion_service),
):
    """Five AI-suggested locations for this trip, weighted by the group's preferences."""
    req = req or TripSuggestionRequest()
    return await service.suggest_for_trip(
        trip_id,
        req.user_id,
        context=req.to_context(),
        group_summary=req.group_summary(),
    )
