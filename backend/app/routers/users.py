import logging
import uuid

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database import get_db
from app.dependencies import get_current_user, get_suggestion_service
from app.models.trip import Trip, TripRSVP
from app.models.user import User, UserPreferences
from app.schemas.auth import UserResponse
from app.schemas.preferences import PreferencesResponse, PreferencesWrite
from app.schemas.suggestion import (
    LocationSuggestionsResponse,
    SuggestionRequest,
    TripIdeasResponse,
)
from app.schemas.trip import RSVPWithTrip, TripResponse
from app.services.suggestion_service import SuggestionService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_preferences(db: AsyncSession, user_id: uuid.UUID) -> UserPreferences | None:
    result = await db.execute(select(UserPreferences).where(UserPreferences.user_id == user_id))
    return result.scalar_one_or_none()


# ─── Current user ───

@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.get("/me/preferences", response_model=PreferencesResponse)
async def get_user_preferences(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    prefs = await _get_preferences(db, user.id)
    if not prefs:
        raise HTTPException(status_code=404, detail="Preferences not found for this user.")
    return PreferencesResponse.model_validate(prefs)


@router.post("/me/preferences", status_code=201, response_model=PreferencesResponse)
async def create_user_preferences(
    req: PreferencesWrite,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Create preferences. Fails if the user already has them."""
    if await _get_preferences(db, user.id):
        raise HTTPException(
            status_code=409,
            detail="Preferences for this user already exist. Use PUT to update.",
        )

    prefs = UserPreferences(user_id=user.id, **req.model_dump())
    db.add(prefs)
    await db.commit()
    await db.refresh(prefs)
    logger.info(f"Created preferences for user {user.id}")
    return PreferencesResponse.model_validate(prefs)


@router.put("/me/preferences", response_model=PreferencesResponse)
async def update_user_preferences(
    req: PreferencesWrite,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Replace the user's preferences, creating them on first submission."""
    prefs = await _get_preferences(db, user.id)
    if prefs is None:
        prefs = UserPreferences(user_id=user.id)
        db.add(prefs)
    for key, value in req.model_dump().items():
        setattr(prefs, key, value)

    await db.commit()
    await db.refresh(prefs)
    return PreferencesResponse.model_validate(prefs)


@router.delete("/me/preferences")
async def delete_user_preferences(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    prefs = await _get_preferences(db, user.id)
    if not prefs:
        raise HTTPException(status_code=404, detail="Preferences not found for this user.")
    await db.delete(prefs)
    await db.commit()
    return {"message": "Preferences deleted successfully."}


@router.get("/me/past-trips", response_model=list[TripResponse])
async def get_user_past_trips(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Completed trips hosted by the current user, newest first."""
    result = await db.execute(
        select(Trip)
        .where(Trip.host_id == user.id, Trip.status == "COMPLETED")
        .order_by(Trip.end_time.desc())
    )
    return [TripResponse.model_validate(t) for t in result.scalars().all()]


# ─── Any user ───

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    return UserResponse.model_validate(user)


@router.get("/{user_id}/rsvps", response_model=list[RSVPWithTrip])
async def get_user_rsvps(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(TripRSVP)
        .where(TripRSVP.user_id == user_id)
        .options(selectinload(TripRSVP.trip))
        .order_by(TripRSVP.created_at)
    )
    return [RSVPWithTrip.model_validate(r) for r in result.scalars().all()]


@router.post(
    "/{user_id}/suggestions",
    responses={200: {"model": LocationSuggestionsResponse}},
)
async def generate_location_suggestions(
    user_id: uuid.UUID,
    req: SuggestionRequest | None = Body(None),
    service: SuggestionService = Depends(get_suggestion_service),
):
    """Five AI-suggested locations matched to the user's preferences and trip history."""
    context = req.to_context() if req else None
    return await service.suggest_locations(user_id, context)


@router.post(
    "/{user_id}/trip-suggestions",
    responses={200: {"model": TripIdeasResponse}},
)
async def generate_trip_suggestions(
    user_id: uuid.UUID,
    req: SuggestionRequest | None = Body(None),
    service: SuggestionService = Depends(get_suggestion_service),
):
    """Five AI-suggested trip ideas matched to the user's preferences and trip history."""
    context = req.to_context() if req else None
    return await service.suggest_trip_ideas(user_id, context)
