"""RSVP router: guest responses for a trip."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database import get_db
from app.dependencies import get_current_user
from app.models.trip import RSVP_STATUSES, Trip, TripRSVP
from app.models.user import User
from app.schemas.auth import UserSummary
from app.schemas.trip import RSVPRequest, RSVPResponse, RSVPWithUser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{trip_id}/rsvp", response_model=RSVPResponse)
async def create_or_update_rsvp(
    trip_id: uuid.UUID,
    req: RSVPRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Record the current user's yes/no/maybe for a trip, replacing any earlier answer."""
    if not await db.get(Trip, trip_id):
        raise HTTPException(status_code=404, detail="Trip not found.")

    status = (req.status or "").upper()
    if status not in RSVP_STATUSES:
        raise HTTPException(
            status_code=400,
            detail="Invalid status provided. Must be 'yes', 'no', or 'maybe'.",
        )

    result = await db.execute(
        select(TripRSVP).where(TripRSVP.user_id == user.id, TripRSVP.trip_id == trip_id)
    )
    rsvp = result.scalar_one_or_none()
    if rsvp is None:
        rsvp = TripRSVP(user_id=user.id, trip_id=trip_id, status=status)
        db.add(rsvp)
    else:
        rsvp.status = status

    await db.commit()
    await db.refresh(rsvp)
    logger.info(f"RSVP {status} from {user.id} for trip {trip_id}")
    return RSVPResponse.model_validate(rsvp)


@router.get("/{trip_id}/rsvps", response_model=list[RSVPWithUser])
async def get_trip_rsvps(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(TripRSVP)
        .where(TripRSVP.trip_id == trip_id)
        .options(selectinload(TripRSVP.user))
        .order_by(TripRSVP.created_at)
    )
    return [RSVPWithUser.model_validate(r) for r in result.scalars().all()]


@router.get("/{trip_id}/attendees", response_model=list[UserSummary])
async def get_trip_attendees(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Users who answered YES."""
    result = await db.execute(
        select(TripRSVP)
        .where(TripRSVP.trip_id == trip_id, TripRSVP.status == "YES")
        .options(selectinload(TripRSVP.user))
        .order_by(TripRSVP.created_at)
    )
    return [UserSummary.model_validate(r.user) for r in result.scalars().all()]
