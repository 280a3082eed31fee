import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.database import get_db
from app.dependencies import get_current_user
from app.models.location import Location
from app.models.trip import ProposedGuest, Trip
from app.models.user import User
from app.schemas.trip import (
    AddLocationRequest,
    CreateTripRequest,
    LocationOrderRequest,
    ProposedGuestCreate,
    ProposedGuestResponse,
    TripDetailResponse,
    TripResponse,
    TripTimesResponse,
    UpdateEstimatedTimeRequest,
    UpdateStatusRequest,
)
from app.services.trip_status_service import can_transition

logger = logging.getLogger(__name__)

router = APIRouter()


def _ordered_locations(trip: Trip) -> list[Location]:
    """Locations in location_order; anything not listed keeps its stored order after them."""
    rank = {place_id: i for i, place_id in enumerate(trip.location_order or [])}
    listed = sorted(
        (loc for loc in trip.locations if loc.google_place_id in rank),
        key=lambda loc: rank[loc.google_place_id],
    )
    unlisted = [loc for loc in trip.locations if loc.google_place_id not in rank]
    return listed + unlisted


def _detail(trip: Trip) -> TripDetailResponse:
    detail = TripDetailResponse.model_validate(trip)
    ordered = [loc.id for loc in _ordered_locations(trip)]
    by_id = {loc.id: loc for loc in detail.locations}
    return detail.model_copy(update={"locations": [by_id[i] for i in ordered]})


async def _load_trip(db: AsyncSession, trip_id: uuid.UUID) -> Trip:
    result = await db.execute(
        select(Trip)
        .where(Trip.id == trip_id)
        .options(selectinload(Trip.host), selectinload(Trip.locations))
        .execution_options(populate_existing=True)
    )
    trip = result.scalar_one_or_none()
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found.")
    return trip


async def _load_hosted_trip(db: AsyncSession, trip_id: uuid.UUID, user: User) -> Trip:
    trip = await _load_trip(db, trip_id)
    if trip.host_id != user.id:
        raise HTTPException(status_code=403, detail="Only the trip host can do this.")
    return trip


@router.get("", response_model=list[TripDetailResponse])
async def list_trips(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Trip)
        .options(selectinload(Trip.host), selectinload(Trip.locations))
        .order_by(Trip.created_at.desc())
    )
    return [_detail(t) for t in result.scalars().all()]


@router.get("/user/{user_id}", response_model=list[TripDetailResponse])
async def list_trips_by_host(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Trip)
        .where(Trip.host_id == user_id)
        .options(selectinload(Trip.host), selectinload(Trip.locations))
        .order_by(Trip.created_at.desc())
    )
    return [_detail(t) for t in result.scalars().all()]


@router.post("", status_code=201, response_model=TripDetailResponse)
async def create_trip(
    req: CreateTripRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Create a PLANNING trip hosted by the current user."""
    if req.end_time < req.start_time:
        raise HTTPException(status_code=400, detail="end_time must not be before start_time.")

    planning_count = await db.scalar(
        select(func.count()).select_from(Trip).where(
            Trip.host_id == user.id, Trip.status == "PLANNING"
        )
    )
    if planning_count >= settings.planning_trip_limit:
        raise HTTPException(
            status_code=400,
            detail=f"You can only have up to {settings.planning_trip_limit} planning trips.",
        )

    trip = Trip(
        host_id=user.id,
        title=req.title or "New Trip",
        description=req.description or (f"trip to {req.city}" if req.city else None),
        city=req.city,
        status="PLANNING",
        start_time=req.start_time,
        end_time=req.end_time,
        estimated_time=req.estimated_time,
        trip_image=req.trip_image,
        is_private=req.is_private,
        max_guests=req.max_guests,
        location_order=[],
    )
    db.add(trip)
    await db.commit()
    logger.info(f"Trip {trip.id} created by {user.id}")

    return _detail(await _load_trip(db, trip.id))


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return _detail(await _load_trip(db, trip_id))


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await _load_hosted_trip(db, trip_id, user)
    if trip.status == "COMPLETED":
        raise HTTPException(status_code=403, detail="Completed trips cannot be deleted.")

    await db.delete(trip)
    await db.commit()
    logger.info(f"Trip {trip_id} deleted by {user.id}")
    return {"message": "Trip deleted successfully"}


@router.patch("/{trip_id}/status", response_model=TripResponse)
async def update_trip_status(
    trip_id: uuid.UUID,
    req: UpdateStatusRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Move a trip forward through PLANNING -> ACTIVE -> COMPLETED."""
    trip = await _load_hosted_trip(db, trip_id, user)
    if not can_transition(trip.status, req.status):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot move a trip from {trip.status} to {req.status}.",
        )
    trip.status = req.status
    await db.commit()
    await db.refresh(trip)
    return TripResponse.model_validate(trip)


@router.get("/{trip_id}/times", response_model=TripTimesResponse)
async def get_trip_times(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    trip = await db.get(Trip, trip_id)
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found.")
    return TripTimesResponse.model_validate(trip)


@router.patch("/{trip_id}/estimated-time", response_model=TripResponse)
async def update_estimated_time(
    trip_id: uuid.UUID,
    req: UpdateEstimatedTimeRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await _load_hosted_trip(db, trip_id, user)
    trip.estimated_time = req.estimated_time
    await db.commit()
    await db.refresh(trip)
    return TripResponse.model_validate(trip)


# ─── Locations ───

@router.post("/{trip_id}/locations", response_model=TripDetailResponse)
async def add_location_to_trip(
    trip_id: uuid.UUID,
    req: AddLocationRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Attach a known location by internal id or Google place id. Re-adding is a no-op."""
    if not req.location_id and not req.google_place_id:
        raise HTTPException(status_code=400, detail="Missing location_id or google_place_id.")

    trip = await _load_trip(db, trip_id)

    if req.location_id:
        location = await db.get(Location, req.location_id)
    else:
        result = await db.execute(
            select(Location).where(Location.google_place_id == req.google_place_id)
        )
        location = result.scalar_one_or_none()
    if not location:
        raise HTTPException(status_code=404, detail="Location not found.")

    if any(loc.id == location.id for loc in trip.locations):
        return _detail(trip)

    trip.locations.append(location)
    if location.google_place_id not in (trip.location_order or []):
        trip.location_order = [*(trip.location_order or []), location.google_place_id]
    await db.commit()

    return _detail(await _load_trip(db, trip_id))


@router.put("/{trip_id}/location-order", response_model=TripDetailResponse)
async def update_location_order(
    trip_id: uuid.UUID,
    req: LocationOrderRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    trip = await _load_trip(db, trip_id)
    attached = {loc.google_place_id for loc in trip.locations}
    unknown = [place_id for place_id in req.location_order if place_id not in attached]
    if unknown:
        raise HTTPException(
            status_code=400,
            detail=f"Locations not attached to this trip: {', '.join(unknown)}",
        )
    if len(set(req.location_order)) != len(req.location_order):
        raise HTTPException(status_code=400, detail="location_order contains duplicates.")

    trip.location_order = list(req.location_order)
    await db.commit()

    return _detail(await _load_trip(db, trip_id))


# ─── Proposed guests ───

@router.post("/{trip_id}/guests", status_code=201, response_model=list[ProposedGuestResponse])
async def add_proposed_guests(
    trip_id: uuid.UUID,
    guests: list[ProposedGuestCreate],
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await _load_trip(db, trip_id)

    rows = [ProposedGuest(trip_id=trip_id, name=g.name, email=g.email) for g in guests]
    db.add_all(rows)
    await db.commit()
    return [ProposedGuestResponse.model_validate(r) for r in rows]


@router.get("/{trip_id}/guests", response_model=list[ProposedGuestResponse])
async def get_proposed_guests(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    await _load_trip(db, trip_id)
    result = await db.execute(select(ProposedGuest).where(ProposedGuest.trip_id == trip_id))
    return [ProposedGuestResponse.model_validate(g) for g in result.scalars().all()]
