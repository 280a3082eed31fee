import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.location import Location
from app.models.user import User
from app.schemas.trip import LocationBase, LocationResponse

router = APIRouter()


@router.get("", response_model=list[LocationResponse])
async def list_locations(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Location).order_by(Location.name))
    return [LocationResponse.model_validate(loc) for loc in result.scalars().all()]


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(location_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    location = await db.get(Location, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found.")
    return LocationResponse.model_validate(location)


@router.post("", status_code=201, response_model=LocationResponse)
async def create_location(
    req: LocationBase,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Store a place from the places API. Each Google place id is stored once."""
    result = await db.execute(
        select(Location).where(Location.google_place_id == req.google_place_id)
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Location already exists.")

    location = Location(**req.model_dump())
    db.add(location)
    await db.commit()
    return LocationResponse.model_validate(location)


@router.delete("/{location_id}")
async def delete_location(
    location_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    location = await db.get(Location, location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found.")
    await db.delete(location)
    await db.commit()
    return {"message": "Location deleted successfully"}
