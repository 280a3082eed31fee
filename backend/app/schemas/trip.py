import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.auth import UserSummary


class LocationBase(BaseModel):
    google_place_id: str
    name: str
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    types: list[str] = []
    image: str | None = None


class LocationResponse(LocationBase):
    id: uuid.UUID

    model_config = {"from_attributes": True}


class CreateTripRequest(BaseModel):
    start_time: datetime
    end_time: datetime
    title: str | None = None
    description: str | None = None
    city: str | None = None
    estimated_time: str | None = None
    trip_image: str | None = None
    is_private: bool = False
    max_guests: int | None = Field(None, ge=1)

    @field_validator("start_time", "end_time")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        # Naive timestamps are read as UTC so start and end always compare
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


class TripResponse(BaseModel):
    id: uuid.UUID
    host_id: uuid.UUID
    title: str
    description: str | None
    city: str | None
    status: str
    start_time: datetime
    end_time: datetime
    estimated_time: str | None
    trip_image: str | None
    is_private: bool
    max_guests: int | None
    location_order: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TripDetailResponse(TripResponse):
    host: UserSummary
    locations: list[LocationResponse]


class TripTimesResponse(BaseModel):
    start_time: datetime
    end_time: datetime
    estimated_time: str | None

    model_config = {"from_attributes": True}


class UpdateStatusRequest(BaseModel):
    status: Literal["PLANNING", "ACTIVE", "COMPLETED"]


class UpdateEstimatedTimeRequest(BaseModel):
    estimated_time: str = Field(..., min_length=1)


class AddLocationRequest(BaseModel):
    location_id: uuid.UUID | None = None
    google_place_id: str | None = None


class LocationOrderRequest(BaseModel):
    location_order: list[str]


class ProposedGuestCreate(BaseModel):
    name: str | None = None
    email: EmailStr


class ProposedGuestResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    name: str | None
    email: str

    model_config = {"from_attributes": True}


class RSVPRequest(BaseModel):
    status: str | None = None


class RSVPResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    trip_id: uuid.UUID
    status: str

    model_config = {"from_attributes": True}


class RSVPWithUser(RSVPResponse):
    user: UserSummary


class TripSummary(BaseModel):
    id: uuid.UUID
    title: str
    start_time: datetime

    model_config = {"from_attributes": True}


class RSVPWithTrip(RSVPResponse):
    trip: TripSummary


class CommentCreate(BaseModel):
    trip_id: uuid.UUID
    text: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    id: uuid.UUID
    trip_id: uuid.UUID
    author_id: uuid.UUID
    text: str
    created_at: datetime

    model_config = {"from_attributes": True}
