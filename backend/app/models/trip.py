import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, PortableJSON
from app.models.location import Location
from app.models.user import User

TRIP_STATUSES = ("PLANNING", "ACTIVE", "COMPLETED")
RSVP_STATUSES = ("YES", "NO", "MAYBE")

trip_locations = Table(
    "trip_locations",
    Base.metadata,
    Column("trip_id", Uuid, ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
    Column("location_id", Uuid, ForeignKey("locations.id", ondelete="CASCADE"), primary_key=True),
)


class Trip(Base):
    __tablename__ = "trips"
    __table_args__ = (Index("idx_trips_status_end", "status", "end_time"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    host_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), default="New Trip")
    description: Mapped[str | None] = mapped_column(Text)
    city: Mapped[str | None] = mapped_column(String(100))
    status: Mapped[str] = mapped_column(String(20), default="PLANNING")
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    estimated_time: Mapped[str | None] = mapped_column(String(50))
    trip_image: Mapped[str | None] = mapped_column(String(500))
    is_private: Mapped[bool] = mapped_column(Boolean, default=False)
    max_guests: Mapped[int | None] = mapped_column(Integer)
    location_order: Mapped[list] = mapped_column(PortableJSON, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    host: Mapped["User"] = relationship()
    locations: Mapped[list["Location"]] = relationship(secondary=trip_locations)
    # Rows go with the trip through ON DELETE CASCADE
    rsvps: Mapped[list["TripRSVP"]] = relationship(
        back_populates="trip", cascade="all, delete-orphan", passive_deletes=True
    )
    preference_summary: Mapped["TripPreference"] = relationship(
        back_populates="trip", cascade="all, delete-orphan", uselist=False, passive_deletes=True
    )


class TripPreference(Base):
    """Group preference summary for a trip, recomputed wholesale on each refresh."""

    __tablename__ = "trip_preferences"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    activity_counts: Mapped[dict] = mapped_column(PortableJSON, default=dict)
    dietary_counts: Mapped[dict] = mapped_column(PortableJSON, default=dict)
    lifestyle_counts: Mapped[dict] = mapped_column(PortableJSON, default=dict)
    travel_style_counts: Mapped[dict] = mapped_column(PortableJSON, default=dict)
    budget_counts: Mapped[dict] = mapped_column(PortableJSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    trip: Mapped["Trip"] = relationship(back_populates="preference_summary")


class TripRSVP(Base):
    __tablename__ = "trip_rsvps"
    __table_args__ = (UniqueConstraint("user_id", "trip_id", name="uq_trip_rsvps_user_trip"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped["User"] = relationship()
    trip: Mapped["Trip"] = relationship(back_populates="rsvps")


class ProposedGuest(Base):
    __tablename__ = "proposed_guests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), nullable=False)


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
