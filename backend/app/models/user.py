import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, PortableJSON


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255))
    phone_number: Mapped[str | None] = mapped_column(String(32))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    preferences: Mapped["UserPreferences"] = relationship(
        back_populates="user", cascade="all, delete-orphan", uselist=False, passive_deletes=True
    )


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    age: Mapped[int | None] = mapped_column(Integer)
    location: Mapped[str | None] = mapped_column(String(255))
    dietary_restrictions: Mapped[list] = mapped_column(PortableJSON, default=list)
    activity_preferences: Mapped[list] = mapped_column(PortableJSON, default=list)
    budget: Mapped[str | None] = mapped_column(String(8))
    travel_style: Mapped[list] = mapped_column(PortableJSON, default=list)
    lifestyle_choices: Mapped[list] = mapped_column(PortableJSON, default=list)
    accessibility_needs: Mapped[list] = mapped_column(PortableJSON, default=list)
    preferred_transportation: Mapped[list] = mapped_column(PortableJSON, default=list)
    typical_trip_length: Mapped[str | None] = mapped_column(String(50))
    planning_role: Mapped[str | None] = mapped_column(String(50))
    typical_audience: Mapped[list] = mapped_column(PortableJSON, default=list)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="preferences")
