"""Read-only accessors for the data a suggestion prompt is built from.

Each lookup opens its own session so the orchestrator can run them concurrently.
"""

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.trip import Trip, TripPreference
from app.models.user import UserPreferences
from app.services.preference_aggregator import preferences_to_record, summary_to_dict

logger = logging.getLogger(__name__)


def trip_to_record(trip: Trip) -> dict[str, Any]:
    return {
        "id": str(trip.id),
        "title": trip.title,
        "city": trip.city,
        "description": trip.description,
        "status": trip.status,
        "start_time": trip.start_time.isoformat() if trip.start_time else None,
        "end_time": trip.end_time.isoformat() if trip.end_time else None,
    }


class PreferenceStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], recent_trip_limit: int = 5):
        self._session_factory = session_factory
        self.recent_trip_limit = recent_trip_limit

    async def get_preferences(self, user_id: uuid.UUID) -> dict[str, Any] | None:
        async with self._session_factory() as db:
            result = await db.execute(
                select(UserPreferences).where(UserPreferences.user_id == user_id)
            )
            prefs = result.scalar_one_or_none()
            return preferences_to_record(prefs) if prefs else None

    async def get_recent_trips(self, user_id: uuid.UUID) -> list[dict[str, Any]]:
        """Trips hosted by the user, most recently created first."""
        async with self._session_factory() as db:
            result = await db.execute(
                select(Trip)
                .where(Trip.host_id == user_id)
                .order_by(Trip.created_at.desc())
                .limit(self.recent_trip_limit)
            )
            return [trip_to_record(t) for t in result.scalars().all()]

    async def get_trip(self, trip_id: uuid.UUID) -> dict[str, Any] | None:
        async with self._session_factory() as db:
            trip = await db.get(Trip, trip_id)
            return trip_to_record(trip) if trip else None

    async def get_trip_summary(self, trip_id: uuid.UUID) -> dict[str, Any] | None:
        async with self._session_factory() as db:
            result = await db.execute(
                select(TripPreference).where(TripPreference.trip_id == trip_id)
            )
            row = result.scalar_one_or_none()
            if row is None:
                return None
            summary = summary_to_dict(row)
            # Only the counts go into the prompt
            summary.pop("trip_id", None)
            summary.pop("updated_at", None)
            return summary
