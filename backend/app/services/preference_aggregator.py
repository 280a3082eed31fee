"""Group preference aggregation: frequency counts across a trip's members."""

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError
from app.models.trip import Trip, TripPreference, TripRSVP
from app.models.user import UserPreferences

logger = logging.getLogger(__name__)

BUDGET_LEVELS = ("1", "2", "3", "4")

# Preference list field -> summary map it feeds
_COUNTED_FIELDS = {
    "activity_preferences": "activity_counts",
    "dietary_restrictions": "dietary_counts",
    "lifestyle_choices": "lifestyle_counts",
    "travel_style": "travel_style_counts",
}


def _empty_budget() -> dict[str, int]:
    return {level: 0 for level in BUDGET_LEVELS}


@dataclass
class GroupPreferenceSummary:
    activity_counts: dict[str, int] = field(default_factory=dict)
    dietary_counts: dict[str, int] = field(default_factory=dict)
    lifestyle_counts: dict[str, int] = field(default_factory=dict)
    travel_style_counts: dict[str, int] = field(default_factory=dict)
    budget_counts: dict[str, int] = field(default_factory=_empty_budget)

    def to_dict(self) -> dict[str, dict[str, int]]:
        return asdict(self)


def aggregate_preferences(
    records: Iterable[Mapping[str, Any] | None],
) -> GroupPreferenceSummary:
    """
    Count every label across the members' preference records.

    Labels are counted exactly as stored (case-sensitive). ``None`` records
    (members who never filled in preferences) contribute nothing, and a
    budget outside "1".."4" is skipped.
    """
    summary = GroupPreferenceSummary()

    for record in records:
        if record is None:
            continue

        for source, target in _COUNTED_FIELDS.items():
            counts = getattr(summary, target)
            for label in record.get(source) or []:
                counts[label] = counts.get(label, 0) + 1

        budget = record.get("budget")
        if budget in summary.budget_counts:
            summary.budget_counts[budget] += 1

    return summary


def preferences_to_record(prefs: UserPreferences) -> dict[str, Any]:
    """Flatten a UserPreferences row into the plain dict used by the prompt and aggregator."""
    return {
        "age": prefs.age,
        "location": prefs.location,
        "dietary_restrictions": list(prefs.dietary_restrictions or []),
        "activity_preferences": list(prefs.activity_preferences or []),
        "budget": prefs.budget,
        "travel_style": list(prefs.travel_style or []),
        "lifestyle_choices": list(prefs.lifestyle_choices or []),
        "accessibility_needs": list(prefs.accessibility_needs or []),
        "preferred_transportation": list(prefs.preferred_transportation or []),
        "typical_trip_length": prefs.typical_trip_length,
        "planning_role": prefs.planning_role,
        "typical_audience": list(prefs.typical_audience or []),
    }


def summary_to_dict(row: TripPreference) -> dict[str, Any]:
    return {
        "trip_id": str(row.trip_id),
        "activity_counts": row.activity_counts or {},
        "dietary_counts": row.dietary_counts or {},
        "lifestyle_counts": row.lifestyle_counts or {},
        "travel_style_counts": row.travel_style_counts or {},
        "budget_counts": row.budget_counts or _empty_budget(),
        "updated_at": row.updated_at.isoformat() if row.updated_at else None,
    }


class PreferenceAggregatorService:
    """Recomputes and stores the per-trip group preference summary."""

    async def member_ids(self, db: AsyncSession, trip: Trip) -> list[uuid.UUID]:
        """Host first, then every user whose RSVP is not a decline, in RSVP order."""
        result = await db.execute(
            select(TripRSVP.user_id)
            .where(TripRSVP.trip_id == trip.id, TripRSVP.status != "NO")
            .order_by(TripRSVP.created_at, TripRSVP.id)
        )
        ids = [trip.host_id]
        for user_id in result.scalars().all():
            if user_id not in ids:
                ids.append(user_id)
        return ids

    async def compute(self, db: AsyncSession, trip_id: uuid.UUID) -> GroupPreferenceSummary:
        trip = await db.get(Trip, trip_id)
        if trip is None:
            raise NotFoundError("Trip not found.")

        ids = await self.member_ids(db, trip)
        result = await db.execute(
            select(UserPreferences).where(UserPreferences.user_id.in_(ids))
        )
        by_user = {p.user_id: p for p in result.scalars().all()}

        records = [
            preferences_to_record(by_user[uid]) if uid in by_user else None
            for uid in ids
        ]
        summary = aggregate_preferences(records)
        logger.info(
            f"Aggregated preferences for trip {trip_id}: "
            f"{len(by_user)}/{len(ids)} members with preferences"
        )
        return summary

    async def upsert(
        self, db: AsyncSession, trip_id: uuid.UUID, summary: GroupPreferenceSummary
    ) -> TripPreference:
        """Replace all five maps of the trip's summary, creating the row if needed."""
        if await db.get(Trip, trip_id) is None:
            raise NotFoundError("Trip not found.")

        result = await db.execute(
            select(TripPreference).where(TripPreference.trip_id == trip_id)
        )
        row = result.scalar_one_or_none()
        values = summary.to_dict()

        if row is None:
            row = TripPreference(trip_id=trip_id, **values)
            db.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)

        await db.commit()
        await db.refresh(row)
        return row

    async def refresh(self, db: AsyncSession, trip_id: uuid.UUID) -> TripPreference:
        summary = await self.compute(db, trip_id)
        return await self.upsert(db, trip_id, summary)

    async def get(self, db: AsyncSession, trip_id: uuid.UUID) -> TripPreference | None:
        result = await db.execute(
            select(TripPreference).where(TripPreference.trip_id == trip_id)
        )
        return result.scalar_one_or_none()


preference_aggregator = PreferenceAggregatorService()
