import pytest
from sqlalchemy import select

from app.models import Trip
from app.services.trip_status_service import can_transition, complete_past_trips


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        ("PLANNING", "ACTIVE", True),
        ("PLANNING", "COMPLETED", True),
        ("ACTIVE", "COMPLETED", True),
        ("ACTIVE", "PLANNING", False),
        ("COMPLETED", "ACTIVE", False),
        ("PLANNING", "PLANNING", False),
    ],
)
def test_can_transition(current, target, allowed):
    assert can_transition(current, target) is allowed


@pytest.mark.asyncio
async def test_sweep_completes_only_ended_trips(db, create_user, create_trip):
    host = await create_user()
    ended_planning = await create_trip(host, days_from_now=-10)
    ended_active = await create_trip(host, status="ACTIVE", days_from_now=-5)
    upcoming = await create_trip(host, days_from_now=3)

    updated = await complete_past_trips(db)

    assert updated == 2
    rows = (await db.execute(select(Trip.id, Trip.status))).all()
    statuses = {trip_id: status for trip_id, status in rows}
    assert statuses[ended_planning.id] == "COMPLETED"
    assert statuses[ended_active.id] == "COMPLETED"
    assert statuses[upcoming.id] == "PLANNING"


@pytest.mark.asyncio
async def test_sweep_is_idempotent(db, create_user, create_trip):
    host = await create_user()
    await create_trip(host, days_from_now=-10)

    assert await complete_past_trips(db) == 1
    assert await complete_past_trips(db) == 0
