"""Trip lifecycle: allowed status transitions and the periodic COMPLETED sweep."""

import logging
from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.trip import Trip

logger = logging.getLogger(__name__)

_NEXT_STATUSES = {
    "PLANNING": {"ACTIVE", "COMPLETED"},
    "ACTIVE": {"COMPLETED"},
    "COMPLETED": set(),
}


def can_transition(current: str, target: str) -> bool:
    return target in _NEXT_STATUSES.get(current, set())


async def complete_past_trips(db: AsyncSession, now: datetime | None = None) -> int:
    """Mark every unfinished trip whose end time has passed as COMPLETED. Returns the row count."""
    now = now or datetime.now(timezone.utc)
    logger.info(f"Running job to update completed trips at {now.isoformat()}")

    result = await db.execute(
        update(Trip)
        .where(Trip.status != "COMPLETED", Trip.end_time < now)
        .values(status="COMPLETED")
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    count = result.rowcount or 0
    if count:
        logger.info(f"Updated {count} trip(s) to COMPLETED")
    else:
        logger.info("No trips needed updating")
    return count
