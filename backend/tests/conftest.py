import json
import os
import uuid
from datetime import datetime, timedelta, timezone

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TRIP_STATUS_SWEEP_ENABLED", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.database import Base, get_db
from app.dependencies import get_suggestion_service
from app.main import app
from app.models import Location, Trip, TripRSVP, User, UserPreferences
from app.routers.auth import create_access_token
from app.services.preference_store import PreferenceStore
from app.services.suggestion_service import SuggestionService

LOCATIONS_REPLY = json.dumps(
    {
        "locations": [
            {"city": f"Place {i}, Country", "description": "Fits the group.", "best_for": ["Culture", "Food"]}
            for i in range(5)
        ]
    }
)


class FakeLLM:
    """Stands in for LLMClient. Returns ``reply`` or raises ``error``, recording every call."""

    def __init__(self, reply: str | None = LOCATIONS_REPLY, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, system, user, *, model=None, json_mode=True):
        self.calls.append({"system": system, "user": user, "model": model})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
async def client(session_factory, llm):
    async def _get_db():
        async with session_factory() as session:
            yield session

    service = SuggestionService(PreferenceStore(session_factory), llm, model="test-model")
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_suggestion_service] = lambda: service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(session_factory):
    async def _create(name="Test User", preferences=None, email=None):
        async with session_factory() as session:
            user = User(
                email=email or f"{uuid.uuid4().hex[:10]}@example.com",
                name=name,
                password_hash="not-a-real-hash",
            )
            session.add(user)
            await session.flush()
            if preferences is not None:
                session.add(UserPreferences(user_id=user.id, **preferences))
            await session.commit()
            await session.refresh(user)
            return user

    return _create


@pytest.fixture
def create_trip(session_factory):
    async def _create(host, city="Lisbon", status="PLANNING", title="Weekend away", days_from_now=7):
        start = datetime.now(timezone.utc) + timedelta(days=days_from_now)
        async with session_factory() as session:
            trip = Trip(
                host_id=host.id,
                title=title,
                city=city,
                status=status,
                start_time=start,
                end_time=start + timedelta(days=2),
                location_order=[],
            )
            session.add(trip)
            await session.commit()
            await session.refresh(trip)
            return trip

    return _create


@pytest.fixture
def create_rsvp(session_factory):
    async def _create(user, trip, status="YES"):
        async with session_factory() as session:
            session.add(TripRSVP(user_id=user.id, trip_id=trip.id, status=status))
            await session.commit()

    return _create


@pytest.fixture
def create_location(session_factory):
    async def _create(google_place_id, name=None):
        async with session_factory() as session:
            location = Location(google_place_id=google_place_id, name=name or google_place_id, types=[])
            session.add(location)
            await session.commit()
            return location

    return _create


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}

    return _headers
