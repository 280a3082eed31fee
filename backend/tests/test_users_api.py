import uuid

import pytest

PREFS = {
    "age": 31,
    "location": "Denver, CO",
    "dietary_restrictions": ["vegan", "vegan", "nut-free"],
    "activity_preferences": ["climbing"],
    "budget": "2",
    "travel_style": ["adventure"],
}


@pytest.mark.asyncio
async def test_register_and_login(client):
    resp = await client.post(
        "/api/auth/register",
        json={"email": "ana@example.com", "password": "s3cret-pass", "name": "Ana"},
    )
    assert resp.status_code == 201
    token = resp.json()["token"]

    me = await client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "ana@example.com"

    resp = await client.post("/api/auth/login", json={"email": "ana@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200

    resp = await client.post("/api/auth/login", json={"email": "ana@example.com", "password": "wrong"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_register_duplicate_email(client, create_user):
    await create_user(email="taken@example.com")

    resp = await client.post(
        "/api/auth/register", json={"email": "Taken@Example.com", "password": "whatever1"}
    )
    assert resp.status_code == 409
    assert resp.json() == {"detail": "An account with this email already exists."}


@pytest.mark.asyncio
async def test_bad_token(client):
    resp = await client.get("/api/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_preferences_lifecycle(client, create_user, auth_headers):
    user = await create_user()
    headers = auth_headers(user)

    assert (await client.get("/api/users/me/preferences", headers=headers)).status_code == 404

    resp = await client.post("/api/users/me/preferences", json=PREFS, headers=headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["dietary_restrictions"] == ["vegan", "nut-free"]
    assert body["user_id"] == str(user.id)

    resp = await client.post("/api/users/me/preferences", json=PREFS, headers=headers)
    assert resp.status_code == 409

    resp = await client.put(
        "/api/users/me/preferences", json={"activity_preferences": ["sailing"]}, headers=headers
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["activity_preferences"] == ["sailing"]
    # full replace: fields not sent are cleared
    assert body["travel_style"] == []
    assert body["budget"] is None

    assert (await client.delete("/api/users/me/preferences", headers=headers)).status_code == 200
    assert (await client.delete("/api/users/me/preferences", headers=headers)).status_code == 404


@pytest.mark.asyncio
async def test_put_preferences_creates_on_first_submission(client, create_user, auth_headers):
    user = await create_user()

    resp = await client.put("/api/users/me/preferences", json=PREFS, headers=auth_headers(user))

    assert resp.status_code == 200
    assert resp.json()["budget"] == "2"


@pytest.mark.asyncio
async def test_invalid_budget_rejected(client, create_user, auth_headers):
    user = await create_user()

    resp = await client.put(
        "/api/users/me/preferences", json={"budget": "7"}, headers=auth_headers(user)
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_past_trips_only_completed(client, create_user, create_trip, auth_headers):
    user = await create_user()
    await create_trip(user, title="Done", status="COMPLETED", days_from_now=-10)
    await create_trip(user, title="Upcoming")

    resp = await client.get("/api/users/me/past-trips", headers=auth_headers(user))

    assert resp.status_code == 200
    assert [t["title"] for t in resp.json()] == ["Done"]


@pytest.mark.asyncio
async def test_user_rsvps(client, create_user, create_trip, create_rsvp):
    host = await create_user()
    guest = await create_user()
    trip = await create_trip(host, title="Camping")
    await create_rsvp(guest, trip, "MAYBE")

    resp = await client.get(f"/api/users/{guest.id}/rsvps")

    assert resp.status_code == 200
    assert [(r["status"], r["trip"]["title"]) for r in resp.json()] == [("MAYBE", "Camping")]


@pytest.mark.asyncio
async def test_unknown_user(client):
    resp = await client.get(f"/api/users/{uuid.uuid4()}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_login_ignores_email_case(client):
    resp = await client.post("/api/auth/register", json={"email": "Mixed@Example.com", "password": "pass-word-1"})
    assert resp.status_code == 201
    assert resp.json()["user"]["email"] == "mixed@example.com"
    assert resp.json()["user"]["name"] == "mixed"

    resp = await client.post("/api/auth/login", json={"email": "MIXED@example.com", "password": "pass-word-1"})
    assert resp.status_code == 200
