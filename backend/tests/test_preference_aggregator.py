import uuid

import pytest

from app.errors import NotFoundError
from app.services.preference_aggregator import aggregate_preferences, preference_aggregator


def test_counts_labels_and_budget():
    m1 = {"activity_preferences": ["hiking", "museums"], "budget": "3"}
    m2 = {"activity_preferences": ["hiking"], "budget": "3"}

    summary = aggregate_preferences([m1, m2])

    assert summary.activity_counts == {"hiking": 2, "museums": 1}
    assert summary.budget_counts == {"1": 0, "2": 0, "3": 2, "4": 0}


def test_all_four_label_maps():
    record = {
        "activity_preferences": ["Hiking"],
        "dietary_restrictions": ["vegan"],
        "lifestyle_choices": ["early riser"],
        "travel_style": ["backpacking", "slow travel"],
    }
    summary = aggregate_preferences([record, record])

    assert summary.dietary_counts == {"vegan": 2}
    assert summary.lifestyle_counts == {"early riser": 2}
    assert summary.travel_style_counts == {"backpacking": 2, "slow travel": 2}


def test_labels_are_case_sensitive():
    summary = aggregate_preferences(
        [{"activity_preferences": ["Hiking"]}, {"activity_preferences": ["hiking"]}]
    )
    assert summary.activity_counts == {"Hiking": 1, "hiking": 1}


def test_first_occurrence_order_is_kept():
    summary = aggregate_preferences(
        [{"activity_preferences": ["surfing", "museums"]}, {"activity_preferences": ["hiking", "surfing"]}]
    )
    assert list(summary.activity_counts) == ["surfing", "museums", "hiking"]


def test_missing_records_contribute_nothing():
    summary = aggregate_preferences([None, {"activity_preferences": ["hiking"]}, None])

    assert summary.activity_counts == {"hiking": 1}
    assert summary.budget_counts == {"1": 0, "2": 0, "3": 0, "4": 0}


def test_unknown_or_missing_budget_is_ignored():
    summary = aggregate_preferences([{"budget": "9"}, {"budget": None}, {}, {"budget": "1"}])
    assert summary.budget_counts == {"1": 1, "2": 0, "3": 0, "4": 0}


def test_empty_group():
    summary = aggregate_preferences([])
    assert summary.to_dict() == {
        "activity_counts": {},
        "dietary_counts": {},
        "lifestyle_counts": {},
        "travel_style_counts": {},
        "budget_counts": {"1": 0, "2": 0, "3": 0, "4": 0},
    }


def test_aggregation_is_idempotent():
    records = [
        {"activity_preferences": ["hiking"], "dietary_restrictions": ["vegan"], "budget": "2"},
        None,
        {"travel_style": ["luxury"], "budget": "4"},
    ]
    assert aggregate_preferences(records) == aggregate_preferences(records)


# ─── Persistence ───

@pytest.mark.asyncio
async def test_refresh_counts_host_and_accepted_members(db, create_user, create_trip, create_rsvp):
    host = await create_user(preferences={"activity_preferences": ["hiking", "museums"], "budget": "3"})
    guest = await create_user(preferences={"activity_preferences": ["hiking"], "budget": "3"})
    maybe = await create_user(preferences={"activity_preferences": ["kayaking"], "budget": "1"})
    declined = await create_user(preferences={"activity_preferences": ["golf"], "budget": "4"})
    no_prefs = await create_user()

    trip = await create_trip(host)
    await create_rsvp(guest, trip, "YES")
    await create_rsvp(maybe, trip, "MAYBE")
    await create_rsvp(declined, trip, "NO")
    await create_rsvp(no_prefs, trip, "YES")

    row = await preference_aggregator.refresh(db, trip.id)

    assert row.trip_id == trip.id
    assert row.activity_counts == {"hiking": 2, "museums": 1, "kayaking": 1}
    assert row.budget_counts == {"1": 1, "2": 0, "3": 2, "4": 0}


@pytest.mark.asyncio
async def test_refresh_replaces_existing_summary(db, create_user, create_trip, create_rsvp):
    host = await create_user(preferences={"activity_preferences": ["hiking"], "budget": "2"})
    trip = await create_trip(host)

    first = await preference_aggregator.refresh(db, trip.id)
    guest = await create_user(preferences={"activity_preferences": ["museums"], "budget": "2"})
    await create_rsvp(guest, trip, "YES")
    second = await preference_aggregator.refresh(db, trip.id)

    assert second.id == first.id
    assert second.activity_counts == {"hiking": 1, "museums": 1}
    assert second.budget_counts == {"1": 0, "2": 2, "3": 0, "4": 0}


@pytest.mark.asyncio
async def test_refresh_twice_gives_identical_maps(db, create_user, create_trip):
    host = await create_user(preferences={"dietary_restrictions": ["halal"], "budget": "1"})
    trip = await create_trip(host)

    first = (await preference_aggregator.compute(db, trip.id)).to_dict()
    second = (await preference_aggregator.compute(db, trip.id)).to_dict()
    assert first == second


@pytest.mark.asyncio
async def test_refresh_unknown_trip(db):
    with pytest.raises(NotFoundError):
        await preference_aggregator.refresh(db, uuid.uuid4())
