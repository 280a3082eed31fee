from app.services.prompt_formatter import (
    LOCATION_SYSTEM_PROMPT,
    NO_PAST_TRIPS,
    TRIP_SYSTEM_PROMPT,
    TripContext,
    build_system_prompt,
    format_trip_context,
    format_user_data,
)

PREFS = {
    "age": 29,
    "location": "Oakland, CA",
    "dietary_restrictions": ["vegetarian"],
    "activity_preferences": ["hiking", "museums"],
    "budget": "2",
}

TRIPS = [
    {"title": "Big Sur", "city": "Big Sur", "description": "Coastal drive", "status": "COMPLETED"},
    {"title": "Tahoe", "city": "South Lake Tahoe", "description": None, "status": "COMPLETED"},
]


def test_same_input_same_output():
    context = TripContext(destination="Lisbon", start_date="2026-05-01", extra={"vibe": "chill"})
    assert format_user_data(PREFS, TRIPS, None, context) == format_user_data(PREFS, TRIPS, None, context)


def test_empty_history_uses_marker():
    text = format_user_data(PREFS, [])
    assert NO_PAST_TRIPS in text
    assert "[]" not in text


def test_sections_in_order():
    summary = {"activity_counts": {"hiking": 2}, "budget_counts": {"1": 0, "2": 2, "3": 0, "4": 0}}
    text = format_user_data(PREFS, TRIPS, summary)

    prefs_at = text.index("--- User Preferences ---")
    group_at = text.index("--- Group Preferences ---")
    trips_at = text.index("--- User's Past Trips ---")
    assert prefs_at < group_at < trips_at
    assert '"hiking": 2' in text


def test_group_section_omitted_without_summary():
    assert "--- Group Preferences ---" not in format_user_data(PREFS, TRIPS)


def test_past_trips_keep_order_and_only_summary_fields():
    text = format_user_data(PREFS, TRIPS)
    assert text.index("Big Sur") < text.index("Tahoe")
    assert "COMPLETED" not in text


def test_preferences_serialized_in_given_key_order():
    text = format_user_data(PREFS, [])
    assert text.index('"age"') < text.index('"location"') < text.index('"budget"')


def test_no_context_paragraph_when_context_empty():
    assert format_trip_context(None) == ""
    assert format_trip_context(TripContext()) == ""
    assert "currently planning" not in format_user_data(PREFS, [], None, TripContext())


def test_context_paragraph_mentions_destination_and_dates():
    paragraph = format_trip_context(
        TripContext(destination="Kyoto", start_date="2026-04-01", end_date="2026-04-08")
    )
    assert 'to "Kyoto"' in paragraph
    assert "starting 2026-04-01" in paragraph
    assert "ending 2026-04-08" in paragraph


def test_context_paragraph_with_extra_fields_only():
    paragraph = format_trip_context(TripContext(extra={"travelers": 4, "pace": "slow"}))
    assert "currently planning a new trip" in paragraph
    assert '"pace": "slow"' in paragraph
    assert '"travelers": 4' in paragraph


def test_system_prompt_embeds_destination():
    prompt = build_system_prompt(LOCATION_SYSTEM_PROMPT, "Kyoto")
    assert '"Kyoto"' in prompt
    assert '"locations"' in prompt
    assert "{destination_clause}" not in prompt


def test_system_prompt_without_destination():
    prompt = build_system_prompt(TRIP_SYSTEM_PROMPT, None)
    assert "planning a trip to" not in prompt
    assert '"suggestions": [' in prompt
