"""Prompt formatter: turns stored preference and trip data into LLM-ready text.

Every function here is pure: same inputs, same string.
"""

import json
from dataclasses import dataclass, field
from typing import Any

NO_PAST_TRIPS = "No past trips recorded."

LOCATION_SYSTEM_PROMPT = """You are an expert travel recommendation engine. Your task is to suggest 5 unique travel LOCATIONS (NOT CITIES) that perfectly match the user's preferences and travel style, inferred from their past trips and the details of the trip they are currently planning (if provided).{destination_clause}

Your response MUST be a single, valid JSON object. Do not include any other text or explanations. The root of the JSON object must be a key named "locations", which holds an array of 5 location objects.

For each location, provide:
- "city": The location in "City, Country" format.
- "description": A compelling 2-sentence summary explaining WHY this place is a great match for the user based on their specific data and, if relevant, the trip they are planning.
- "best_for": An array of 2-3 keywords describing the vibe (e.g., "Adventure", "Relaxation", "Culture", "Foodie", "Nightlife").

Example of the required JSON structure:
{{
  "locations": [
    {{
      "city": "Muir Woods National Monument, Mill Valley, CA",
      "description": "Given your interest in hiking, Muir Woods is a serene, scenic escape. Its Redwoods and history align with your wishes for peaceful and beautiful environments.",
      "best_for": ["Culture", "History", "Relaxation"]
    }}
  ]
}}"""

TRIP_SYSTEM_PROMPT = """You are an expert travel planner. Your task is to suggest 5 complete trip ideas that match the user's preferences and travel style, inferred from their past trips and the details of the trip they are currently planning (if provided).{destination_clause}

Your response MUST be a single, valid JSON object. Do not include any other text or explanations. The root of the JSON object must be a key named "suggestions", which holds an array of 5 trip objects.

For each trip, provide:
- "title": A short, catchy trip title.
- "description": A 2-sentence summary explaining why this trip suits the user.
- "city": The main destination in "City, Country" format.
- "duration_days": The recommended trip length as an integer number of days.
- "suggested_activities": An array of 2-3 activities to do on the trip.

Example of the required JSON structure:
{{
  "suggestions": [
    {{
      "title": "Redwoods and Coastline Weekend",
      "description": "Your love of hiking fits the trails of Marin County. Quiet beaches round out the slower days you prefer.",
      "city": "Mill Valley, USA",
      "duration_days": 3,
      "suggested_activities": ["Hiking", "Beach walks", "Farm-to-table dining"]
    }}
  ]
}}"""


@dataclass
class TripContext:
    """Ad hoc details about the trip being planned. Nothing here is persisted."""

    destination: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.destination or self.start_date or self.end_date or self.extra)


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _trip_summaries(trips: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        {"title": t.get("title"), "city": t.get("city"), "description": t.get("description")}
        for t in trips
    ]


def format_trip_context(context: TripContext | None) -> str:
    if context is None or context.is_empty():
        return ""

    text = "\n\nThe user is currently planning a new trip"
    if context.destination:
        text += f' to "{context.destination}"'
    if context.start_date or context.end_date:
        text += " for the dates"
        if context.start_date:
            text += f" starting {context.start_date}"
        if context.end_date:
            text += f" and ending {context.end_date}"
    if context.extra:
        text += f". Additional trip details: {json.dumps(context.extra, sort_keys=True, default=str)}"
    text += (
        ". Please tailor your suggestions to be especially relevant to this trip, "
        "but still offer a variety of options."
    )
    return text


def format_user_data(
    preferences: dict[str, Any],
    trips: list[dict[str, Any]],
    group_summary: dict[str, Any] | None = None,
    context: TripContext | None = None,
) -> str:
    """
    Build the user-content block sent with a suggestion request.

    Args:
        preferences: One user's preferences, already in a fixed key order
        trips: Up to five recent trips, most recent first
        group_summary: Aggregated preferences of the trip's members, if any
        context: Details of the trip being planned, if any

    Returns:
        The formatted prompt text.
    """
    prompt = "Here is the user's data:\n"
    prompt += "--- User Preferences ---\n"
    prompt += _dump(preferences)

    if group_summary is not None:
        prompt += "\n\n--- Group Preferences ---\n"
        prompt += _dump(group_summary)

    prompt += "\n\n--- User's Past Trips ---\n"
    if trips:
        prompt += _dump(_trip_summaries(trips))
    else:
        prompt += NO_PAST_TRIPS + "\n"

    prompt += format_trip_context(context)
    return prompt


def build_system_prompt(template: str, destination: str | None) -> str:
    clause = ""
    if destination:
        clause = f' The user is planning a trip to "{destination}", so favour places in or near it.'
    return template.format(destination_clause=clause)
