"""Suggestion service: preferences + trip history -> prompt -> LLM -> parsed suggestions."""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any

from app.errors import NotFoundError, UpstreamPayloadError, ValidationError
from app.services.llm_client import LLMClient
from app.services.preference_store import PreferenceStore
from app.services.prompt_formatter import (
    LOCATION_SYSTEM_PROMPT,
    TRIP_SYSTEM_PROMPT,
    TripContext,
    build_system_prompt,
    format_user_data,
)
from app.services.response_parser import LOCATIONS_KEY, SUGGESTIONS_KEY, parse_suggestions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuggestionFlavor:
    name: str
    system_template: str
    result_key: str


LOCATION_FLAVOR = SuggestionFlavor("locations", LOCATION_SYSTEM_PROMPT, LOCATIONS_KEY)
TRIP_IDEA_FLAVOR = SuggestionFlavor("trip_ideas", TRIP_SYSTEM_PROMPT, SUGGESTIONS_KEY)


class SuggestionService:
    """Runs one suggestion request end to end. Holds no per-request state."""

    def __init__(self, store: PreferenceStore, llm: LLMClient, model: str | None = None):
        self.store = store
        self.llm = llm
        self.model = model

    async def suggest_locations(
        self, user_id: uuid.UUID | None, context: TripContext | None = None
    ) -> dict[str, Any]:
        return await self._suggest_for_user(LOCATION_FLAVOR, user_id, context)

    async def suggest_trip_ideas(
        self, user_id: uuid.UUID | None, context: TripContext | None = None
    ) -> dict[str, Any]:
        return await self._suggest_for_user(TRIP_IDEA_FLAVOR, user_id, context)

    async def suggest_for_trip(
        self,
        trip_id: uuid.UUID | None,
        user_id: uuid.UUID | None,
        context: TripContext | None = None,
        group_summary: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Location suggestions for an existing trip, aware of the group's preferences.

        A ``group_summary`` passed by the caller wins over the stored one. The
        trip's city and dates fill any context field the caller left empty.
        """
        if trip_id is None:
            raise ValidationError("Trip ID is required.")
        if user_id is None:
            raise ValidationError("User ID is required.")

        preferences, trips, trip, stored_summary = await asyncio.gather(
            self.store.get_preferences(user_id),
            self.store.get_recent_trips(user_id),
            self.store.get_trip(trip_id),
            self.store.get_trip_summary(trip_id),
        )
        if trip is None:
            logger.warning(f"Trip suggestions requested for unknown trip {trip_id}")
            raise NotFoundError("Trip not found.")
        if preferences is None:
            logger.warning(f"No user preferences found for {user_id}")
            raise NotFoundError("User preferences not found.")

        context = context or TripContext()
        context = TripContext(
            destination=context.destination or trip.get("city"),
            start_date=context.start_date or trip.get("start_time"),
            end_date=context.end_date or trip.get("end_time"),
            extra=context.extra,
        )
        summary = group_summary if group_summary is not None else stored_summary

        return await self._complete(LOCATION_FLAVOR, preferences, trips, summary, context, user_id)

    async def _suggest_for_user(
        self,
        flavor: SuggestionFlavor,
        user_id: uuid.UUID | None,
        context: TripContext | None,
    ) -> dict[str, Any]:
        if user_id is None:
            raise ValidationError("User ID is required.")

        preferences, trips = await asyncio.gather(
            self.store.get_preferences(user_id),
            self.store.get_recent_trips(user_id),
        )
        if preferences is None:
            logger.warning(f"No user preferences found for {user_id}")
            raise NotFoundError("User preferences not found.")

        return await self._complete(flavor, preferences, trips, None, context, user_id)

    async def _complete(
        self,
        flavor: SuggestionFlavor,
        preferences: dict[str, Any],
        trips: list[dict[str, Any]],
        group_summary: dict[str, Any] | None,
        context: TripContext | None,
        user_id: uuid.UUID,
    ) -> dict[str, Any]:
        user_prompt = format_user_data(preferences, trips, group_summary, context)
        system_prompt = build_system_prompt(
            flavor.system_template, context.destination if context else None
        )

        logger.debug(f"Requesting {flavor.name} suggestions for {user_id}")
        # UpstreamGatewayError propagates as-is; the parser is never reached.
        raw = await self.llm.complete(system=system_prompt, user=user_prompt, model=self.model)

        try:
            suggestions = parse_suggestions(raw, flavor.result_key)
        except UpstreamPayloadError as e:
            logger.error(f"Unparseable {flavor.name} response ({e.kind}) for {user_id}. Raw content: {raw!r}")
            raise UpstreamPayloadError(
                "AI returned data in an unexpected format.", kind=e.kind, raw_content=raw
            ) from e

        logger.info(f"Generated {flavor.name} suggestions for {user_id}")
        return suggestions
