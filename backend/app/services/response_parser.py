"""Extract the JSON payload from a completion response."""

import json
import logging
import re
from typing import Any

from app.errors import UpstreamPayloadError

logger = logging.getLogger(__name__)

# A ```json fenced block wins; otherwise the widest bare {...} span.
_JSON_PATTERN = re.compile(r"```json\s*([\s\S]*?)\s*```|(\{[\s\S]*\})")

LOCATIONS_KEY = "locations"
SUGGESTIONS_KEY = "suggestions"


def extract_json(text: str) -> Any:
    """
    Locate and decode the JSON object embedded in ``text``.

    Raises:
        UpstreamPayloadError: kind ``no_json`` when nothing JSON-like is
            present, ``malformed_json`` when the captured span does not decode.
    """
    match = _JSON_PATTERN.search(text or "")
    if not match:
        raise UpstreamPayloadError(
            "No JSON found in the AI response.", kind="no_json", raw_content=text
        )

    candidate = match.group(1) if match.group(1) is not None else match.group(2)
    if not candidate:
        raise UpstreamPayloadError(
            "Extracted JSON string is empty.", kind="no_json", raw_content=text
        )

    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning(f"Malformed JSON in AI response: {e}")
        raise UpstreamPayloadError(
            f"Malformed JSON in the AI response: {e.msg}",
            kind="malformed_json",
            raw_content=text,
        ) from e


def parse_suggestions(text: str, key: str) -> dict[str, Any]:
    """Decode ``text`` and check it carries a top-level ``key`` array; return it unchanged."""
    payload = extract_json(text)
    if not isinstance(payload, dict) or not isinstance(payload.get(key), list):
        raise UpstreamPayloadError(
            f'AI response is missing the "{key}" array.',
            kind="unexpected_shape",
            raw_content=text,
        )
    return payload
