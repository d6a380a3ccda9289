"""Turn raw model output into a validated itinerary.

Parsing tries a fixed list of strategies in order and keeps the first that
yields a JSON object:

1. the text as-is;
2. the text with Markdown code fences removed;
3. the first balanced ``{...}`` span found in the text.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from wanderplan.core.errors import ItineraryValidationError
from wanderplan.llm.client import GenerationRequest
from wanderplan.models.domain import Activity, DayPlan, Itinerary, TripSummary, UserRef

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 200

_FENCE_RE = re.compile(r"```[a-zA-Z0-9_-]*[ \t]*\n?")


def _parse_direct(raw: str) -> Any:
    return json.loads(raw)


def _parse_unfenced(raw: str) -> Any:
    return json.loads(_FENCE_RE.sub("", raw).strip())


def find_balanced_object(text: str) -> Optional[str]:
    """Return the first top-level ``{...}`` span, ignoring braces in strings."""
    start = text.find("{")
    if start == -1:
        return None
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def _parse_balanced_span(raw: str) -> Any:
    span = find_balanced_object(raw)
    if span is None:
        raise ValueError("No valid JSON object found")
    return json.loads(span)


PARSE_STRATEGIES: Sequence[Callable[[str], Any]] = (
    _parse_direct,
    _parse_unfenced,
    _parse_balanced_span,
)


def _preview(raw: str) -> str:
    if len(raw) <= PREVIEW_CHARS:
        return raw
    return raw[:PREVIEW_CHARS] + "..."


def parse_structured_payload(raw: str) -> Dict[str, Any]:
    first_error: Optional[Exception] = None
    for strategy in PARSE_STRATEGIES:
        try:
            data = strategy(raw)
        except ValueError as exc:
            logger.debug("Parse strategy %s failed: %s", strategy.__name__, exc)
            first_error = first_error or exc
            continue
        if isinstance(data, dict):
            if strategy is not _parse_direct:
                logger.info("Recovered itinerary JSON with %s", strategy.__name__)
            return data
        first_error = first_error or ValueError(f"Expected a JSON object, got {type(data).__name__}")

    raise ItineraryValidationError(
        f"Failed to parse itinerary data: {first_error}. Received: {_preview(raw)!r}",
        reason="unparseable",
    )


def validate_days(payload: Dict[str, Any]) -> List[Any]:
    days = payload.get("days")
    if not isinstance(days, list):
        raise ItineraryValidationError("Invalid itinerary data: Missing days array", reason="missing_days")
    if not days:
        raise ItineraryValidationError("Invalid itinerary data: No days generated", reason="empty_days")
    return days


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value not in (None, "", []):
            return value
    return None


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _cost(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    return value


def _to_activity(raw: Any, day_number: int, position: int) -> Activity:
    if not isinstance(raw, dict) or not _pick(raw, "title", "name", "activity"):
        raise ItineraryValidationError(
            f"Invalid itinerary data: activity {position} of day {day_number} has no title",
            reason="invalid_day",
        )
    return Activity(
        time=str(_pick(raw, "time", "timeOfDay", "time_of_day") or ""),
        title=str(_pick(raw, "title", "name", "activity")),
        description=str(raw.get("description") or ""),
        location=_opt_str(raw.get("location")),
        duration=_opt_str(raw.get("duration")),
        category=_opt_str(raw.get("category")),
        cost=_cost(raw.get("cost")),
    )


def _to_day(raw: Any, day_number: int) -> DayPlan:
    if not isinstance(raw, dict):
        raise ItineraryValidationError(
            f"Invalid itinerary data: day {day_number} is not an object", reason="invalid_day"
        )
    activities = raw.get("activities") or []
    if not isinstance(activities, list):
        raise ItineraryValidationError(
            f"Invalid itinerary data: activities of day {day_number} is not a list", reason="invalid_day"
        )
    return DayPlan(
        activities=[_to_activity(a, day_number, i + 1) for i, a in enumerate(activities)],
        total_cost=_cost(_pick(raw, "totalCost", "total_cost")),
        notes=_opt_str(raw.get("notes")),
    )


def _str_list(value: Any) -> Optional[List[str]]:
    """A bare string counts as a one-item list; other non-lists are dropped."""
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(v) for v in value if v is not None]
    return None


def _to_summary(raw: Any, request: GenerationRequest) -> TripSummary:
    if not isinstance(raw, dict):
        return TripSummary(total_estimated_cost=request.budget)
    return TripSummary(
        total_estimated_cost=_cost(_pick(raw, "totalEstimatedCost", "total_estimated_cost")),
        highlights=_str_list(raw.get("highlights")) or [],
        tips=_str_list(raw.get("tips")) or [],
    )


def _positive_int(value: Any) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def itinerary_title(destination: str, days: int) -> str:
    return f"{destination} - {days} Day{'s' if days > 1 else ''} Trip"


def build_itinerary(payload: Dict[str, Any], request: GenerationRequest, owner_id: str) -> Itinerary:
    """Build the record; only top-level fields fall back to the request."""
    days = [_to_day(d, i + 1) for i, d in enumerate(validate_days(payload))]
    interests = _str_list(_pick(payload, "interests"))
    return Itinerary(
        itinerary_id=uuid4().hex,
        owner=UserRef(owner_id),
        title=itinerary_title(request.destination, request.days),
        destination=str(_pick(payload, "destination") or request.destination),
        total_days=_positive_int(_pick(payload, "totalDays", "total_days")) or request.days,
        budget=str(_pick(payload, "budget") or request.budget),
        interests=interests or list(request.interests),
        days=days,
        summary=_to_summary(payload.get("summary"), request),
        collaborators=[],
        is_public=False,
    )


def ingest(raw: str, request: GenerationRequest, owner_id: str) -> Itinerary:
    return build_itinerary(parse_structured_payload(raw), request, owner_id)
