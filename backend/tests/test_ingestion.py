import json

import pytest

from wanderplan.core.errors import ItineraryValidationError
from wanderplan.llm.client import GenerationRequest
from wanderplan.llm.ingestion import (
    build_itinerary,
    find_balanced_object,
    ingest,
    parse_structured_payload,
)

REQUEST = GenerationRequest(destination="Paris", days=3, budget="$1000", interests=["food", "culture"])


def _payload(day_count: int = 3, **extra) -> dict:
    data = {
        "days": [
            {
                "activities": [
                    {"time": "09:00", "title": f"Stop {i}", "description": "Walk", "cost": 12},
                ],
                "totalCost": "20 EUR",
                "notes": "Bring water",
            }
            for i in range(day_count)
        ]
    }
    data.update(extra)
    return data


def test_direct_json_is_parsed():
    raw = json.dumps(_payload())
    assert parse_structured_payload(raw) == _payload()


def test_fenced_block_parses_like_unwrapped_content():
    raw = json.dumps(_payload(), indent=2)
    fenced = f"```json\n{raw}\n```"

    assert parse_structured_payload(fenced) == parse_structured_payload(raw)


def test_balanced_span_is_extracted_from_surrounding_prose():
    raw = 'Sure! Here is your plan: {"days": [{"activities": [], "notes": "use {braces} freely"}]} Enjoy!'

    data = parse_structured_payload(raw)

    assert data["days"][0]["notes"] == "use {braces} freely"


def test_find_balanced_object_handles_escaped_quotes():
    text = 'x {"a": "say \\"}\\" loudly", "b": {"c": 1}} trailing }'
    assert json.loads(find_balanced_object(text)) == {"a": 'say "}" loudly', "b": {"c": 1}}


def test_find_balanced_object_returns_none_when_unbalanced():
    assert find_balanced_object('{"days": [') is None
    assert find_balanced_object("no json here") is None


def test_unparseable_text_reports_diagnostic_and_preview():
    raw = "I could not build an itinerary today. " * 20

    with pytest.raises(ItineraryValidationError) as exc_info:
        parse_structured_payload(raw)

    err = exc_info.value
    assert err.reason == "unparseable"
    assert "Failed to parse itinerary data" in err.message
    assert "I could not build an itinerary today." in err.message
    assert "..." in err.message
    assert len(err.message) < len(raw)


def test_json_that_is_not_an_object_is_rejected():
    with pytest.raises(ItineraryValidationError) as exc_info:
        parse_structured_payload("[1, 2, 3]")
    assert exc_info.value.reason == "unparseable"


def test_missing_and_empty_days_are_distinct_errors():
    with pytest.raises(ItineraryValidationError) as missing:
        build_itinerary({"destination": "Paris"}, REQUEST, owner_id="u1")
    with pytest.raises(ItineraryValidationError) as empty:
        build_itinerary({"days": []}, REQUEST, owner_id="u1")

    assert missing.value.reason == "missing_days"
    assert empty.value.reason == "empty_days"
    assert missing.value.message != empty.value.message


def test_days_of_wrong_type_count_as_missing():
    with pytest.raises(ItineraryValidationError) as exc_info:
        build_itinerary({"days": "three"}, REQUEST, owner_id="u1")
    assert exc_info.value.reason == "missing_days"


def test_day_count_matches_payload():
    itinerary = ingest(json.dumps(_payload(day_count=4)), REQUEST, owner_id="u1")
    assert len(itinerary.days) == 4


def test_missing_top_level_fields_are_backfilled_from_request():
    itinerary = build_itinerary(_payload(), REQUEST, owner_id="u1")

    assert itinerary.destination == "Paris"
    assert itinerary.total_days == 3
    assert itinerary.budget == "$1000"
    assert itinerary.interests == ["food", "culture"]
    assert itinerary.summary.total_estimated_cost == "$1000"
    assert itinerary.summary.highlights == []
    assert itinerary.title == "Paris - 3 Days Trip"
    assert itinerary.collaborators == []
    assert itinerary.is_public is False
    assert itinerary.owner.user_id == "u1"


def test_payload_fields_take_precedence_over_request():
    payload = _payload(
        destination="Paris, France",
        totalDays=3,
        budget="1000 USD",
        interests=["art"],
        summary={"totalEstimatedCost": 950, "highlights": ["Louvre"], "tips": ["Buy a museum pass"]},
    )

    itinerary = build_itinerary(payload, REQUEST, owner_id="u1")

    assert itinerary.destination == "Paris, France"
    assert itinerary.budget == "1000 USD"
    assert itinerary.interests == ["art"]
    assert itinerary.summary.total_estimated_cost == 950
    assert itinerary.summary.tips == ["Buy a museum pass"]


def test_day_and_activity_content_is_carried_over_not_invented():
    payload = {"days": [{"activities": []}, {"activities": [{"title": "Louvre", "location": "1st arr."}]}]}

    itinerary = build_itinerary(payload, REQUEST, owner_id="u1")

    assert itinerary.days[0].activities == []
    assert itinerary.days[0].notes is None
    louvre = itinerary.days[1].activities[0]
    assert louvre.title == "Louvre"
    assert louvre.location == "1st arr."
    assert louvre.time == ""
    assert louvre.cost is None


def test_activity_without_title_is_rejected():
    payload = {"days": [{"activities": [{"time": "10:00", "description": "Something"}]}]}

    with pytest.raises(ItineraryValidationError) as exc_info:
        build_itinerary(payload, REQUEST, owner_id="u1")
    assert exc_info.value.reason == "invalid_day"


def test_snake_case_keys_are_accepted():
    payload = {"days": [{"activities": [], "total_cost": 80}], "total_days": 1}
    single_day = GenerationRequest(destination="Rome", days=1, budget="500")

    itinerary = build_itinerary(payload, single_day, owner_id="u1")

    assert itinerary.days[0].total_cost == 80
    assert itinerary.title == "Rome - 1 Day Trip"


def test_summary_list_fields_of_wrong_type_are_dropped():
    payload = {"days": [{"activities": []}], "summary": {"highlights": 5, "tips": {"a": 1}}}

    itinerary = build_itinerary(payload, REQUEST, owner_id="u1")

    assert itinerary.summary.highlights == []
    assert itinerary.summary.tips == []


def test_bare_string_summary_fields_become_single_items():
    payload = {"days": [{"activities": []}], "summary": {"highlights": "Louvre", "tips": "Go early"}}

    itinerary = build_itinerary(payload, REQUEST, owner_id="u1")

    assert itinerary.summary.highlights == ["Louvre"]
    assert itinerary.summary.tips == ["Go early"]


def test_interests_of_wrong_type_fall_back_to_request():
    single = build_itinerary({"days": [{"activities": []}], "interests": "art"}, REQUEST, owner_id="u1")
    bogus = build_itinerary({"days": [{"activities": []}], "interests": 7}, REQUEST, owner_id="u1")

    assert single.interests == ["art"]
    assert bogus.interests == ["food", "culture"]
