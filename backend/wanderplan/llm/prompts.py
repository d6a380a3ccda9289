import json

ITINERARY_SYSTEM_PROMPT = """You are an experienced travel planner.
You write realistic, well-paced day-by-day itineraries and reply with JSON only:
no prose, no Markdown, no comments."""

ITINERARY_PROMPT_TEMPLATE = """Create a detailed {days}-day travel itinerary for {destination}.
Budget: {budget}
Interests: {interests}

Return a single JSON object with exactly this structure:
{{
  "destination": "{destination}",
  "totalDays": {days},
  "budget": "{budget}",
  "interests": {interests_json},
  "days": [
    {{
      "activities": [
        {{
          "time": "09:00",
          "title": "Activity name",
          "description": "What the traveller does and why it is worth it",
          "location": "Neighbourhood or address",
          "duration": "2 hours",
          "category": "sightseeing",
          "cost": "estimated cost"
        }}
      ],
      "totalCost": "estimated cost for the day",
      "notes": "Practical notes for the day"
    }}
  ],
  "summary": {{
    "totalEstimatedCost": "estimated total cost",
    "highlights": ["highlight"],
    "tips": ["tip"]
  }}
}}

Include exactly {days} entries in "days", each with 3 to 5 activities.
Keep the total within the budget."""


def build_itinerary_prompt(request) -> str:
    interests = list(request.interests or [])
    interests_json = json.dumps(interests)
    return ITINERARY_PROMPT_TEMPLATE.format(
        destination=request.destination,
        days=request.days,
        budget=request.budget,
        interests=", ".join(interests) if interests else "general sightseeing",
        interests_json=interests_json,
    )
