import json
import logging
from typing import List

from wanderplan.llm.client import GenerationRequest

logger = logging.getLogger(__name__)

_SLOTS = [("09:00", "2 hours"), ("12:30", "1.5 hours"), ("15:00", "3 hours"), ("19:30", "2 hours")]

_IDEAS = {
    "food": ("Local food tasting", "Sample street food and regional specialities at a busy market.", "food"),
    "culture": ("Museum visit", "Spend time with the city's best-known collection.", "culture"),
    "history": ("Old town walk", "Walk the historic centre and its landmark buildings.", "history"),
    "nature": ("Park and viewpoint", "Head to the nearest large park and climb to a viewpoint.", "nature"),
    "shopping": ("Market stroll", "Browse independent shops and the main covered market.", "shopping"),
    "nightlife": ("Evening out", "Try a well-reviewed bar district after dinner.", "nightlife"),
}
_DEFAULT_IDEA = ("City highlights", "See the places most visitors put at the top of their list.", "sightseeing")


class MockGenerationBackend:
    """
    A deterministic backend that simulates model output, so the app works
    without a provider key. Activities cycle through the requested interests.
    """

    name = "mock"

    def generate(self, model: str, request: GenerationRequest) -> str:
        ideas = [_IDEAS[i.lower()] for i in request.interests if i.lower() in _IDEAS] or [_DEFAULT_IDEA]
        days: List[dict] = []
        for day_index in range(request.days):
            activities = []
            for slot_index, (time, duration) in enumerate(_SLOTS[:3]):
                title, description, category = ideas[(day_index + slot_index) % len(ideas)]
                activities.append(
                    {
                        "time": time,
                        "title": f"{title} in {request.destination}",
                        "description": description,
                        "location": request.destination,
                        "duration": duration,
                        "category": category,
                        "cost": "moderate",
                    }
                )
            days.append({"activities": activities, "notes": f"Day {day_index + 1} in {request.destination}"})

        logger.info("Mock model %s produced %s days for %s", model, len(days), request.destination)
        return json.dumps(
            {
                "destination": request.destination,
                "totalDays": request.days,
                "budget": request.budget,
                "interests": request.interests,
                "days": days,
                "summary": {
                    "totalEstimatedCost": request.budget,
                    "highlights": [f"Exploring {request.destination}"],
                    "tips": ["Book popular sights in advance."],
                },
            }
        )
