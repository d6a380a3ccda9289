from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from google import genai
from google.genai import types

from wanderplan.core.errors import MissingCredentialsError
from wanderplan.llm.client import GenerationRequest
from wanderplan.llm.prompts import ITINERARY_SYSTEM_PROMPT, build_itinerary_prompt

logger = logging.getLogger(__name__)


@dataclass
class GeminiBackend:
    """Generation backend for Google's Gemini models via ``google-genai``."""

    api_key: Optional[str]
    temperature: float = 0.7
    timeout_ms: int = 60000
    name: str = "gemini"
    _client: Optional[genai.Client] = field(default=None, init=False, repr=False)

    def _get_client(self) -> genai.Client:
        if not self.api_key:
            raise MissingCredentialsError("GEMINI_API_KEY is not configured")
        if self._client is None:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=self.timeout_ms),
            )
        return self._client

    def generate(self, model: str, request: GenerationRequest) -> str:
        client = self._get_client()
        logger.debug("Requesting %s-day itinerary for %s from %s", request.days, request.destination, model)
        response = client.models.generate_content(
            model=model,
            contents=build_itinerary_prompt(request),
            config=types.GenerateContentConfig(
                system_instruction=ITINERARY_SYSTEM_PROMPT,
                temperature=self.temperature,
                response_mime_type="application/json",
            ),
        )
        return response.text or ""
