from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import requests

from wanderplan.llm.client import GenerationRequest
from wanderplan.llm.prompts import ITINERARY_SYSTEM_PROMPT, build_itinerary_prompt

logger = logging.getLogger(__name__)


@dataclass
class OllamaBackend:
    """
    Generation backend using Ollama's chat API.
    Expects the model to return the itinerary JSON object as message content.
    """

    host: str
    timeout_s: float = 60.0
    name: str = "ollama"

    def _build_messages(self, request: GenerationRequest) -> List[dict]:
        return [
            {"role": "system", "content": ITINERARY_SYSTEM_PROMPT},
            {"role": "user", "content": build_itinerary_prompt(request)},
        ]

    def generate(self, model: str, request: GenerationRequest) -> str:
        payload = {
            "model": model,
            "messages": self._build_messages(request),
            "stream": False,
            "format": "json",
        }
        try:
            resp = requests.post(f"{self.host}/api/chat", json=payload, timeout=self.timeout_s)
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Ollama request failed: %s", exc)
            raise

        return resp.json().get("message", {}).get("content", "")
