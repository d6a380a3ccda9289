import logging
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from wanderplan.core.errors import GenerationError, MissingCredentialsError

logger = logging.getLogger(__name__)


@dataclass
class GenerationRequest:
    destination: str
    days: int
    budget: str
    interests: List[str] = field(default_factory=list)


@dataclass
class ModelAttempt:
    model: str
    error: str


class GenerationBackend(Protocol):
    name: str

    def generate(self, model: str, request: GenerationRequest) -> str:
        ...


class GenerationClient:
    """
    Asks the backend for an itinerary, walking the configured model list in
    order. A model that errors or returns nothing is logged and skipped; only
    running out of models is an error. Missing credentials stop the walk at
    once since no other model can succeed without them.
    """

    def __init__(self, backend: GenerationBackend, models: Sequence[str]):
        self.backend = backend
        self.models = list(models)

    def generate(self, request: GenerationRequest) -> str:
        if not self.models:
            raise GenerationError(f"No models configured for provider {self.backend.name}")

        attempts: List[ModelAttempt] = []
        for model in self.models:
            try:
                text = self.backend.generate(model, request)
            except MissingCredentialsError:
                raise
            except Exception as exc:  # noqa: BLE001
                logger.warning("Model %s failed: %s", model, exc)
                attempts.append(ModelAttempt(model=model, error=str(exc) or type(exc).__name__))
                continue
            if not text or not text.strip():
                logger.warning("Model %s returned an empty response", model)
                attempts.append(ModelAttempt(model=model, error="empty response"))
                continue
            logger.info("Generated itinerary for %s with %s/%s", request.destination, self.backend.name, model)
            return text

        details = "; ".join(f"{a.model}: {a.error}" for a in attempts)
        raise GenerationError(f"All models failed to generate an itinerary. {details}", attempts=attempts)
