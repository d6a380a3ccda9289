import logging

from wanderplan.core.config import Settings
from wanderplan.llm.backends.gemini_backend import GeminiBackend
from wanderplan.llm.backends.mock_backend import MockGenerationBackend
from wanderplan.llm.backends.ollama_backend import OllamaBackend
from wanderplan.llm.client import GenerationClient

logger = logging.getLogger(__name__)


def build_generation_client(settings: Settings) -> GenerationClient:
    provider = settings.llm_provider.lower()
    if provider == "gemini":
        backend = GeminiBackend(
            api_key=settings.gemini_api_key,
            temperature=settings.generation_temperature,
            timeout_ms=settings.generation_timeout_ms,
        )
        models = settings.gemini_model_list
    elif provider == "ollama":
        backend = OllamaBackend(host=settings.ollama_host, timeout_s=settings.generation_timeout_ms / 1000)
        models = settings.ollama_model_list
    else:
        if provider != "mock":
            logger.warning("Unknown LLM_PROVIDER %r, using the mock backend", settings.llm_provider)
        backend = MockGenerationBackend()
        models = ["mock-itinerary"]
    logger.info("Generation provider %s with models %s", backend.name, ", ".join(models))
    return GenerationClient(backend=backend, models=models)
