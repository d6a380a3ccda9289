from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_models(raw: str) -> List[str]:
    return [m.strip() for m in raw.split(",") if m.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    app_name: str = "WanderPlan"
    environment: str = Field("local")
    log_level: str = Field("INFO")

    storage_backend: str = Field("memory")
    mongodb_uri: str = Field("mongodb://localhost:27017")
    mongodb_db: str = Field("wanderplan")
    mongodb_timeout_ms: int = Field(5000)

    llm_provider: str = Field("mock")
    gemini_api_key: str | None = Field(None)
    gemini_models: str = Field("gemini-2.5-flash,gemini-2.0-flash,gemini-1.5-flash")
    generation_temperature: float = Field(0.7)
    generation_timeout_ms: int = Field(60000)
    ollama_host: str = Field("http://localhost:11434")
    ollama_models: str = Field("llama3")

    jwt_secret: str = Field("change-me")
    jwt_algorithm: str = Field("HS256")
    access_token_ttl_minutes: int = Field(60 * 24 * 7)
    password_min_length: int = Field(6)

    @property
    def gemini_model_list(self) -> List[str]:
        return _split_models(self.gemini_models)

    @property
    def ollama_model_list(self) -> List[str]:
        return _split_models(self.ollama_models)


@lru_cache()
def get_settings() -> Settings:
    load_dotenv(".env")
    return Settings()


settings = get_settings()
