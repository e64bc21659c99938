"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    food_image_api_url: str = "https://skashy0204-r-50.hf.space/predict"
    provider_timeout_seconds: float = 30.0
    default_calorie_goal: int = 2500
    default_water_goal_glasses: int = 8
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_bearer_token(raw: str | None) -> str | None:
    """Extract the token from an Authorization header value."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned:
        return None
    scheme, _, token = cleaned.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None
