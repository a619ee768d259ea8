"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

RepositoryBackend = Literal["memory", "filesystem", "supabase"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: str = _ENVIRONMENT
    repository_backend: RepositoryBackend = "filesystem"
    data_dir: Path = Path("data")
    images_dir: Path = Path("data/images")
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    jwt_secret: str
    token_ttl_days: int = 7
    cookie_secure: bool = False
    open_food_facts_base_url: str | None = None
    open_food_facts_user_agent: str = "fitness-journal/0.1"
    ingredient_search_ttl_seconds: int = 3600

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
