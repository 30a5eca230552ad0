"""
redmine_modern_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide the database URL (may embed credentials) from repr/logging.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="REDMINE_API_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "redmine-modern-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # Persistence: points at the host Redmine database.
    database_url: str = Field(default="sqlite+aiosqlite:///./redmine.db", repr=False)

    # API docs
    swagger_local_url: str = "http://localhost:3000"

    # Listing / dashboard limits
    projects_per_page: int = Field(default=25, ge=1)
    projects_max_per_page: int = Field(default=100, ge=1)
    recent_activity_limit: int = Field(default=10, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()
