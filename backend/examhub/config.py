"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - production refuses to start with placeholder remote-store credentials

Design Decisions:
    - Defaults provided for all non-secret settings: local development works
      against a Supabase instance on localhost without a .env file
"""

import json
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

PLACEHOLDER_SUPABASE_URL = "http://localhost:54321"
PLACEHOLDER_SUPABASE_KEY = "supabase-key-placeholder"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    environment: Literal["development", "test", "production"] = "development"

    # Remote store (Supabase / PostgREST)
    supabase_url: str = PLACEHOLDER_SUPABASE_URL
    supabase_key: str = PLACEHOLDER_SUPABASE_KEY
    supabase_timeout_seconds: float = 5.0

    # API
    api_prefix: str = "/api"
    identity_header: str = "x-user-id"
    roles_header: str = "x-user-roles"
    cors_origins: Annotated[list[str], NoDecode] = ["*"]
    cors_credentials: bool = True

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("supabase_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a JSON list, a comma-separated string, or '*'."""
        if not isinstance(v, str):
            return v
        v = v.strip()
        if not v or v == "*":
            return ["*"]
        if v.startswith("[") and v.endswith("]"):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return ["*"]
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @model_validator(mode="after")
    def require_store_credentials_in_production(self):
        if self.environment != "production":
            return self
        if self.supabase_url == PLACEHOLDER_SUPABASE_URL:
            raise ValueError("SUPABASE_URL is required in production mode")
        if self.supabase_key == PLACEHOLDER_SUPABASE_KEY:
            raise ValueError("SUPABASE_KEY is required in production mode")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
