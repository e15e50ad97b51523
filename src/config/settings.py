"""
Centralized settings management using pydantic-settings.

All environment variables and configuration values are defined here.
Use get_settings() to access the singleton settings instance.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.constants import DECK_PAGE_SIZE


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Required environment variables:
        - SUPABASE_URL: Supabase project URL
        - SUPABASE_SERVICE_KEY: Supabase service role key
        - SUPABASE_JWT_SECRET: Secret used to verify actor tokens

    Optional environment variables:
        - HOST / PORT / WORKERS: uvicorn server options
        - CORS_ORIGINS: Comma-separated list of allowed origins
        - ENVIRONMENT: Environment name (development, staging, production)
        - API_BASE_URL: Base URL the swipe client talks to
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Server Configuration
    # ==========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=4, description="Number of uvicorn workers")

    cors_origins: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        description="Allowed CORS origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ==========================================================================
    # Supabase Configuration
    # ==========================================================================
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_service_key: str = Field(..., description="Supabase service role key")
    supabase_jwt_secret: str = Field(
        default="",
        description="JWT secret for token verification (from Supabase dashboard)"
    )

    # ==========================================================================
    # Binder Service
    # ==========================================================================
    deck_page_size: int = Field(
        default=DECK_PAGE_SIZE,
        ge=1,
        le=DECK_PAGE_SIZE,
        description="Maximum number of candidates served per deck"
    )
    stats_batch_limit: int = Field(
        default=100,
        ge=1,
        description="Maximum number of candidate ids accepted by one stats request"
    )

    # ==========================================================================
    # Swipe Client
    # ==========================================================================
    api_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL the swipe client sends requests to"
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for swipe client HTTP requests (seconds)"
    )
    swipe_threshold_px: float = Field(
        default=100.0,
        description="Horizontal drag distance that commits a swipe"
    )
    exit_animation_seconds: float = Field(
        default=0.3,
        ge=0,
        description="Duration of the off-screen card animation"
    )
    replenish_delay_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Delay before fetching a new deck once the stack is exhausted"
    )
    visible_stack_depth: int = Field(
        default=3,
        ge=1,
        description="Number of cards rendered in the visible stack"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure only one instance is created.
    Settings are loaded from environment variables and .env file.

    Returns:
        Settings: The application settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        os.environ.setdefault("ENV_FILE", str(env_file))

    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a settings instance for testing with optional overrides.

    This bypasses the cache to allow different settings in tests.
    """
    test_defaults = {
        "supabase_url": "https://test.supabase.co",
        "supabase_service_key": "test-key",
        "supabase_jwt_secret": "test-jwt-secret-with-enough-length-for-hs256",
        "environment": "testing",
        "debug": True,
    }
    test_defaults.update(overrides)

    return Settings(**test_defaults)
