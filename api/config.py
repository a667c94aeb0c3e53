"""FastAPI application settings."""

from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache
import os

from config import config


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("SYNDUCT_ALLOWED_ORIGINS", "")
    if cors_env:
        return [origin.strip() for origin in cors_env.split(",")]
    # Default development origins
    return ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # App info
    app_name: str = "Synduct Insights API"
    version: str = config.app.version
    debug: bool = os.getenv("SYNDUCT_DEBUG", "false").lower() == "true"

    # Record source
    records_path: Path = config.data.records_path

    # CORS - configurable via environment variable
    cors_origins: list[str] = _parse_cors_origins()

    # Aggregation limits
    default_top_n: int = config.analysis.top_n
    max_top_n: int = 100

    # Cache
    cache_ttl_seconds: int = int(os.getenv("SYNDUCT_CACHE_TTL", "1800"))

    class Config:
        env_prefix = "SYNDUCT_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
