"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from trainforge.config import settings

    # Access settings
    db_url = settings.DATABASE_URL or settings.POSTGRES_URL
    upload_dir = settings.UPLOAD_DIR
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "TrainForge"
    DEBUG: bool = False

    # PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "trainforge"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "trainforge"

    # Full SQLAlchemy URL override (e.g. "sqlite+aiosqlite:///./trainforge.db")
    DATABASE_URL: str = ""

    @property
    def POSTGRES_URL(self) -> str:
        """Async PostgreSQL connection URL."""
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # File uploads - staging area for raw uploads between preview and commit.
    # Flow: Upload → UPLOAD_DIR → Preview → Commit (Document row points here)
    UPLOAD_DIR: str = "/tmp/trainforge_uploads"
    MAX_UPLOAD_SIZE_MB: int = 100

    # OpenAI
    OPENAI_API_KEY: str = ""

    # Anthropic
    ANTHROPIC_API_KEY: str = ""

    # Google
    GEMINI_API_KEY: str = ""

    # Default text model (LiteLLM format: provider/model-name)
    TEXT_MODEL: str = "openai/gpt-4o"

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
