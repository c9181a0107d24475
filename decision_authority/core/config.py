"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # API
    app_name: str = "Decision Authority"
    debug: bool = False
    log_level: str = "INFO"

    # Rule set served by the API
    rules_dir: str = str(Path(__file__).resolve().parent.parent / "rules" / "data")

    # Memoized evaluation
    cache_max_size: int = 1024

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "DECISION_",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
