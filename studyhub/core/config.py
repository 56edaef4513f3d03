from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (default uses docker-compose service name)
    database_url: str = "postgresql+psycopg2://studyhub:studyhub_dev@db:5432/studyhub"

    # App settings
    app_name: str = "StudyHub"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = [
        "http://localhost:5173",  # Local Vite development
        "http://localhost:3000",
    ]

    # Resource library pagination
    default_page_size: int = 25
    max_page_size: int = 100

    # Quizzes and performance
    default_passing_score: int = 70
    minutes_per_attempt: int = 15  # Fixed estimate, not measured time
    trend_weeks: int = 8
    min_trend_weeks: int = 4
    strength_threshold: int = 80
    weakness_threshold: int = 75

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
