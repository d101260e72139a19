"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: List[str] = ["*"]

    # ======================
    # News sentiment collaborator
    # ======================
    NEWS_SENTIMENT_ENABLED: bool = True
    NEWS_SENTIMENT_URL: str = "http://localhost:3000/api/ai-news-analysis"
    NEWS_SENTIMENT_TIMEOUT_SECONDS: float = 5.0

    # ======================
    # Analysis
    # ======================
    # Bars required before the historical indicator path replaces the proxies
    HISTORY_MIN_BARS: int = 35

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
