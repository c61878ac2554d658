"""
Marketing Intelligence API - Configuration
"""
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    BASE_DIR: Path = Path(__file__).parent
    LOG_DIR: Path = Field(default_factory=lambda: Path(__file__).parent / "logs")

    # Perplexity
    PPLX_API_KEY: str = Field(default="", description="Perplexity API key")
    PPLX_API_URL: str = Field(default="https://api.perplexity.ai/chat/completions")
    PPLX_MODEL_FAST: str = Field(default="sonar")
    PPLX_MODEL_TRENDING: str = Field(default="sonar-pro", description="Model used for real-time trending topics")
    PPLX_TIMEOUT_SECONDS: float = Field(default=45.0)
    PPLX_MAX_RETRIES: int = Field(default=3)
    PPLX_RETRY_DELAY_SECONDS: float = Field(default=1.0)

    # Outer deadline for a whole request (upstream call + retries)
    REQUEST_DEADLINE_SECONDS: float = Field(default=50.0)

    # Briefings / trending
    DEFAULT_AUDIENCE: str = Field(default="CMO")
    BRIEFINGS_LIMIT: int = Field(default=6)
    CACHE_TTL_HOURS: int = Field(default=24)
    BRIEFINGS_REFRESH_ENABLED: bool = Field(default=False, description="Pre-warm the briefings cache daily")
    BRIEFINGS_REFRESH_HOUR: int = Field(default=6, description="Hour (UTC) of the daily briefings refresh")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # API
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cache_ttl_seconds(self) -> float:
        return self.CACHE_TTL_HOURS * 60 * 60


# Global settings instance
settings = Settings()


def ensure_directories():
    """Ensure all required directories exist."""
    dirs = [
        settings.LOG_DIR,
    ]
    for dir_path in dirs:
        dir_path.mkdir(parents=True, exist_ok=True)
