"""Application configuration from environment variables."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    database_url: str = "postgresql://needledrop:needledrop@db:5432/needledrop"

    # Redis (sessions + celery broker)
    redis_url: str = "redis://redis:6379/0"

    # Authentication
    jwt_secret: str = "change-me-in-production-use-random-string"
    jwt_algorithm: str = "HS256"
    jwt_expiry_hours: int = 24
    session_tracking: bool = True  # Track issued tokens in redis so they can be revoked

    # Spotify catalog
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_market: str = "US"

    # Content rules
    review_max_length: int = 5000

    # Feed pagination
    feed_default_limit: int = 20
    feed_max_limit: int = 100

    # Maintenance
    activity_projection_interval_minutes: int = 15

    # Logging
    log_level: str = "info"
    log_path: str = ""

    class Config:
        env_file = (".env", "../.env")  # Check both backend/ and parent dir
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
