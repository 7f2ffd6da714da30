"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Bookshelf"
    debug: bool = False

    # Remote books resource
    books_api_url: str = "http://localhost:3000/books"
    request_timeout: float = 10.0

    # Books
    placeholder_cover_url: str = "https://picsum.photos/400/520"

    # UI feedback
    notification_duration: float = 2.2  # seconds

    # Drop responses superseded by a newer call for the same book
    guard_stale_responses: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
