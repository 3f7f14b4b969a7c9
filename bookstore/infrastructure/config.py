"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://bookstore:bookstore_dev_password@db:5432/bookstore"
    create_tables_on_startup: bool = False

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
    ]

    # Catalog
    id_allocation_retries: int = 5
    allow_category_merge: bool = True
    rename_requires_known_category: bool = False
    randomize_flags_on_update: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = True


settings = Settings()
