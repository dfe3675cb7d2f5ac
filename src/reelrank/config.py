"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "ReelRank API"
    debug: bool = False
    secret_key: str  # Required, no default

    # Database
    database_url: str = "sqlite+aiosqlite:///./reelrank.db"
    # Seconds a SQLite writer waits for the database lock before failing
    database_busy_timeout: float = 30.0

    # JWT Authentication
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24 * 30

    # Reviews
    review_text_max_length: int = 2000

    # Rankings
    top_rated_min_reviews: int = 3
    highest_rated_min_reviews: int = 5
    trending_window_days: int = 30
    default_ranking_limit: int = 10

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str, info) -> str:
        """Validate that secret_key is secure."""
        if not v:
            raise ValueError("SECRET_KEY is required")

        # In production mode, ensure secret key is strong
        debug = info.data.get("debug", False)
        if not debug:
            if len(v) < 32:
                raise ValueError("SECRET_KEY must be at least 32 characters in production mode")
            if v in ("change-me-in-production", "secret", "password", "changeme"):
                raise ValueError("SECRET_KEY must not be a common weak value")

        return v

    @field_validator(
        "top_rated_min_reviews",
        "highest_rated_min_reviews",
        "trending_window_days",
        "default_ranking_limit",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Ranking thresholds must be positive."""
        if v < 1:
            raise ValueError("Ranking thresholds must be at least 1")
        return v

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if self.database_url.startswith("sqlite") and ":memory:" in self.database_url:
            warnings.append("DATABASE_URL points at an in-memory database - data will not persist")

        if self.review_text_max_length > 10000:
            warnings.append("REVIEW_TEXT_MAX_LENGTH is unusually large")

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
