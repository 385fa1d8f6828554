"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock mode keeps the workout log in memory for local development.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like api_keys), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Swim Log API"
    api_version: str = "v1"
    api_keys: str = Field(
        default="dev-key-1,dev-key-2",
        description="Comma-separated API keys accepted in the X-API-Key header."
    )

    # Parser Configuration
    default_intensity_system: str = Field(
        default="polar",
        description="Intensity vocabulary used when a request does not name one (polar or international)."
    )
    parser_strict_groups: bool = Field(
        default=False,
        description="Reject workouts with an unclosed bracket group instead of silently dropping it."
    )
    max_workout_length: int = Field(
        default=20_000,
        description="Maximum workout text length in characters accepted by the parse endpoint."
    )

    # Workout Log Storage
    workout_store_path: Path = Field(
        default=Path("data/workouts.json"),
        description="JSON file holding logged workouts keyed by date."
    )
    workout_store_mock_mode: bool = Field(
        default=False,
        description="Keep the workout log in memory instead of on disk."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("default_intensity_system")
    @classmethod
    def _check_intensity_system(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("polar", "international"):
            raise ValueError("default_intensity_system must be 'polar' or 'international'")
        return value

    @property
    def api_keys_list(self) -> list[str]:
        """Parse comma-separated API keys into a list."""
        return [key.strip() for key in self.api_keys.split(",") if key.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Report configuration problems that Pydantic can't catch on its own.

        Returns a list of missing or unusable settings.
        """
        missing = []

        if not self.api_keys_list:
            missing.append("API_KEYS")

        # A directory can't be used as the store file
        if not self.workout_store_mock_mode and self.workout_store_path.is_dir():
            missing.append("WORKOUT_STORE_PATH")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process.
    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
