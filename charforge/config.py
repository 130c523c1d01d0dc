"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHARFORGE_",
        case_sensitive=False,
    )

    # Rule tables
    # None = bundled SRD 3.5 tables
    rules_file: str | None = None

    # ==========================================================================
    # Dice Limits
    # ==========================================================================
    max_dice_count: int = 100  # Dice per term
    max_die_sides: int = 1000
    max_explosions: int = 10  # Extra dice allowed by roll_exploding

    # Roll tracking
    roll_history_size: int = 1000
    analysis_iterations: int = 1000

    # Debug
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
