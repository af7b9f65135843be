"""
Configuration settings using Pydantic BaseSettings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = "Life Data Reliability Analysis"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000"
    ]

    # Reliability curves
    grid_points: int = 101
    grid_extension: float = 1.2

    # Confidence bounds
    default_confidence_level: float = 0.9

    # Monte Carlo
    monte_carlo_max_simulations: int = 1_000_000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
