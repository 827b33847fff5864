"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Every value has a default so the matcher runs without a .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, model_validator
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # COLUMN MATCHING
    # ===================
    csv_max_samples: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Non-empty sample values inspected per CSV column"
    )
    min_value_confidence: float = Field(
        default=0.25,
        ge=0,
        le=1,
        description="Minimum value-pattern score (0-1) to accept a column"
    )
    header_match_threshold: float = Field(
        default=0.75,
        ge=0,
        le=1,
        description="Minimum header similarity (0-1) to accept a header match"
    )
    header_hint_bonus: float = Field(
        default=0.1,
        ge=0,
        le=0.5,
        description="Flat bonus when a header contains a hint word for the field"
    )

    # ===================
    # MARKET SYMBOLS
    # ===================
    market_min_length: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Shortest normalized symbol treated as a market"
    )
    market_max_length: int = Field(
        default=10,
        ge=2,
        le=32,
        description="Longest normalized symbol treated as a market"
    )

    # ===================
    # UPLOADS
    # ===================
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1024,
        le=50 * 1024 * 1024,
        description="Largest CSV accepted by the import preview"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        description="Allowed CORS origins (JSON list in env)"
    )

    @model_validator(mode="after")
    def _check_market_band(self) -> "Settings":
        if self.market_min_length > self.market_max_length:
            raise ValueError("market_min_length must not exceed market_max_length")
        return self

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
