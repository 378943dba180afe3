"""
Library configuration.

Centralized configuration management with environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings"""

    model_config = SettingsConfigDict(
        env_prefix="NUMCTX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Working precision
    DEFAULT_PRECISION: int = 53
    MAX_PRECISION: int = 1 << 20

    # Radius (Mag) representation
    MAG_BITS: int = 30

    # Adaptive evaluation of elementary functions
    GUARD_BITS: int = 16
    MAX_EXTRA_PRECISION: int = 1024
    ELEMENTARY_ERROR_ULPS: int = 8

    # Variable names used for printing
    DEFAULT_VARIABLE: str = "x"
    FINITE_FIELD_VARIABLE: str = "o"
    NUMBER_FIELD_VARIABLE: str = "a"

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: str = "text"  # json or text
    LOG_FILE: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()
