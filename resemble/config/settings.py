"""Library defaults via Pydantic BaseSettings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from resemble.types import DifferenceType, ProfileKind


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RESEMBLE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Comparison defaults
    profile: ProfileKind = ProfileKind.DEFAULT
    difference_type: DifferenceType = DifferenceType.FLAT
    difference_color: str = "#ff00ffff"
    transparency: float = 1.0

    # Scanning
    workers: int = 1
    resample: Literal["nearest", "bilinear", "bicubic", "lanczos"] = "lanczos"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
