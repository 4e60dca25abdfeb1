"""
Configuration settings for the kybalion-path learning CLI.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KYBALION_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    progress_db_path: Path = Field(
        default=Path.home() / ".kybalion" / "progress.db",
        description="SQLite file holding the persisted user progress blob",
    )

    # ========================================
    # Content
    # ========================================
    content_dir: Path | None = Field(
        default=None,
        description="Directory with course_<lang>.json files (bundled courses if unset)",
    )
    default_language: Literal["de", "en"] = Field(
        default="de",
        description="Course language used when the saved progress has none",
    )

    # ========================================
    # Reflection Grading
    # ========================================
    grading_proxy_url: str = Field(
        default="http://localhost:8787",
        description="Base URL of the reflection grading proxy",
    )
    grading_timeout_seconds: float = Field(
        default=6.0,
        description="Request timeout for the grading proxy before falling back to simulation",
    )

    # ========================================
    # Practice Engine
    # ========================================
    practice_session_size: int = Field(
        default=7,
        ge=0,
        description="Exercises per practice session",
    )
    daily_practice_size: int = Field(
        default=3,
        ge=0,
        description="Exercises in the practice block of the daily session",
    )
    practice_cooldown_minutes: int = Field(
        default=30,
        ge=0,
        description="Minutes before a just-answered exercise may resurface",
    )
    gate_min_answers: int = Field(
        default=5,
        description="Minimum practice answers needed to clear a mastery gate",
    )
    gate_pass_ratio: float = Field(
        default=0.70,
        description="Correct fraction needed to clear a mastery gate",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="Minimum loguru level written to stderr by the CLI",
    )

    def get_practice_config(self) -> dict[str, Any]:
        """Get practice engine configuration as a dictionary."""
        return {
            "session_size": self.practice_session_size,
            "daily_size": self.daily_practice_size,
            "cooldown_minutes": self.practice_cooldown_minutes,
            "gate": {
                "min_answers": self.gate_min_answers,
                "pass_ratio": self.gate_pass_ratio,
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
