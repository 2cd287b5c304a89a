"""
Configuration settings for the quiz engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum level for the stderr log sink",
    )

    # ========================================
    # Quiz Defaults
    # ========================================
    quiz_default_question_count: int = Field(
        default=15,
        description="Question count used when a caller does not request one",
    )
    quiz_default_time_limit_minutes: int = Field(
        default=30,
        description="Countdown length for a session (minutes)",
    )
    quiz_default_subject: str = Field(
        default="Biology",
        description="Subject used for answer-key lookup when a paper has none",
    )

    # ========================================
    # Sampling
    # ========================================
    quiz_visual_aid_ratio: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Ceiling on the share of questions that need a diagram",
    )
    quiz_shuffle_passes: int = Field(
        default=3,
        ge=1,
        description="Fisher-Yates passes per shuffle",
    )

    # ========================================
    # Session
    # ========================================
    quiz_timer_interval_seconds: float = Field(
        default=1.0,
        gt=0.0,
        description="Countdown tick interval (seconds)",
    )
    quiz_feedback_keyword_limit: int = Field(
        default=5,
        description="Maximum key terms shown in feedback",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def get_quiz_config(self) -> dict[str, object]:
        """Get quiz configuration as a dictionary."""
        return {
            "defaults": {
                "question_count": self.quiz_default_question_count,
                "time_limit_minutes": self.quiz_default_time_limit_minutes,
                "subject": self.quiz_default_subject,
            },
            "sampling": {
                "visual_aid_ratio": self.quiz_visual_aid_ratio,
                "shuffle_passes": self.quiz_shuffle_passes,
            },
            "session": {
                "timer_interval_seconds": self.quiz_timer_interval_seconds,
                "feedback_keyword_limit": self.quiz_feedback_keyword_limit,
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
