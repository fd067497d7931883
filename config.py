"""
Configuration settings for the learnerdash client.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LEARNERDASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Remote API hosts
    # ========================================
    profile_base_url: str = Field(
        default="https://new-lms-backend-vmgr.onrender.com/api/v1/students",
        description="Student profile and bookmark endpoints",
    )
    catalog_base_url: str = Field(
        default="https://lms-backend-flwq.onrender.com/api/v1",
        description="Course catalog endpoints (anonymous-tolerant)",
    )
    notifications_base_url: str = Field(
        default="https://lms-backend-flwq.onrender.com/api/v1",
        description="Notification endpoints",
    )
    request_timeout_seconds: float = Field(
        default=15.0,
        description="Per-request timeout; expiry is reported as a transport failure",
    )

    # ========================================
    # Session handling
    # ========================================
    login_route: str = Field(default="/login", description="Where expired sessions are sent")
    redirect_delay_seconds: float = Field(
        default=2.0,
        description="Delay before the forced login redirect, so the notice can render",
    )

    # ========================================
    # Notices and lists
    # ========================================
    profile_notice_seconds: float = 5.0
    course_notice_seconds: float = 3.0
    notifications_page_size: int = 10

    # ========================================
    # Local state
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".learnerdash",
        description="Directory holding the durable key/value store",
    )
    theme: Literal["light", "dark"] = "light"
    log_level: str = "WARNING"

    @property
    def storage_path(self) -> Path:
        return self.data_dir / "storage.json"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
