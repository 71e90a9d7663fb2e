"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from typing import List, Literal

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, model_validator, ConfigDict

# Project root: workout-tracker/
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Session Tracking ===
    start_policy: Literal["replace", "reject"] = Field(
        default="replace",
        description="Starting a session while one is active: replace it or reject"
    )

    # === Location Request ===
    location_update_interval_ms: int = Field(default=1000, gt=0)
    location_fastest_interval_ms: int = Field(default=500, gt=0)
    location_max_update_delay_ms: int = Field(default=2000, gt=0)

    # === GPX Replay ===
    replay_speedup: float = Field(
        default=1.0,
        gt=0,
        description="Time compression for GPX replay (10 = ten times faster)"
    )

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @model_validator(mode='after')
    def check_intervals(self):
        """Fastest interval can't be slower than the regular one."""
        if self.location_fastest_interval_ms > self.location_update_interval_ms:
            raise ValueError(
                "location_fastest_interval_ms must not exceed location_update_interval_ms"
            )
        return self

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
