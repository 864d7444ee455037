"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
Only the HTTP layer reads these; the GPS pipeline receives
its tuning values as explicit arguments.
"""

from typing import List

from pydantic import ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings

from waybinder.shared.constants import (
    DEFAULT_MOVING_SPEED_THRESHOLD_KMH,
    DEFAULT_SIMPLIFY_TOLERANCE,
)


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Uploads ===
    max_upload_size_mb: int = Field(
        default=20,
        ge=1,
        description="Maximum accepted GPS file size"
    )

    # === GPS pipeline ===
    gps_simplify_tolerance: float = Field(
        default=DEFAULT_SIMPLIFY_TOLERANCE,
        ge=0,
        description="Default simplification tolerance in degrees"
    )
    gps_moving_speed_threshold_kmh: float = Field(
        default=DEFAULT_MOVING_SPEED_THRESHOLD_KMH,
        ge=0,
        description="Segments faster than this count as moving time"
    )

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
