"""Application settings for scheduling and stats retention."""

import os
from functools import lru_cache
from pydantic import BaseModel


class AppSettings(BaseModel):
    """Application settings loaded from environment variables."""

    fuzz_enabled: bool = True  # Set to False for fully deterministic intervals
    default_response_time_ms: int = 3000
    daily_stats_retention_days: int = 30
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() not in ("false", "0", "no", "off")


@lru_cache()
def get_app_settings() -> AppSettings:
    """Get cached application settings from environment variables."""
    return AppSettings(
        fuzz_enabled=_env_flag("SRS_FUZZ_ENABLED", "true"),
        default_response_time_ms=int(os.getenv("SRS_DEFAULT_RESPONSE_TIME_MS", "3000")),
        daily_stats_retention_days=int(os.getenv("DAILY_STATS_RETENTION_DAYS", "30")),
        cors_origins=os.getenv(
            "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
        ).split(","),
    )
