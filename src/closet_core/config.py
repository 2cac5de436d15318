import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = ("memory", "file", "redis")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Storage
    storage_backend: str = os.getenv("STORAGE_BACKEND", "memory")
    storage_dir: str = os.getenv("STORAGE_DIR", ".closet_store")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Response cache
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "")
    cache_namespace: str = os.getenv("CACHE_NAMESPACE", "weatherPicksCache")
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "5"))
    cache_max_age_hours: float = float(os.getenv("CACHE_MAX_AGE_HOURS", "24"))
    cache_fresh_minutes: float = float(os.getenv("CACHE_FRESH_MINUTES", "60"))

    # Outfit history
    history_key: str = os.getenv("HISTORY_KEY", "outfitHistory")
    history_window_days: int = int(os.getenv("HISTORY_WINDOW_DAYS", "30"))
    repeat_threshold: float = float(os.getenv("REPEAT_THRESHOLD", "0.8"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {list(STORAGE_BACKENDS)}, "
                f"got {self.storage_backend!r}"
            )

        if not 0 <= self.repeat_threshold <= 1:
            raise ValueError("REPEAT_THRESHOLD must be between 0 and 1 for Jaccard similarity")

        if self.cache_max_entries < 1:
            raise ValueError("CACHE_MAX_ENTRIES must be at least 1")

        if self.cache_max_age_hours <= 0 or self.cache_fresh_minutes <= 0:
            raise ValueError("CACHE_MAX_AGE_HOURS and CACHE_FRESH_MINUTES must be positive")

        if self.history_window_days < 1:
            raise ValueError("HISTORY_WINDOW_DAYS must be at least 1")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )
