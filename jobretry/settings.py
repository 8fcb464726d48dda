"""Runtime settings loaded from the environment."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """jobretry settings, read from JOBRETRY_* environment variables."""
    model_config = SettingsConfigDict(env_prefix="JOBRETRY_")

    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = "resque:"
    log_level: str = "INFO"
    json_logs: bool = False
    max_retry_delay: Optional[int] = None  # ceiling for any retry delay, in seconds


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings so the environment is read again."""
    global _settings
    _settings = None
