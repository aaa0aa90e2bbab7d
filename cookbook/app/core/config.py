import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Settings(BaseSettings):
    """Cookbook configuration loaded from environment variables."""

    timer_backend: Literal["thread", "asyncio"] = "thread"
    time_scale: float = 1.0  # seconds per duration unit
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_prefix": "COOKBOOK_",
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
