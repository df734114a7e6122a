# config.py
import logging
import os
from dataclasses import dataclass
from typing import Optional


class ConfigError(ValueError):
    """Raised when an environment override holds a value we cannot use."""


@dataclass
class Config:
    """Holds all application configuration."""
    LOOKUP_URL: str = "https://itunes.apple.com/lookup?id={id}"
    DEFAULT_TRACK_ID: int = 547702041
    REQUEST_TIMEOUT: Optional[float] = None
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Builds a Config, letting APP_DETAIL_* environment variables override the defaults."""
        config = cls()
        if "APP_DETAIL_LOOKUP_URL" in os.environ:
            config.LOOKUP_URL = os.environ["APP_DETAIL_LOOKUP_URL"]
        if os.environ.get("APP_DETAIL_TIMEOUT"):
            raw = os.environ["APP_DETAIL_TIMEOUT"]
            try:
                config.REQUEST_TIMEOUT = float(raw)
            except ValueError:
                raise ConfigError(f"APP_DETAIL_TIMEOUT must be a number of seconds, got '{raw}'") from None
        if "APP_DETAIL_LOG_LEVEL" in os.environ:
            level = os.environ["APP_DETAIL_LOG_LEVEL"].upper()
            if not isinstance(logging.getLevelName(level), int):
                raise ConfigError(f"APP_DETAIL_LOG_LEVEL must be a logging level name, got '{level}'")
            config.LOG_LEVEL = level
        return config
