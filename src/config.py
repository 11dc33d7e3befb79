"""
Configuration module for the Airbrake provider.

Loads configuration from environment variables, with explicit provider
configuration taking precedence over the environment.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

DEFAULT_AIRBRAKE_URL = "https://api.airbrake.io/api/v4/"


def normalize_base_url(base_url: Optional[str]) -> str:
    """Default an empty base URL and make sure it ends with a path separator."""
    base_url = base_url or DEFAULT_AIRBRAKE_URL
    if not base_url.endswith("/"):
        base_url = base_url + "/"
    return base_url


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class AirbrakeConfig:
    """Airbrake connection configuration."""

    base_url: str = DEFAULT_AIRBRAKE_URL
    email: str = ""
    password: str = field(default="", repr=False)  # Never log password
    api_key: str = field(default="", repr=False)  # Never log API key
    timeout: int = 30  # seconds

    def __post_init__(self):
        self.base_url = normalize_base_url(self.base_url)

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            base_url=os.getenv("AIRBRAKE_BASE_URL", ""),
            email=os.getenv("AIRBRAKE_EMAIL", ""),
            password=os.getenv("AIRBRAKE_PASSWORD", ""),
            api_key=os.getenv("AIRBRAKE_API_KEY", ""),
            timeout=_int_from_env("AIRBRAKE_TIMEOUT", 30),
        )

    def merged(self, overrides: Optional[Dict[str, Any]]) -> "AirbrakeConfig":
        """
        Return a copy with explicitly configured values applied.

        Keys that are missing or None in ``overrides`` keep the current
        (environment) value.
        """
        values = {
            k: v
            for k, v in (overrides or {}).items()
            if k in ("base_url", "email", "password", "api_key", "timeout")
            and v is not None
        }
        return replace(self, **values)

    @property
    def uses_api_key(self) -> bool:
        """API key authentication takes precedence over email/password."""
        return bool(self.api_key)

    def validate(self) -> None:
        """Raise ValueError if no usable credentials are configured."""
        if not self.api_key and not (self.email and self.password):
            raise ValueError(
                "Missing Airbrake credentials. Set api_key (or AIRBRAKE_API_KEY), "
                "or both email and password (or AIRBRAKE_EMAIL and AIRBRAKE_PASSWORD)."
            )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv(
                "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ),
        )


@dataclass
class Config:
    """Main configuration object."""

    airbrake: AirbrakeConfig
    logging: LoggingConfig

    @classmethod
    def from_env(cls):
        """Load all configuration from environment variables."""
        return cls(
            airbrake=AirbrakeConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def default(cls):
        """Return default configuration."""
        return cls(
            airbrake=AirbrakeConfig(),
            logging=LoggingConfig(),
        )


# Global config instance
config: Optional[Config] = None


def load_config() -> Config:
    """Load configuration (singleton pattern)."""
    global config
    if config is None:
        config = Config.from_env()
    return config


def get_config() -> Config:
    """Get the current configuration."""
    if config is None:
        return load_config()
    return config


def reset_config() -> None:
    """Reset configuration (mainly for testing)."""
    global config
    config = None
