"""Configuration objects and logging setup."""

from .logging import configure_logging
from .settings import (
    DEFAULT_MOCK_DELAY,
    DEFAULT_RETRY_STATUS_CODES,
    DEFAULT_TIMEOUT,
    AuthServiceConfig,
    ClientConfig,
    Settings,
)

__all__ = [
    "AuthServiceConfig",
    "ClientConfig",
    "Settings",
    "configure_logging",
    "DEFAULT_MOCK_DELAY",
    "DEFAULT_RETRY_STATUS_CODES",
    "DEFAULT_TIMEOUT",
]
