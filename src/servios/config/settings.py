"""Configuration for servios clients.

This module defines two layers of configuration:

- :class:`Settings`, loaded from environment variables and ``.env`` files,
  holding process-wide defaults.
- :class:`ClientConfig` and :class:`AuthServiceConfig`, immutable per-client
  configuration objects. Each client instance owns exactly one of these and
  never shares it mutably with another instance.
"""

from typing import Any, Callable, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import ConfigurationError

DEFAULT_TIMEOUT = 10.0
DEFAULT_MOCK_DELAY = 1.0
DEFAULT_RETRY_STATUS_CODES: Tuple[int, ...] = (401,)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every field can be set through a ``SERVIOS_``-prefixed environment
    variable, e.g. ``SERVIOS_BASE_URL`` or ``SERVIOS_USE_MOCK=true``.

    :param base_url: Default base address for new clients
    :type base_url: Optional[str]
    :param timeout: Default request timeout in seconds
    :type timeout: float
    :param use_mock: Enable mock mode for new clients
    :type use_mock: bool
    :param mock_delay: Artificial latency for mocked responses, in seconds
    :type mock_delay: float
    :param log_level: Logging level for the package logger
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_prefix="SERVIOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: Optional[str] = Field(None, description="Default base address")
    timeout: float = Field(DEFAULT_TIMEOUT, description="Request timeout (seconds)")
    use_mock: bool = Field(False, description="Enable mock responses")
    mock_delay: float = Field(
        DEFAULT_MOCK_DELAY, description="Mock response latency (seconds)"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )


class ClientConfig(BaseModel):
    """Immutable configuration for a single client instance.

    :param base_url: Base address every endpoint is resolved against (required)
    :param timeout: Per-call timeout in seconds, handed to the transport
    :param headers: Default headers sent with every request
    :param use_mock: Register supplied mock data instead of hitting the network
    :param mock_delay: Artificial latency applied to mocked responses, in seconds
    :param transform_error: Function normalizing transport errors before they
                            reach callers; ``None`` selects the default transform
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base_url: str
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)
    headers: Dict[str, str] = Field(default_factory=dict)
    use_mock: bool = False
    mock_delay: float = Field(DEFAULT_MOCK_DELAY, ge=0)
    transform_error: Optional[Callable[[Any], Any]] = None

    def __init__(self, **data: Any):
        base_url = data.get("base_url")
        if not isinstance(base_url, str) or not base_url.strip():
            raise ConfigurationError("base_url is required", setting="base_url")
        super().__init__(**data)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides: Any):
        """Build a configuration from environment settings.

        Explicit keyword overrides win over values from the environment.

        :param settings: Settings instance, loaded from the environment if omitted
        :param overrides: Field values taking precedence over ``settings``
        :return: New configuration instance
        :raises ConfigurationError: If no base address is available
        """
        settings = settings or Settings()
        values: Dict[str, Any] = {
            "base_url": settings.base_url,
            "timeout": settings.timeout,
            "use_mock": settings.use_mock,
            "mock_delay": settings.mock_delay,
        }
        values.update(overrides)
        return cls(**values)


class AuthServiceConfig(ClientConfig):
    """Client configuration with the token-refresh retry policy.

    :param retry_on_status_codes: Response statuses treated as an
                                  authentication failure
    """

    retry_on_status_codes: Tuple[int, ...] = DEFAULT_RETRY_STATUS_CODES

    @field_validator("retry_on_status_codes", mode="before")
    @classmethod
    def normalize_status_codes(cls, v):
        """Accept any iterable of status codes, including a single int."""
        if isinstance(v, int):
            return (v,)
        return tuple(v)
