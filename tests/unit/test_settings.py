"""Unit tests for configuration loading."""

import logging

import pytest

from servios.config import AuthServiceConfig, ClientConfig, Settings, configure_logging
from servios.exceptions import ConfigurationError


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SERVIOS_BASE_URL", "https://env.test")
    monkeypatch.setenv("SERVIOS_TIMEOUT", "5")
    monkeypatch.setenv("SERVIOS_USE_MOCK", "true")

    settings = Settings()

    assert settings.base_url == "https://env.test"
    assert settings.timeout == 5.0
    assert settings.use_mock is True
    assert settings.mock_delay == 1.0


def test_client_config_from_settings_with_overrides(monkeypatch):
    monkeypatch.setenv("SERVIOS_BASE_URL", "https://env.test")
    monkeypatch.setenv("SERVIOS_MOCK_DELAY", "0.25")

    config = ClientConfig.from_settings(timeout=2.0)

    assert config.base_url == "https://env.test"
    assert config.mock_delay == 0.25
    assert config.timeout == 2.0


def test_from_settings_without_base_url():
    with pytest.raises(ConfigurationError):
        ClientConfig.from_settings()


def test_client_config_is_frozen():
    config = ClientConfig(base_url="https://api.test")
    with pytest.raises(Exception):
        config.timeout = 1.0


def test_auth_config_retry_codes():
    assert AuthServiceConfig(base_url="https://a").retry_on_status_codes == (401,)
    assert AuthServiceConfig(
        base_url="https://a", retry_on_status_codes=[401, 419]
    ).retry_on_status_codes == (401, 419)
    assert AuthServiceConfig(
        base_url="https://a", retry_on_status_codes=403
    ).retry_on_status_codes == (403,)


def test_configure_logging_uses_settings_level(monkeypatch):
    monkeypatch.setenv("SERVIOS_LOG_LEVEL", "DEBUG")
    handler = logging.NullHandler()

    logger = configure_logging(handler=handler)

    try:
        assert logger.name == "servios"
        assert logger.level == logging.DEBUG
        assert handler in logger.handlers
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
