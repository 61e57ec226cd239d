"""Configuration settings test suite.

Validate defaults, environment overrides and field validation for the
process settings.
"""
import os
from unittest import mock

import pytest
from pydantic import ValidationError

from statuspage.config import Settings, get_settings


def test_defaults():
    with mock.patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.PORT == 8088
    assert settings.CONFIG_PATH == "./config.json"
    assert settings.VERSION == "3.0.0"
    assert settings.CHECK_TIMEOUT == 3.0
    assert settings.SHUTDOWN_TIMEOUT == 10.0
    assert settings.STATIC_DIR == "./html"


def test_config_path_from_environment():
    with mock.patch.dict(os.environ, {"CONFIG_PATH": "/etc/statuspage/services.json"}, clear=True):
        settings = Settings(_env_file=None)

    assert settings.CONFIG_PATH == "/etc/statuspage/services.json"


def test_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=9090\nLOG_LEVEL=warning\n")

    with mock.patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=env_file)

    assert settings.PORT == 9090
    assert settings.LOG_LEVEL == "warning"


@pytest.mark.parametrize("port", ["0", "70000"])
def test_port_out_of_range_is_rejected(port):
    with mock.patch.dict(os.environ, {"PORT": port}, clear=True):
        with pytest.raises(ValidationError, match="PORT must be between"):
            Settings(_env_file=None)


def test_non_positive_timeout_is_rejected():
    with pytest.raises(ValidationError, match="Timeouts must be positive"):
        Settings(CHECK_TIMEOUT=0, _env_file=None)


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="verbose", _env_file=None)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
