"""
Tests for pydantic environment settings.
"""

import pytest
from pydantic import ValidationError

from xhr_client.core.env_config.validator import LoggingSettings, XHRClientSettings


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


class TestXHRClientSettings:

    def test_defaults(self):
        settings = XHRClientSettings()
        assert settings.timeout_ms == 0
        assert settings.response_kind == "text"
        assert settings.max_redirects == 30
        assert settings.log_enabled is False

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValidationError):
            XHRClientSettings(timeout_ms=-1)

    def test_unknown_response_kind_rejected(self):
        with pytest.raises(ValidationError):
            XHRClientSettings(response_kind="xml")

    def test_values_normalized(self):
        settings = XHRClientSettings(response_kind="JSON", log_level="debug", log_format="JSON")
        assert settings.response_kind == "json"
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_prefix(self, monkeypatch):
        monkeypatch.setenv("XHR_CLIENT_MAX_REDIRECTS", "4")
        assert XHRClientSettings().max_redirects == 4

    def test_to_logging_settings_disabled(self):
        assert XHRClientSettings().to_logging_settings() is None

    def test_to_logging_settings_without_outputs(self):
        settings = XHRClientSettings(log_enabled=True, log_enable_console=False)
        assert settings.to_logging_settings() is None

    def test_to_logging_settings(self):
        settings = XHRClientSettings(log_enabled=True, log_format="json")
        logging_settings = settings.to_logging_settings()
        assert isinstance(logging_settings, LoggingSettings)
        assert logging_settings.format == "json"


class TestLoggingSettings:

    def test_file_path_required(self):
        with pytest.raises(ValidationError, match="file_path is required"):
            LoggingSettings(enable_file=True, file_path=None)

    def test_file_settings(self, tmp_path):
        settings = LoggingSettings(enable_file=True, file_path=str(tmp_path / "x.log"))
        assert settings.backup_count == 5
