"""Tests for configuration module."""

import json
import os
import pytest
from unittest.mock import patch

from eventdispatch.infrastructure.config import (
    DispatchConfig,
    EventDispatchConfig,
    LoggingConfig,
    TelemetryConfig,
    load_config,
)


class TestDefaultConfig:
    def test_defaults(self):
        config = load_config(path="/nonexistent/eventdispatch.json")
        assert config.dispatch.error_policy == "propagate"
        assert config.logging.level == "WARNING"
        assert config.logging.json_format is False
        assert config.telemetry.endpoint == ""
        assert config.telemetry.service_name == "eventdispatch"

    def test_all_sections_present(self):
        config = load_config(path="/nonexistent/eventdispatch.json")
        assert isinstance(config, EventDispatchConfig)
        assert isinstance(config.dispatch, DispatchConfig)
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.telemetry, TelemetryConfig)

    def test_invalid_error_policy(self):
        with pytest.raises(ValueError, match="error_policy"):
            DispatchConfig(error_policy="ignore")


class TestFileConfig:
    def test_load_from_file(self, tmp_path):
        config_file = tmp_path / "eventdispatch.json"
        config_file.write_text(json.dumps({
            "dispatch": {"error_policy": "log"},
            "logging": {"level": "DEBUG", "json_format": True},
            "telemetry": {"endpoint": "http://localhost:4317"},
        }))

        config = load_config(path=str(config_file))
        assert config.dispatch.error_policy == "log"
        assert config.logging.level == "DEBUG"
        assert config.logging.json_format is True
        assert config.telemetry.endpoint == "http://localhost:4317"

    def test_partial_config(self, tmp_path):
        config_file = tmp_path / "eventdispatch.json"
        config_file.write_text(json.dumps({"logging": {"level": "INFO"}}))

        config = load_config(path=str(config_file))
        assert config.logging.level == "INFO"
        assert config.logging.json_format is False  # default preserved
        assert config.dispatch.error_policy == "propagate"  # default preserved

    def test_invalid_json_returns_defaults(self, tmp_path):
        config_file = tmp_path / "eventdispatch.json"
        config_file.write_text("not valid json{{{")

        config = load_config(path=str(config_file))
        assert config.dispatch.error_policy == "propagate"

    def test_non_object_json_returns_defaults(self, tmp_path):
        config_file = tmp_path / "eventdispatch.json"
        config_file.write_text("[1, 2, 3]")

        config = load_config(path=str(config_file))
        assert config.logging.level == "WARNING"

    def test_unknown_keys_ignored(self, tmp_path):
        config_file = tmp_path / "eventdispatch.json"
        config_file.write_text(json.dumps({
            "dispatch": {"error_policy": "log", "unknown_key": "ignored"},
        }))

        config = load_config(path=str(config_file))
        assert config.dispatch.error_policy == "log"


class TestEnvOverride:
    def test_env_overrides_file(self, tmp_path):
        config_file = tmp_path / "eventdispatch.json"
        config_file.write_text(json.dumps({"dispatch": {"error_policy": "log"}}))

        with patch.dict(os.environ, {"EVENTDISPATCH_DISPATCH_ERROR_POLICY": "propagate"}):
            config = load_config(path=str(config_file))

        assert config.dispatch.error_policy == "propagate"

    def test_env_overrides_default(self):
        with patch.dict(os.environ, {"EVENTDISPATCH_LOGGING_LEVEL": "ERROR"}):
            config = load_config(path="/nonexistent/eventdispatch.json")

        assert config.logging.level == "ERROR"

    def test_env_bool_conversion(self):
        with patch.dict(os.environ, {"EVENTDISPATCH_LOGGING_JSON_FORMAT": "true"}):
            config = load_config(path="/nonexistent/eventdispatch.json")

        assert config.logging.json_format is True

    def test_env_int_conversion(self):
        with patch.dict(os.environ, {"EVENTDISPATCH_TELEMETRY_BUFFER_SIZE": "250"}):
            config = load_config(path="/nonexistent/eventdispatch.json")

        assert config.telemetry.buffer_size == 250

    def test_custom_prefix(self):
        with patch.dict(os.environ, {"MYAPP_TELEMETRY_SERVICE_NAME": "ui-events"}):
            config = load_config(
                path="/nonexistent/eventdispatch.json", env_prefix="MYAPP"
            )

        assert config.telemetry.service_name == "ui-events"


class TestConfigImmutability:
    def test_frozen(self):
        config = load_config(path="/nonexistent/eventdispatch.json")
        with pytest.raises(AttributeError):
            config.dispatch = DispatchConfig()

    def test_sub_config_frozen(self):
        config = load_config(path="/nonexistent/eventdispatch.json")
        with pytest.raises(AttributeError):
            config.dispatch.error_policy = "log"
