"""
Tests for environment-driven configuration.
"""

import pytest
from pydantic import ValidationError

from stylekit.config import DEFAULT_HOST, DEFAULT_PORT, StyleKitConfig, load_config


class TestLoadConfig:

    def test_defaults(self):
        config = load_config({})
        assert config.host == DEFAULT_HOST
        assert config.port == DEFAULT_PORT
        assert config.log_level == "INFO"
        assert config.cors_origins == ["http://localhost:5173"]
        assert config.db_path.endswith("stylekit.db")

    def test_overrides(self):
        config = load_config({
            "STYLEKIT_DB_PATH": "/tmp/presets.db",
            "STYLEKIT_HOST": "0.0.0.0",
            "STYLEKIT_PORT": "9000",
            "STYLEKIT_LOG_LEVEL": "debug",
            "STYLEKIT_APP_NAME": "Editor",
            "STYLEKIT_CORS_ORIGINS": "http://a.test, http://b.test,",
        })
        assert config.db_path == "/tmp/presets.db"
        assert config.host == "0.0.0.0"
        assert config.port == 9000
        assert config.log_level == "DEBUG"
        assert config.app_name == "Editor"
        assert config.cors_origins == ["http://a.test", "http://b.test"]

    @pytest.mark.parametrize("raw", ["eighty", "0", "70000"])
    def test_bad_port_is_ignored(self, raw):
        assert load_config({"STYLEKIT_PORT": raw}).port == DEFAULT_PORT

    def test_bad_log_level_is_ignored(self):
        assert load_config({"STYLEKIT_LOG_LEVEL": "LOUD"}).log_level == "INFO"

    def test_config_is_frozen_and_closed(self):
        config = StyleKitConfig()
        with pytest.raises(ValidationError):
            config.port = 1
        with pytest.raises(ValidationError):
            StyleKitConfig(colour="red")
