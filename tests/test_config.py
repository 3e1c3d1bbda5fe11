"""
Tests for configuration loading.
"""

import json
import logging

import pytest

from mood_insights_mcp_server.config import Config, get_config, load_config, set_config
from mood_insights_mcp_server.exceptions import ConfigurationError


class TestConfig:
    """Test config construction and helpers."""

    def test_defaults(self):
        config = Config()

        assert config.analysis.stability_divisor == 25.0
        assert config.classifier.mirroring_sync == 0.7
        assert config.storage.persist_by_default is True
        assert config.privacy.redact_by_default is False
        assert len(config.session_salt) == 16

    def test_from_dict(self):
        config = Config.from_dict(
            {
                "analysis": {"stress_point_threshold": 6.5},
                "classifier": {"supportive_stress": -0.5},
                "log_level": "DEBUG",
            }
        )

        assert config.analysis.stress_point_threshold == 6.5
        assert config.analysis.window_days == 7
        assert config.classifier.supportive_stress == -0.5
        assert config.logging_level == logging.DEBUG

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigurationError):
            Config.from_dict({"analysis": {"no_such_setting": 1}})

    def test_from_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"storage": {"path": "/tmp/x.db"}}))

        assert Config.from_file(path).storage.path == "/tmp/x.db"

    def test_from_missing_file(self, tmp_path):
        assert Config.from_file(tmp_path / "missing.json").storage.timeout_seconds == 30

    def test_from_invalid_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigurationError):
            Config.from_file(path)

    def test_explicit_flags_override_defaults(self):
        config = Config()

        assert config.should_redact() is False
        assert config.should_redact(True) is True
        assert config.should_persist() is True
        assert config.should_persist(False) is False


class TestEnvironment:
    """Test environment variable configuration."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MOOD_INSIGHTS_STABILITY_DIVISOR", "20")
        monkeypatch.setenv("MOOD_INSIGHTS_WINDOW_DAYS", "14")
        monkeypatch.setenv("MOOD_INSIGHTS_STORE_PATH", "/data/analysis.db")
        monkeypatch.setenv("MOOD_INSIGHTS_REDACT_DEFAULT", "true")
        monkeypatch.setenv("MOOD_INSIGHTS_MAX_WORKERS", "2")
        monkeypatch.setenv("MOOD_INSIGHTS_LOG_LEVEL", "warning")

        config = Config.from_env()

        assert config.analysis.stability_divisor == 20.0
        assert config.analysis.window_days == 14
        assert config.storage.path == "/data/analysis.db"
        assert config.privacy.redact_by_default is True
        assert config.performance.max_workers == 2
        assert config.log_level == "WARNING"

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv("MOOD_INSIGHTS_STRESS_POINT_THRESHOLD", "high")

        with pytest.raises(ConfigurationError):
            Config.from_env()

    def test_load_config_prefers_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.json").write_text(json.dumps({"log_level": "ERROR"}))
        monkeypatch.setenv("MOOD_INSIGHTS_LOG_LEVEL", "DEBUG")

        assert load_config().log_level == "ERROR"


def test_global_config(test_config):
    assert get_config() is test_config

    set_config(None)
    reloaded = get_config()
    assert reloaded is not test_config
