"""Tests for configuration loading and environment overrides."""

import json

import pytest

from core.config import Config, apply_env_overrides, load_config
from core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)


class TestLoadConfig:
    """Test file loading."""

    def test_defaults_without_file(self, tmp_path):
        """Test that a missing file yields defaults and is not created."""
        config_file = tmp_path / "config.json"

        config = load_config(config_file)

        assert config.proxy.host == "localhost"
        assert config.proxy.port == 3000
        assert config.limits.max_body_bytes == 50 * 1024 * 1024
        assert not config_file.exists()

    def test_values_from_file(self, tmp_path):
        """Test that file settings are applied."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"proxy": {"port": 9000, "debug": True}}))

        config = load_config(config_file)

        assert config.proxy.port == 9000
        assert config.proxy.debug is True

    def test_corrupt_file_backed_up(self, tmp_path):
        """Test that unreadable config is moved aside and defaults used."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")

        config = load_config(config_file)

        assert config == Config()
        assert not config_file.exists()
        assert (tmp_path / "config.json.bak").read_text() == "{not json"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Test that HOST and PORT from the environment win over the file."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"proxy": {"port": 9000}}))
        monkeypatch.setenv("HOST", "0.0.0.0")
        monkeypatch.setenv("PORT", "8080")

        config = load_config(config_file)

        assert config.proxy.host == "0.0.0.0"
        assert config.proxy.port == 8080


class TestApplyEnvOverrides:
    """Test environment override handling."""

    def test_no_overrides_returns_same_config(self):
        """Test that an empty environment leaves config untouched."""
        config = Config()

        assert apply_env_overrides(config, {}) is config

    @pytest.mark.parametrize("port", ["http", "70000", "-1"])
    def test_invalid_port(self, port):
        """Test that a bad PORT refuses to start."""
        with pytest.raises(ConfigurationError, match="Invalid PORT"):
            apply_env_overrides(Config(), {"PORT": port})
