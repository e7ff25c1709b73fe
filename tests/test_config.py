"""Tests for the tileplot.config module."""

import dataclasses
import importlib
from unittest.mock import patch

import pytest

from tileplot import ValidationError, config
from tileplot.config import (DEFAULT_BASE_URL, DEFAULT_TIMEOUT, FetcherConfig)


class TestFetcherConfig:
    """Tests for the FetcherConfig value."""

    def test_defaults(self):
        """Defaults should point at the OSM export endpoint."""
        conf = FetcherConfig()
        assert conf.base_url == "http://tile.openstreetmap.org/cgi-bin/export?"
        assert conf.timeout == DEFAULT_TIMEOUT
        assert conf.api_key is None
        assert conf.user_agent

    def test_is_frozen(self):
        """The config should be immutable."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            FetcherConfig().timeout = 1

    @pytest.mark.parametrize("timeout", [0, -1, "soon", None, float("nan")])
    def test_timeout_must_be_positive(self, timeout):
        """Non-positive or non-numeric timeouts should be rejected."""
        with pytest.raises(ValidationError) as excinfo:
            FetcherConfig(timeout=timeout)
        assert excinfo.value.argument == "timeout"

    def test_timeout_stored_as_float(self):
        """String or int timeouts from settings files become floats."""
        assert FetcherConfig(timeout="12").timeout == 12.0

    def test_from_settings_dict(self):
        """from_settings should read the known keys."""
        conf = FetcherConfig.from_settings({
            "base_url": "http://example.com/export?",
            "timeout": 3,
            "user_agent": "me",
            "api_key": "secret",
        })
        assert conf == FetcherConfig("http://example.com/export?", 3.0, "me", "secret")

    def test_from_settings_fills_defaults(self):
        """Missing keys should fall back to the defaults."""
        conf = FetcherConfig.from_settings({})
        assert conf.base_url == DEFAULT_BASE_URL
        assert conf.api_key is None

    def test_empty_api_key_is_none(self):
        """An empty api_key should mean no key."""
        assert FetcherConfig.from_settings({"api_key": ""}).api_key is None

    @patch.object(config, 'settings', {"timeout": 7})
    def test_from_module_settings(self):
        """Without an argument the module settings should be used."""
        assert FetcherConfig.from_settings().timeout == 7.0


class TestChangeEnv:
    """Tests for the change_env function."""

    @patch.object(config, 'settings')
    def test_sets_env_and_reloads(self, mock_settings):
        """change_env should switch the environment and reload."""
        config.change_env("production")

        mock_settings.setenv.assert_called_once_with("production")
        mock_settings.reload.assert_called_once_with()


class TestSettingsSources:
    """Tests for where the module settings are read from."""

    @pytest.fixture
    def reload_config(self, monkeypatch):
        """Reload the config module, restoring it once the test is done."""
        def _reload():
            importlib.reload(config)
        yield _reload
        monkeypatch.undo()
        importlib.reload(config)

    def test_search_paths(self):
        """Global, user and working directory files should be searched in order."""
        names = [str(p) for p in config.settings_files[:6]]
        assert names[0] == str(config.GLOB_DIR / "settings.toml")
        assert names[2] == str(config.USER_DIR / "settings.toml")
        assert names[4] == str(config.CURR_DIR / "settings.toml")
        assert all(n.endswith(("settings.toml", ".secrets.toml")) for n in names)

    def test_extra_settings_file(self, monkeypatch, reload_config, temp_dir):
        """TILEPLOT_SETTINGS_FILE_FOR_DYNACONF should add a settings file."""
        path = temp_dir / "tileplot.toml"
        path.write_text('[default]\ntimeout = 9\nuser_agent = "from-file"\n')
        monkeypatch.setenv("TILEPLOT_SETTINGS_FILE_FOR_DYNACONF", str(path))
        reload_config()

        assert config.settings_files[-1] == path.absolute()
        conf = config.FetcherConfig.from_settings()
        assert conf.timeout == 9.0
        assert conf.user_agent == "from-file"

    def test_environment_variable(self, monkeypatch, reload_config):
        """TILEPLOT_ prefixed environment variables should set values."""
        monkeypatch.setenv("TILEPLOT_TIMEOUT", "11")
        reload_config()

        assert config.FetcherConfig.from_settings().timeout == 11.0
