"""Tests for configuration parsing and cache directory resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from ccache_stats.config import (
    CONFIG_FILENAME,
    Config,
    MonitorConfig,
    find_config,
    resolve_cache_dir,
)
from ccache_stats.errors import ConfigError


class TestMonitorConfig:
    """Tests for MonitorConfig parsing."""

    def test_defaults(self):
        """Test default monitor settings."""
        monitor = MonitorConfig.from_dict({})
        assert monitor.interval == 5.0
        assert monitor.log_file is None

    def test_values(self):
        """Test explicit monitor settings."""
        monitor = MonitorConfig.from_dict({"interval": 2, "log_file": "/tmp/m.log"})
        assert monitor.interval == 2.0
        assert monitor.log_file == Path("/tmp/m.log")

    def test_rejects_non_positive_interval(self):
        """Test zero or negative intervals are invalid."""
        with pytest.raises(ValueError) as exc_info:
            MonitorConfig.from_dict({"interval": 0})
        assert "positive" in str(exc_info.value)

    def test_rejects_non_numeric_interval(self):
        """Test interval must be a number."""
        with pytest.raises(ValueError):
            MonitorConfig.from_dict({"interval": "fast"})


class TestConfigLoad:
    """Tests for Config.load."""

    def test_load_full(self, tmp_path):
        """Test loading all sections."""
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text(
            '[ccache]\ndir = "/var/cache/ccache"\n\n[monitor]\ninterval = 1.5\n'
        )

        config = Config.load(config_file)

        assert config.config_path == config_file
        assert config.ccache.dir == Path("/var/cache/ccache")
        assert config.monitor.interval == 1.5

    def test_relative_dir(self, tmp_path):
        """Test a relative cache dir resolves against the config file."""
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[ccache]\ndir = "cache"\n')

        config = Config.load(config_file)

        assert config.ccache.dir == tmp_path / "cache"

    def test_load_missing(self, tmp_path):
        """Test loading a missing file raises."""
        with pytest.raises(FileNotFoundError):
            Config.load(tmp_path / CONFIG_FILENAME)

    def test_load_or_default(self, tmp_path):
        """Test defaults when no file exists."""
        config = Config.load_or_default(tmp_path / CONFIG_FILENAME)
        assert config.ccache.dir is None
        assert config.monitor.interval == 5.0
        assert config.config_path is None

    def test_invalid_toml(self, tmp_path):
        """Test TOML syntax errors surface as ValueError."""
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[ccache\n")
        with pytest.raises(ValueError):
            Config.load(config_file)

    def test_find_config_in_parent(self, tmp_path, monkeypatch):
        """Test the config file is found in a parent directory."""
        (tmp_path / CONFIG_FILENAME).write_text("[monitor]\ninterval = 3\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        config = Config.load()

        assert config.monitor.interval == 3.0
        assert config.config_path == tmp_path / CONFIG_FILENAME

    def test_get_value(self):
        """Test dotted lookup."""
        config = Config()
        assert config.get_value("monitor.interval") == 5.0
        with pytest.raises(KeyError):
            config.get_value("monitor.bogus")


class TestResolveCacheDir:
    """Tests for resolve_cache_dir precedence."""

    def test_explicit_wins(self):
        """Test an explicit path beats everything."""
        env = {"CCACHE_DIR": "/env", "HOME": "/home/u"}
        assert resolve_cache_dir("/explicit", environ=env) == Path("/explicit")

    def test_env_over_config(self):
        """Test CCACHE_DIR beats the config file."""
        config = Config()
        config.ccache.dir = Path("/from-config")
        env = {"CCACHE_DIR": "/env", "HOME": "/home/u"}
        assert resolve_cache_dir(config=config, environ=env) == Path("/env")

    def test_config_over_home(self):
        """Test the config file beats HOME."""
        config = Config()
        config.ccache.dir = Path("/from-config")
        assert resolve_cache_dir(config=config, environ={"HOME": "/home/u"}) == Path("/from-config")

    def test_home_default(self):
        """Test fallback to ~/.ccache."""
        assert resolve_cache_dir(environ={"HOME": "/home/u"}) == Path("/home/u/.ccache")

    def test_nothing_set(self):
        """Test an error when no source is available."""
        with pytest.raises(ConfigError) as exc_info:
            resolve_cache_dir(environ={})
        assert "CCACHE_DIR" in str(exc_info.value)


class TestSectionTypes:
    """Tests for top-level keys that are not tables."""

    @pytest.mark.parametrize("content,section", [
        ("ccache = 5\n", "ccache"),
        ('monitor = "x"\n', "monitor"),
    ])
    def test_non_table_section(self, tmp_path, content, section):
        """Test a scalar in place of a section is a ValueError."""
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text(content)

        with pytest.raises(ValueError) as exc_info:
            Config.load(config_file)
        assert f"[{section}] must be a table" in str(exc_info.value)

    def test_non_string_dir(self, tmp_path):
        """Test ccache.dir must be a string."""
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[ccache]\ndir = 3\n")

        with pytest.raises(ValueError) as exc_info:
            Config.load(config_file)
        assert "ccache.dir" in str(exc_info.value)


class TestFindConfig:
    """Tests for find_config."""

    def test_nearest_wins(self, tmp_path):
        """Test the closest config file is chosen."""
        (tmp_path / CONFIG_FILENAME).write_text("")
        inner = tmp_path / "inner"
        inner.mkdir()
        (inner / CONFIG_FILENAME).write_text("")

        assert find_config(inner) == inner / CONFIG_FILENAME

    def test_not_found(self, tmp_path):
        """Test the would-be path in the start directory is returned."""
        start = tmp_path / "x"
        start.mkdir()
        (start / "sub").mkdir()

        result = find_config(start / "sub")

        assert result.name == CONFIG_FILENAME
        if not result.exists():
            assert result == start / "sub" / CONFIG_FILENAME

    def test_get_value_top_level(self, tmp_path):
        """Test top-level settings are reachable and unknown keys are not."""
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        config = Config.load(config_file)

        assert config.get_value("config_path") == config_file
        with pytest.raises(KeyError):
            config.get_value("monitor.interval.real")
