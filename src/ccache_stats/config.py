"""Configuration for ccache_stats.

Parses an optional ``.ccache-stats.toml`` file and resolves which ccache
directory to read.

Example config:
    [ccache]
    dir = "/var/cache/ccache"

    [monitor]
    interval = 5.0
    log_file = "~/.cache/ccache-stats/monitor.log"
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any

from ccache_stats.errors import ConfigError

CONFIG_FILENAME = ".ccache-stats.toml"
DEFAULT_CACHE_SUBDIR = ".ccache"
DEFAULT_MONITOR_INTERVAL = 5.0


@dataclass
class CcacheConfig:
    """Location of the ccache directory."""

    dir: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], base: Path) -> CcacheConfig:
        """Create a CcacheConfig; a relative dir is taken relative to base.

        Raises:
            ValueError: If dir is not a string.
        """
        cache_dir = data.get("dir")
        if cache_dir is None or cache_dir == "":
            return cls()
        if not isinstance(cache_dir, str):
            raise ValueError(f"ccache.dir must be a string, got {cache_dir!r}")
        return cls(dir=base / Path(cache_dir).expanduser())


@dataclass
class MonitorConfig:
    """Configuration for the stats monitor."""

    interval: float = DEFAULT_MONITOR_INTERVAL  # seconds between polls
    log_file: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MonitorConfig:
        """Create a MonitorConfig from a dictionary.

        Raises:
            ValueError: If interval is not a positive number.
        """
        interval = data.get("interval", DEFAULT_MONITOR_INTERVAL)
        if isinstance(interval, bool) or not isinstance(interval, (int, float)):
            raise ValueError(f"monitor.interval must be a number, got {interval!r}")
        if interval <= 0:
            raise ValueError(f"monitor.interval must be positive, got {interval}")

        log_file = data.get("log_file")
        if log_file is not None and not isinstance(log_file, str):
            raise ValueError(f"monitor.log_file must be a string, got {log_file!r}")

        return cls(
            interval=float(interval),
            log_file=Path(log_file).expanduser() if log_file else None,
        )


@dataclass
class Config:
    """Main configuration container."""

    ccache: CcacheConfig = field(default_factory=CcacheConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    config_path: Path | None = None

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        """Parse a config file, or the nearest .ccache-stats.toml when path is None.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid TOML or has invalid values.
        """
        path = path if path is not None else find_config()
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Config file not found: {path}") from None

        return cls(
            ccache=CcacheConfig.from_dict(_table(data, "ccache"), path.parent),
            monitor=MonitorConfig.from_dict(_table(data, "monitor")),
            config_path=path,
        )

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> Config:
        """Like load(), but a missing file yields the defaults."""
        try:
            return cls.load(path)
        except FileNotFoundError:
            return cls()

    def get_value(self, key_path: str) -> Any:
        """Look up a setting such as ``monitor.interval``.

        Raises:
            KeyError: If any segment does not name a setting.
        """
        current: Any = self
        for part in key_path.split("."):
            if not is_dataclass(current) or part not in {f.name for f in fields(current)}:
                raise KeyError(f"Invalid config path: {key_path}")
            current = getattr(current, part)
        return current


def _table(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a top-level TOML table, empty when absent."""
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table, got {section!r}")
    return section


def find_config(start: Path | None = None) -> Path:
    """Return the nearest .ccache-stats.toml at or above start (default cwd).

    When none exists, the path it would have in start is returned.
    """
    start = start if start is not None else Path.cwd()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return start / CONFIG_FILENAME


def resolve_cache_dir(
    explicit: Path | str | None = None,
    config: Config | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Work out which ccache directory to read.

    Precedence: explicit argument, CCACHE_DIR, the config file's
    ``ccache.dir``, then ``$HOME/.ccache``.

    Raises:
        ConfigError: If none of the sources yields a directory.
    """
    if environ is None:
        environ = os.environ

    if explicit:
        return Path(explicit)

    env_dir = environ.get("CCACHE_DIR")
    if env_dir:
        return Path(env_dir)

    if config is not None and config.ccache.dir is not None:
        return config.ccache.dir

    home = environ.get("HOME")
    if home:
        return Path(home) / DEFAULT_CACHE_SUBDIR

    raise ConfigError("Could not determine CCACHE_DIR: Not set, no HOME set")
