"""CLI command handlers.

- show: pretty snapshot of a cache directory (like ``ccache -s``)
- print: raw snapshot of a cache directory (like ``ccache --print-stats``)
- leaf: one stats file, pretty or raw
- monitor: report counter changes as they happen
- config validate / config get: inspect configuration
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from ccache_stats.config import Config, resolve_cache_dir
from ccache_stats.errors import CacheStatsError

if TYPE_CHECKING:
    import argparse

    from ccache_stats.presentation import CacheFieldCollection

logger = logging.getLogger("ccache_stats.cli")


def _load_config(args: argparse.Namespace) -> Config:
    config_path = getattr(args, "config", None)
    if config_path:
        return Config.load(Path(config_path))
    return Config.load_or_default()


def _cache_dir(args: argparse.Namespace, config: Config) -> Path:
    return resolve_cache_dir(getattr(args, "dir", None), config)


def _emit(collection: CacheFieldCollection, mode: str) -> None:
    if mode == "json":
        print(json.dumps(collection.to_dict(), indent=2))
    elif mode == "raw":
        collection.write_raw(sys.stdout)
    else:
        collection.write_pretty(sys.stdout)


def cmd_show(args: argparse.Namespace) -> int:
    """Handle 'show' command - pretty snapshot of a cache directory."""
    from ccache_stats.reader import read_directory

    try:
        config = _load_config(args)
        cache_dir = _cache_dir(args, config)
        snapshot = read_directory(cache_dir)
    except (CacheStatsError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Merged {len(snapshot.leaves)} stats file(s) from {cache_dir}")
    _emit(snapshot, "json" if getattr(args, "json", False) else "pretty")
    return 0


def cmd_print(args: argparse.Namespace) -> int:
    """Handle 'print' command - raw snapshot of a cache directory."""
    from ccache_stats.reader import read_directory

    try:
        config = _load_config(args)
        snapshot = read_directory(_cache_dir(args, config))
    except (CacheStatsError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _emit(snapshot, "raw")
    return 0


def cmd_leaf(args: argparse.Namespace) -> int:
    """Handle 'leaf <path>' command - show a single stats file."""
    from ccache_stats.reader import read_leaf

    try:
        leaf = read_leaf(Path(args.path))
    except FileNotFoundError:
        print(f"Error: Stats file not found: {args.path}", file=sys.stderr)
        return 1
    except (CacheStatsError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if getattr(args, "json", False):
        _emit(leaf, "json")
    elif getattr(args, "raw", False):
        _emit(leaf, "raw")
    else:
        _emit(leaf, "pretty")
    return 0


def cmd_monitor(args: argparse.Namespace) -> int:
    """Handle 'monitor' command - poll a cache directory for changes."""
    from ccache_stats.monitor import StatsMonitor, setup_file_logging

    try:
        config = _load_config(args)
        cache_dir = _cache_dir(args, config)
    except (CacheStatsError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    interval = getattr(args, "interval", None)
    if interval is None:
        interval = config.monitor.interval
    if interval <= 0:
        print(f"Error: Interval must be positive, got {interval}", file=sys.stderr)
        return 1

    if config.monitor.log_file is not None:
        setup_file_logging(config.monitor.log_file)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    monitor = StatsMonitor(cache_dir, interval=interval)
    monitor.run(count=getattr(args, "count", None))
    return 0


def cmd_config_validate(args: argparse.Namespace) -> int:
    """Handle 'config validate' command."""
    config_path = getattr(args, "config", None)
    try:
        config = Config.load(Path(config_path) if config_path else None)
    except FileNotFoundError as e:
        print(f"No configuration found: {e}", file=sys.stderr)
        return 0  # Missing config is not an error
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    print(f"Configuration valid: {config.config_path}")
    print(f"  Cache dir: {config.ccache.dir or '(not set)'}")
    print(f"  Monitor interval: {config.monitor.interval}s")
    print(f"  Monitor log file: {config.monitor.log_file or '(stderr)'}")
    return 0


def cmd_config_get(args: argparse.Namespace) -> int:
    """Handle 'config get' command."""
    try:
        config = _load_config(args)
        value = config.get_value(args.key)
    except KeyError:
        print(f"Error: Config key not found: {args.key}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error reading config: {e}", file=sys.stderr)
        return 1

    print(value)
    return 0
