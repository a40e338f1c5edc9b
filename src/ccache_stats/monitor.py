"""Polling monitor for ccache statistics.

Rereads a cache directory on a fixed interval and reports every counter
that changed since the previous poll, together with its rate of change.
"""

from __future__ import annotations

import logging
import signal
import sys
import time
from dataclasses import dataclass
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

from ccache_stats.config import DEFAULT_MONITOR_INTERVAL
from ccache_stats.errors import CacheStatsError
from ccache_stats.fields import FIELD_DATA_ORDER, CacheField
from ccache_stats.reader import CacheDir

logger = logging.getLogger("ccache_stats.monitor")


@dataclass(frozen=True)
class FieldChange:
    """A counter that differs between two snapshots."""

    field: CacheField
    old: int
    new: int

    @property
    def diff(self) -> int:
        return self.new - self.old

    def rate(self, elapsed: float) -> float:
        """Change per second over the given elapsed seconds."""
        if elapsed <= 0:
            return 0.0
        return self.diff / elapsed


def diff_snapshots(old: CacheDir, new: CacheDir) -> list[FieldChange]:
    """List the counters that changed between two snapshots, in data order."""
    changes = []
    for stat_field in FIELD_DATA_ORDER:
        before = old.get_field(stat_field)
        after = new.get_field(stat_field)
        if before != after:
            changes.append(FieldChange(stat_field, before, after))
    return changes


def format_change(change: FieldChange, elapsed: float) -> str:
    """Format a change line, e.g. ``TO_CACHE 10 -> 14 ( ~4 @ 0.800/sec )``."""
    return (
        f"{change.field.name} {change.old} -> {change.new} "
        f"( ~{change.diff} @ {change.rate(elapsed):.3f}/sec )"
    )


def setup_file_logging(log_file: Path) -> None:
    """Attach a rotating file handler to the monitor logger."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
    handler.setFormatter(logging.Formatter(
        "[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    ))
    logger.setLevel(logging.INFO)
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        logger.addHandler(handler)


class StatsMonitor:
    """Reports counter changes in a ccache directory as they happen."""

    def __init__(
        self,
        cache_dir: Path,
        interval: float = DEFAULT_MONITOR_INTERVAL,
        out: TextIO | None = None,
    ):
        """Initialize the monitor.

        Args:
            cache_dir: The ccache directory to watch.
            interval: Seconds between polls.
            out: Stream for change reports. Defaults to stdout.
        """
        self.cache_dir = Path(cache_dir)
        self.interval = interval
        self.out = out if out is not None else sys.stdout
        self.snapshot: CacheDir | None = None
        self._running = False

    def poll(self, elapsed: float) -> list[FieldChange]:
        """Reread the cache directory and report what changed.

        Args:
            elapsed: Seconds since the previous poll, used for rates.

        Returns:
            The changes written, empty on the first poll.

        Raises:
            CacheStatsError, OSError: If the directory cannot be read.
        """
        current = CacheDir.read_dir(self.cache_dir)
        previous = self.snapshot
        self.snapshot = current
        if previous is None:
            return []

        changes = diff_snapshots(previous, current)
        self.out.write(f"== {datetime.now().astimezone().isoformat(timespec='seconds')} ==\n")
        for change in changes:
            self.out.write(format_change(change, elapsed) + "\n")
        self.out.flush()
        return changes

    def run(self, count: int | None = None) -> int:
        """Poll until interrupted or until ``count`` polls have run.

        The baseline read is not counted. Read errors are logged and the
        previous snapshot is kept.

        Returns:
            Number of polls that completed successfully.
        """
        self._running = True
        signal.signal(signal.SIGTERM, self._stop)
        signal.signal(signal.SIGINT, self._stop)

        logger.info(f"Monitoring {self.cache_dir} every {self.interval}s")
        try:
            self.poll(0.0)
        except (CacheStatsError, OSError) as e:
            logger.error(f"Initial read of {self.cache_dir} failed: {e}")

        attempts = 0
        completed = 0
        last = time.monotonic()
        while self._running and (count is None or attempts < count):
            time.sleep(self.interval)
            if not self._running:
                break
            attempts += 1
            now = time.monotonic()
            try:
                self.poll(now - last)
                completed += 1
            except (CacheStatsError, OSError) as e:
                logger.error(f"Error reading {self.cache_dir}: {e}")
            last = now

        logger.info("Monitor stopped")
        return completed

    def _stop(self, signum, frame):
        """Signal handler to stop the loop."""
        self._running = False
