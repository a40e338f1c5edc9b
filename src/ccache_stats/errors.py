"""Exception types raised while reading ccache statistics.

Plain ``OSError`` instances (permission denied, missing files, ...) are
never wrapped; they reach the caller unchanged.
"""

from __future__ import annotations

from pathlib import Path

from ccache_stats.fields import CacheField


class CacheStatsError(Exception):
    """Base class for ccache_stats errors."""


class NotAFileError(CacheStatsError):
    """A stats path resolved to something other than a regular file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Not a regular file: {self.path}")


class FieldParseError(CacheStatsError, ValueError):
    """A line in a stats file is not an unsigned 64-bit integer.

    Attributes:
        text: The offending line, with its line terminator removed.
        ordinal: Zero-based line index, equal to the field's ordinal.
        field: The field the line was meant to hold.
        path: The stats file being read.
    """

    def __init__(self, text: str, ordinal: int, path: Path | str):
        self.text = text
        self.ordinal = ordinal
        self.field = CacheField(ordinal)
        self.path = Path(path)
        super().__init__(
            f"Invalid value {text!r} for {self.field.name} "
            f"(line {ordinal}) in {self.path}"
        )


class ConfigError(CacheStatsError):
    """Configuration could not be resolved."""
