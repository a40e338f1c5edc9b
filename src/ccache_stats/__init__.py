"""ccache_stats - Read ccache statistics without running ccache.

Parses the counter files ccache keeps in its cache directory and exposes
them as typed, queryable snapshots with ccache-style raw and pretty output.
"""

__version__ = "0.1.0"

from ccache_stats.errors import CacheStatsError, ConfigError, FieldParseError, NotAFileError
from ccache_stats.fields import (
    FIELD_DATA_ORDER,
    FIELD_DISPLAY_ORDER,
    CacheField,
    FieldFormat,
    FieldMetadata,
    Visibility,
    format_value,
    metadata,
)
from ccache_stats.presentation import CacheFieldCollection
from ccache_stats.reader import CacheDir, CacheLeaf, read_directory, read_leaf
from ccache_stats.values import FieldValues

__all__ = [
    # Registry
    "CacheField",
    "FieldFormat",
    "FieldMetadata",
    "Visibility",
    "FIELD_DATA_ORDER",
    "FIELD_DISPLAY_ORDER",
    "metadata",
    "format_value",
    # Reading
    "FieldValues",
    "CacheFieldCollection",
    "CacheLeaf",
    "CacheDir",
    "read_leaf",
    "read_directory",
    # Errors
    "CacheStatsError",
    "ConfigError",
    "FieldParseError",
    "NotAFileError",
]
