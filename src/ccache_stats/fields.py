"""Field registry for ccache statistics files.

Every ccache ``stats`` file stores one decimal counter per line. The line
number is the counter's ordinal, which never changes between ccache
releases, so ``CacheField`` values double as line indices. Each field also
carries display metadata (a machine id, a human message, a formatting rule
and visibility flags) looked up through ``metadata()``.

Usage:
    from ccache_stats.fields import CacheField, format_value, metadata

    meta = metadata(CacheField.TOTAL_SIZE)
    print(meta.message, format_value(CacheField.TOTAL_SIZE, 15_000))
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, IntEnum, IntFlag

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"

# Size scaling thresholds for KIBIBYTES_SCALED values
KIBIBYTES_PER_MEBIBYTE = 1024
KIBIBYTES_PER_GIBIBYTE = 1024 * 1024
SCALE_THRESHOLD = 10


class CacheField(IntEnum):
    """Statistics counters, valued by their line ordinal in a stats file."""

    NONE = 0
    STDOUT = 1
    STATUS = 2
    ERROR = 3
    TO_CACHE = 4
    PREPROCESSOR = 5
    COMPILER = 6
    MISSING = 7
    CACHE_HIT_CPP = 8
    ARGS = 9
    LINK = 10
    NUM_FILES = 11
    TOTAL_SIZE = 12
    OBSOLETE_MAX_FILES = 13
    OBSOLETE_MAX_SIZE = 14
    SOURCE_LANG = 15
    BAD_OUTPUT_FILE = 16
    NO_INPUT = 17
    MULTIPLE = 18
    CONF_TEST = 19
    UNSUPPORTED_OPTION = 20
    OUT_STDOUT = 21
    CACHE_HIT_DIR = 22
    NO_OUTPUT = 23
    EMPTY_OUTPUT = 24
    BAD_EXTRA_FILE = 25
    COMP_CHECK = 26
    CANT_USE_PCH = 27
    PREPROCESSING = 28
    NUM_CLEANUPS = 29
    UNSUPPORTED_DIRECTIVE = 30
    ZERO_TIMESTAMP = 31

    @property
    def metadata(self) -> FieldMetadata:
        return metadata(self)


class FieldFormat(Enum):
    """How a field's raw counter is rendered for humans."""

    PLAIN = "plain"
    UNIX_TIMESTAMP = "unix_timestamp"
    KIBIBYTES_SCALED = "kibibytes_scaled"


class Visibility(IntFlag):
    """Independent display flags for a field."""

    NO_ZERO_DEFAULT = 1
    ALWAYS_SHOW = 2
    NEVER_SHOW = 4


@dataclass(frozen=True)
class FieldMetadata:
    """Display metadata for a single field.

    Attributes:
        field: The field this metadata describes.
        id: Stable machine-readable name (used by raw output).
        message: Human-readable label (used by pretty output).
        format: Rendering rule for the field's value.
        visibility: Display flags.
    """

    field: CacheField
    id: str
    message: str
    format: FieldFormat = FieldFormat.PLAIN
    visibility: Visibility = Visibility(0)

    @property
    def always_show(self) -> bool:
        return bool(self.visibility & Visibility.ALWAYS_SHOW)

    @property
    def never_show(self) -> bool:
        return bool(self.visibility & Visibility.NEVER_SHOW)

    @property
    def no_zero_default(self) -> bool:
        # Carried for compatibility; nothing in presentation reads it.
        return bool(self.visibility & Visibility.NO_ZERO_DEFAULT)


_ALWAYS = Visibility.ALWAYS_SHOW
_NOZERO_ALWAYS = Visibility.NO_ZERO_DEFAULT | Visibility.ALWAYS_SHOW
_NOZERO_NEVER = Visibility.NO_ZERO_DEFAULT | Visibility.NEVER_SHOW

# Listed in display order; FIELD_DISPLAY_ORDER is derived from this listing
# once at import time.
_DISPLAY_TABLE: tuple[FieldMetadata, ...] = (
    FieldMetadata(CacheField.ZERO_TIMESTAMP, "stats_zeroed_timestamp", "stats zeroed",
                  FieldFormat.UNIX_TIMESTAMP, _ALWAYS),
    FieldMetadata(CacheField.CACHE_HIT_DIR, "direct_cache_hit", "cache hit (direct)",
                  visibility=_ALWAYS),
    FieldMetadata(CacheField.CACHE_HIT_CPP, "preprocessed_cache_hit", "cache hit (preprocessed)",
                  visibility=_ALWAYS),
    FieldMetadata(CacheField.TO_CACHE, "cache_miss", "cache miss", visibility=_ALWAYS),
    FieldMetadata(CacheField.LINK, "called_for_link", "called for link"),
    FieldMetadata(CacheField.PREPROCESSING, "called_for_preprocessing", "called for preprocessing"),
    FieldMetadata(CacheField.MULTIPLE, "multiple_source_files", "multiple source files"),
    FieldMetadata(CacheField.STDOUT, "compiler_produced_stdout", "compiler produced stdout"),
    FieldMetadata(CacheField.NO_OUTPUT, "compiler_produced_no_output", "compiler produced no output"),
    FieldMetadata(CacheField.EMPTY_OUTPUT, "compiler_produced_empty_output",
                  "compiler produced empty output"),
    FieldMetadata(CacheField.STATUS, "compile_failed", "compile failed"),
    FieldMetadata(CacheField.ERROR, "internal_error", "ccache internal error"),
    FieldMetadata(CacheField.PREPROCESSOR, "preprocessor_error", "preprocessor error"),
    FieldMetadata(CacheField.CANT_USE_PCH, "could_not_use_precompiled_header",
                  "can't use precompiled header"),
    FieldMetadata(CacheField.COMPILER, "could_not_find_compiler", "couldn't find the compiler"),
    FieldMetadata(CacheField.MISSING, "missing_cache_file", "cache file missing"),
    FieldMetadata(CacheField.ARGS, "bad_compiler_arguments", "bad compiler arguments"),
    FieldMetadata(CacheField.SOURCE_LANG, "unsupported_source_language", "unsupported source language"),
    FieldMetadata(CacheField.COMP_CHECK, "compiler_check_failed", "compiler check failed"),
    FieldMetadata(CacheField.CONF_TEST, "autoconf_test", "autoconf compile/link"),
    FieldMetadata(CacheField.UNSUPPORTED_OPTION, "unsupported_compiler_option",
                  "unsupported compiler option"),
    FieldMetadata(CacheField.UNSUPPORTED_DIRECTIVE, "unsupported_code_directive",
                  "unsupported code directive"),
    FieldMetadata(CacheField.OUT_STDOUT, "output_to_stdout", "output to stdout"),
    FieldMetadata(CacheField.BAD_OUTPUT_FILE, "bad_output_file", "could not write to output file"),
    FieldMetadata(CacheField.NO_INPUT, "no_input_file", "no input file"),
    FieldMetadata(CacheField.BAD_EXTRA_FILE, "error_hashing_extra_file", "error hashing extra file"),
    FieldMetadata(CacheField.NUM_CLEANUPS, "cleanups_performed", "cleanups performed",
                  visibility=_ALWAYS),
    FieldMetadata(CacheField.NUM_FILES, "files_in_cache", "files in cache",
                  visibility=_NOZERO_ALWAYS),
    FieldMetadata(CacheField.TOTAL_SIZE, "cache_size_kibibyte", "cache size",
                  FieldFormat.KIBIBYTES_SCALED, _NOZERO_ALWAYS),
    FieldMetadata(CacheField.OBSOLETE_MAX_FILES, "obsolete_max_files", "OBSOLETE",
                  visibility=_NOZERO_NEVER),
    FieldMetadata(CacheField.OBSOLETE_MAX_SIZE, "obsolete_max_size", "OBSOLETE",
                  visibility=_NOZERO_NEVER),
    FieldMetadata(CacheField.NONE, "none", "none", visibility=Visibility.NEVER_SHOW),
)

# Order in which fields appear in a stats file (ordinal == line index)
FIELD_DATA_ORDER: tuple[CacheField, ...] = tuple(CacheField)

# Curated order for human and machine output
FIELD_DISPLAY_ORDER: tuple[CacheField, ...] = tuple(m.field for m in _DISPLAY_TABLE)

# Dense lookup table indexed by ordinal
_METADATA: tuple[FieldMetadata, ...] = tuple(
    sorted(_DISPLAY_TABLE, key=lambda m: m.field.value)
)

if [m.field for m in _METADATA] != list(FIELD_DATA_ORDER):
    raise RuntimeError("field metadata table must cover every CacheField exactly once")


def metadata(field: CacheField) -> FieldMetadata:
    """Return the metadata record for a field."""
    return _METADATA[field]


def format_timestamp(value: int) -> str:
    """Render seconds since the epoch as local wall-clock time.

    Values that cannot be represented as a timestamp on this platform fall
    back to ``"<value> (ts)"``.
    """
    try:
        moment = datetime.fromtimestamp(value, timezone.utc).astimezone()
        return moment.strftime(TIMESTAMP_FORMAT)
    except (OverflowError, OSError, ValueError, TypeError):
        return f"{value} (ts)"


def format_size(value: int) -> str:
    """Render a kibibyte count scaled to Kb, Mb or Gb."""
    try:
        kib = int(value)
    except (TypeError, ValueError):
        return f"{value} (kb)"

    if kib < SCALE_THRESHOLD * KIBIBYTES_PER_MEBIBYTE:
        return f"{kib} Kb"
    elif kib < SCALE_THRESHOLD * KIBIBYTES_PER_GIBIBYTE:
        return f"{kib / KIBIBYTES_PER_MEBIBYTE:.2f} Mb"
    else:
        return f"{kib / KIBIBYTES_PER_GIBIBYTE:.2f} Gb"


def format_value(field: CacheField, value: int) -> str:
    """Format a counter according to the field's format rule.

    Args:
        field: The field the value belongs to.
        value: The raw counter value.

    Returns:
        The human-readable rendering of the value.
    """
    fmt = metadata(field).format
    if fmt is FieldFormat.UNIX_TIMESTAMP:
        return format_timestamp(value)
    elif fmt is FieldFormat.KIBIBYTES_SCALED:
        return format_size(value)
    return str(value)
