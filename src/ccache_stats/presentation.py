"""Text renderings shared by stats leaves and directory snapshots.

Two output forms mirror ccache's own:

- raw (``--print-stats``): tab-separated ``<id>\\t<value>`` lines meant for
  scripts, every field except the never-shown ones.
- pretty (``--show-stats``): aligned ``<message>  <value>`` lines for
  humans, additionally hiding zero counters unless the field is always
  shown.

Both walk fields in display order.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from typing import Any, TextIO

from ccache_stats.fields import (
    FIELD_DISPLAY_ORDER,
    CacheField,
    format_timestamp,
    format_value,
    metadata,
)
from ccache_stats.values import FieldValues

RAW_HEADER_ID = "stats_updated_timestamp"
PRETTY_HEADER_LABEL = "stats updated"
LABEL_WIDTH = 30
VALUE_WIDTH = 16


def format_pretty_line(label: str, value: str) -> str:
    """Format one aligned pretty-output line (no trailing newline)."""
    return f"{label:<{LABEL_WIDTH}.{LABEL_WIDTH}}  {value:>{VALUE_WIDTH}}"


class CacheFieldCollection:
    """Read access and rendering over a FieldValues store plus an mtime.

    Subclasses set ``fields`` (FieldValues) and ``mtime`` (seconds since
    the epoch, UTC).
    """

    fields: FieldValues
    mtime: int

    def get_field(self, field: CacheField) -> int:
        """Return the counter for a field."""
        return self.fields[field]

    def iter_fields(self) -> Iterator[tuple[CacheField, int]]:
        """Yield (field, value) pairs in display order."""
        for field in FIELD_DISPLAY_ORDER:
            yield field, self.fields[field]

    def __iter__(self) -> Iterator[tuple[CacheField, int]]:
        return self.iter_fields()

    def write_raw(self, sink: TextIO) -> None:
        """Write the machine-parsable form to a text stream."""
        sink.write(f"{RAW_HEADER_ID}\t{self.mtime}\n")
        for field, value in self.iter_fields():
            meta = metadata(field)
            if meta.never_show:
                continue
            sink.write(f"{meta.id}\t{value}\n")

    def write_pretty(self, sink: TextIO) -> None:
        """Write the human-readable form to a text stream."""
        sink.write(format_pretty_line(PRETTY_HEADER_LABEL, format_timestamp(self.mtime)) + "\n")
        for field, value in self.iter_fields():
            meta = metadata(field)
            if meta.never_show:
                continue
            if value == 0 and not meta.always_show:
                continue
            sink.write(format_pretty_line(meta.message, format_value(field, value)) + "\n")

    def raw_print(self) -> None:
        self.write_raw(sys.stdout)

    def pretty_print(self) -> None:
        self.write_pretty(sys.stdout)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {RAW_HEADER_ID: self.mtime}
        for field, value in self.iter_fields():
            meta = metadata(field)
            if not meta.never_show:
                data[meta.id] = value
        return data
