"""Readers for ccache stats files and cache directories.

A ccache directory keeps one ``stats`` file at its root and one in each of
the sixteen shard subdirectories ``0`` .. ``f``. Each file holds one
decimal counter per line, ordered by field ordinal; trailing zero counters
are often omitted.

Usage:
    from ccache_stats.reader import read_directory, read_leaf

    snapshot = read_directory(Path.home() / ".ccache")
    snapshot.pretty_print()

    leaf = read_leaf(Path.home() / ".ccache" / "3" / "stats")
    print(leaf.get_field(CacheField.CACHE_HIT_DIR))
"""

from __future__ import annotations

import os
import re
import stat
from dataclasses import dataclass, field
from pathlib import Path

from ccache_stats.errors import FieldParseError, NotAFileError
from ccache_stats.fields import FIELD_DATA_ORDER, CacheField
from ccache_stats.presentation import CacheFieldCollection
from ccache_stats.values import U64_MAX, FieldValues

STATS_FILENAME = "stats"
SHARD_NAMES = "0123456789abcdef"

_COUNTER_RE = re.compile(r"\+?[0-9]+")

_O_NONBLOCK = getattr(os, "O_NONBLOCK", 0)

# Fields merged by maximum instead of sum when aggregating shards
MAX_MERGED_FIELDS = frozenset({CacheField.ZERO_TIMESTAMP})


def _parse_counter(raw: bytes, ordinal: int, path: Path) -> int:
    """Parse one stats line into a counter.

    Args:
        raw: The line as read, including any line terminator.
        ordinal: Zero-based line index.
        path: The file being read, for error reporting.

    Raises:
        FieldParseError: If the line is not an unsigned 64-bit integer.
    """
    if raw.endswith(b"\n"):
        raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FieldParseError(raw.decode("utf-8", "replace"), ordinal, path) from e

    if not _COUNTER_RE.fullmatch(text):
        raise FieldParseError(text, ordinal, path)

    value = int(text)
    if value > U64_MAX:
        raise FieldParseError(text, ordinal, path)
    return value


@dataclass
class CacheLeaf(CacheFieldCollection):
    """Counters recorded in exactly one stats file.

    Attributes:
        path: The stats file that was read.
        mtime: Modification time of the file, seconds since the epoch (UTC).
        fields: The parsed counters.
    """

    path: Path
    mtime: int = 0
    fields: FieldValues = field(default_factory=FieldValues)

    @classmethod
    def read_file(cls, path: Path | str) -> CacheLeaf:
        """Read a single stats file.

        Args:
            path: Path to the stats file.

        Returns:
            CacheLeaf holding every counter present in the file; counters
            for omitted trailing lines are zero.

        Raises:
            NotAFileError: If path is a directory or other non-regular file.
            FieldParseError: If a line is not an unsigned integer.
            OSError: On any I/O failure, including a missing file.
        """
        path = Path(path)
        # Non-blocking so a FIFO without a writer cannot stall the open.
        try:
            fd = os.open(path, os.O_RDONLY | _O_NONBLOCK)
        except IsADirectoryError as e:
            raise NotAFileError(path) from e

        # Line reads on a directory descriptor never terminate on some
        # platforms, so the file type is checked before reading.
        try:
            st = os.fstat(fd)
        except OSError:
            os.close(fd)
            raise
        if not stat.S_ISREG(st.st_mode):
            os.close(fd)
            raise NotAFileError(path)

        with os.fdopen(fd, "rb") as f:
            leaf = cls(path=path, mtime=st.st_mtime_ns // 1_000_000_000)
            for ordinal, (stat_field, raw) in enumerate(zip(FIELD_DATA_ORDER, f)):
                leaf.fields[stat_field] = _parse_counter(raw, ordinal, path)

        return leaf


@dataclass
class CacheDir(CacheFieldCollection):
    """Counters aggregated from a cache root and its shard directories.

    Attributes:
        path: The cache directory that was read.
        mtime: Latest modification time among the merged stats files.
        fields: The merged counters.
        leaves: Stats files that contributed, in merge order.
    """

    path: Path
    mtime: int = 0
    fields: FieldValues = field(default_factory=FieldValues)
    leaves: list[Path] = field(default_factory=list)

    @staticmethod
    def leaf_paths(path: Path | str) -> list[Path]:
        """List the candidate stats files of a cache directory.

        The root stats file comes first, then shards ``0`` through ``f``.
        """
        path = Path(path)
        return [path / STATS_FILENAME] + [
            path / shard / STATS_FILENAME for shard in SHARD_NAMES
        ]

    @classmethod
    def read_dir(cls, path: Path | str) -> CacheDir:
        """Read and merge every stats file of a cache directory.

        Missing stats files (or missing shard directories) contribute
        nothing. Any other failure aborts the whole read.

        Args:
            path: Path to the ccache directory.

        Returns:
            CacheDir with counters merged across all present stats files.

        Raises:
            NotAFileError: If a stats path is a directory.
            FieldParseError: If any stats file holds a malformed line.
            OSError: On I/O failures other than a missing file.
        """
        cache_dir = cls(path=Path(path))
        for leaf_path in cls.leaf_paths(path):
            try:
                leaf = CacheLeaf.read_file(leaf_path)
            except FileNotFoundError:
                continue
            cache_dir.merge(leaf)
        return cache_dir

    def merge(self, leaf: CacheLeaf) -> None:
        """Fold one leaf into this snapshot.

        The zero timestamp keeps the most recent reset; every other counter
        is summed. The snapshot mtime becomes the latest of the two.
        """
        for stat_field, value in leaf.fields:
            if stat_field in MAX_MERGED_FIELDS:
                self.fields[stat_field] = max(self.fields[stat_field], value)
            else:
                self.fields[stat_field] = self.fields[stat_field] + value
        self.mtime = max(self.mtime, leaf.mtime)
        self.leaves.append(leaf.path)


def read_leaf(path: Path | str) -> CacheLeaf:
    """Convenience function to read one stats file."""
    return CacheLeaf.read_file(path)


def read_directory(path: Path | str) -> CacheDir:
    """Convenience function to read and merge a whole cache directory."""
    return CacheDir.read_dir(path)
