"""Tests for the field registry and value formatting."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ccache_stats.fields import (
    FIELD_DATA_ORDER,
    FIELD_DISPLAY_ORDER,
    TIMESTAMP_FORMAT,
    CacheField,
    FieldFormat,
    FieldMetadata,
    Visibility,
    format_size,
    format_timestamp,
    format_value,
    metadata,
)


class TestCacheField:
    """Tests for CacheField ordinals."""

    def test_has_32_fields(self):
        """Test the enumeration is closed at 32 members."""
        assert len(CacheField) == 32

    def test_ordinals_are_stable(self):
        """Test a sample of ordinals matching ccache's stats file layout."""
        assert CacheField.NONE == 0
        assert CacheField.STDOUT == 1
        assert CacheField.TO_CACHE == 4
        assert CacheField.CACHE_HIT_CPP == 8
        assert CacheField.NUM_FILES == 11
        assert CacheField.TOTAL_SIZE == 12
        assert CacheField.CACHE_HIT_DIR == 22
        assert CacheField.NUM_CLEANUPS == 29
        assert CacheField.ZERO_TIMESTAMP == 31

    def test_metadata_property(self):
        """Test the metadata convenience property."""
        assert CacheField.TOTAL_SIZE.metadata is metadata(CacheField.TOTAL_SIZE)


class TestOrders:
    """Tests for data and display orders."""

    def test_data_order_matches_ordinals(self):
        """Test data order is ordinal order."""
        assert [int(f) for f in FIELD_DATA_ORDER] == list(range(32))

    def test_data_order_endpoints(self):
        """Test sentinel comes first and zero timestamp last in data order."""
        assert FIELD_DATA_ORDER[0] is CacheField.NONE
        assert FIELD_DATA_ORDER[31] is CacheField.ZERO_TIMESTAMP

    def test_display_order_endpoints(self):
        """Test zero timestamp comes first and sentinel last in display order."""
        assert FIELD_DISPLAY_ORDER[0] is CacheField.ZERO_TIMESTAMP
        assert FIELD_DISPLAY_ORDER[-1] is CacheField.NONE

    def test_display_order_is_permutation(self):
        """Test display order holds every field exactly once."""
        assert len(FIELD_DISPLAY_ORDER) == 32
        assert set(FIELD_DISPLAY_ORDER) == set(CacheField)
        assert FIELD_DISPLAY_ORDER != FIELD_DATA_ORDER

    def test_display_order_starts_with_hits_and_miss(self):
        """Test the curated order leads with the headline counters."""
        assert FIELD_DISPLAY_ORDER[1:4] == (
            CacheField.CACHE_HIT_DIR,
            CacheField.CACHE_HIT_CPP,
            CacheField.TO_CACHE,
        )


class TestMetadata:
    """Tests for metadata lookup."""

    @pytest.mark.parametrize("field", list(CacheField))
    def test_total_and_pure(self, field):
        """Test every field maps to one stable metadata record."""
        first = metadata(field)
        assert isinstance(first, FieldMetadata)
        assert first.field is field
        assert metadata(field) is first
        assert metadata(field) == first

    def test_ids_are_unique(self):
        """Test machine ids never collide."""
        ids = [metadata(f).id for f in CacheField]
        assert len(ids) == len(set(ids))

    def test_metadata_is_frozen(self):
        """Test metadata records cannot be mutated."""
        meta = metadata(CacheField.LINK)
        with pytest.raises(AttributeError):
            meta.message = "changed"  # type: ignore[misc]

    def test_known_records(self):
        """Test representative ids, messages and formats."""
        size = metadata(CacheField.TOTAL_SIZE)
        assert size.id == "cache_size_kibibyte"
        assert size.message == "cache size"
        assert size.format is FieldFormat.KIBIBYTES_SCALED

        zeroed = metadata(CacheField.ZERO_TIMESTAMP)
        assert zeroed.id == "stats_zeroed_timestamp"
        assert zeroed.format is FieldFormat.UNIX_TIMESTAMP

        assert metadata(CacheField.CACHE_HIT_DIR).id == "direct_cache_hit"
        assert metadata(CacheField.LINK).format is FieldFormat.PLAIN

    def test_visibility_flags(self):
        """Test always/never/no-zero flags are independent bits."""
        files = metadata(CacheField.NUM_FILES)
        assert files.always_show
        assert files.no_zero_default
        assert not files.never_show

        obsolete = metadata(CacheField.OBSOLETE_MAX_SIZE)
        assert obsolete.never_show
        assert obsolete.no_zero_default
        assert not obsolete.always_show

        link = metadata(CacheField.LINK)
        assert link.visibility == Visibility(0)
        assert not (link.always_show or link.never_show or link.no_zero_default)

    def test_never_shown_fields(self):
        """Test only the sentinel and obsolete fields are hidden."""
        hidden = {f for f in CacheField if metadata(f).never_show}
        assert hidden == {
            CacheField.NONE,
            CacheField.OBSOLETE_MAX_FILES,
            CacheField.OBSOLETE_MAX_SIZE,
        }


class TestFormatSize:
    """Tests for kibibyte scaling."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, "0 Kb"),
            (100, "100 Kb"),
            (10_000, "10000 Kb"),
            (15_000, "14.65 Mb"),
            (150_000, "146.48 Mb"),
            (1_500_000, "1464.84 Mb"),
            (15_000_000, "14.31 Gb"),
        ],
    )
    def test_fixtures(self, value, expected):
        """Test known size renderings."""
        assert format_value(CacheField.TOTAL_SIZE, value) == expected

    def test_thresholds(self):
        """Test the switch points between units."""
        assert format_size(10 * 1024 - 1) == "10239 Kb"
        assert format_size(10 * 1024) == "10.00 Mb"
        assert format_size(10 * 1024 * 1024 - 1) == "10240.00 Mb"
        assert format_size(10 * 1024 * 1024) == "10.00 Gb"

    def test_non_numeric_fallback(self):
        """Test values that are not integers fall back to a tagged string."""
        assert format_size("lots") == "lots (kb)"


class TestFormatTimestamp:
    """Tests for timestamp rendering."""

    def test_local_time(self):
        """Test timestamps render as local wall-clock time."""
        value = 1_600_000_000
        expected = (
            datetime.fromtimestamp(value, timezone.utc).astimezone().strftime(TIMESTAMP_FORMAT)
        )
        assert format_value(CacheField.ZERO_TIMESTAMP, value) == expected
        assert format_timestamp(value) == expected

    def test_out_of_range_fallback(self):
        """Test unrepresentable timestamps fall back to a tagged string."""
        value = 2**64 - 1
        assert format_value(CacheField.ZERO_TIMESTAMP, value) == f"{value} (ts)"


class TestFormatPlain:
    """Tests for plain counters."""

    def test_plain_is_decimal(self):
        """Test plain fields render their decimal value."""
        assert format_value(CacheField.CACHE_HIT_DIR, 0) == "0"
        assert format_value(CacheField.CACHE_HIT_DIR, 123456789) == "123456789"
        assert format_value(CacheField.NUM_FILES, 2**64 - 1) == str(2**64 - 1)
