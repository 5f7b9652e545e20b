"""
Tests for shared helpers
"""

from datetime import UTC, datetime, timedelta, timezone

from user_settings.utils import format_timestamp


def test_format_timestamp_uses_millisecond_utc_with_z_suffix():
    value = datetime(2024, 2, 29, 23, 59, 59, 987654, tzinfo=UTC)

    assert format_timestamp(value) == "2024-02-29T23:59:59.987Z"


def test_format_timestamp_converts_other_offsets_to_utc():
    value = datetime(2024, 1, 1, 2, 0, 0, tzinfo=timezone(timedelta(hours=2)))

    assert format_timestamp(value) == "2024-01-01T00:00:00.000Z"


def test_format_timestamp_treats_naive_values_as_utc():
    assert format_timestamp(datetime(2024, 1, 1, 12, 30)) == "2024-01-01T12:30:00.000Z"
