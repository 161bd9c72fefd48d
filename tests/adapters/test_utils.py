"""Tests for SQLite adapter helpers."""

from datetime import UTC, datetime, timedelta, timezone

from todolist.adapters.sqlite.utils import (
    contains_casefold,
    format_timestamp,
    generate_uuid,
    parse_timestamp,
)


def test_generate_uuid_is_unique():
    assert generate_uuid() != generate_uuid()
    assert len(generate_uuid()) == 36


def test_format_timestamp_is_fixed_width_utc():
    whole = format_timestamp(datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC))
    fractional = format_timestamp(datetime(2024, 1, 1, 12, 0, 0, 5, tzinfo=UTC))
    assert whole == "2024-01-01T12:00:00.000000+00:00"
    assert len(whole) == len(fractional)
    assert whole < fractional


def test_format_timestamp_converts_offsets_to_utc():
    local = datetime(2024, 1, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(local) == "2024-01-01T12:00:00.000000+00:00"


def test_format_timestamp_treats_naive_as_utc():
    assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000000+00:00"


def test_text_order_matches_time_order():
    base = datetime(2024, 1, 1, tzinfo=UTC)
    stamps = [base + timedelta(microseconds=n) for n in (1, 999_999, 1_000_000)]
    assert sorted(format_timestamp(s) for s in stamps) == [format_timestamp(s) for s in stamps]


def test_parse_timestamp():
    assert parse_timestamp(None) is None
    parsed = parse_timestamp("2024-01-01T12:00:00.000000+00:00")
    assert parsed == datetime(2024, 1, 1, 12, tzinfo=UTC)
    assert parse_timestamp("2024-01-01T12:00:00Z") == parsed
    assert parse_timestamp("2024-01-01T12:00:00").tzinfo is not None


def test_contains_casefold():
    assert contains_casefold("Buy MILK", "milk") == 1
    assert contains_casefold("Straße", "STRASSE") == 1
    assert contains_casefold("Купить молоко", "МОЛОКО") == 1
    assert contains_casefold("Buy milk", "bread") == 0
    assert contains_casefold(None, "milk") == 0
