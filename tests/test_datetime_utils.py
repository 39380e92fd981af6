from datetime import datetime, timedelta, timezone

from utils.datetime_utils import (
    UTC,
    ensure_utc,
    parse_rfc3339,
    whole_days_between,
)


def test_parse_rfc3339_zulu_and_offsets():
    assert parse_rfc3339("2024-03-05T10:00:00Z") == datetime(2024, 3, 5, 10, tzinfo=UTC)
    assert parse_rfc3339("2024-03-05T10:00:00.5Z") == datetime(2024, 3, 5, 10, 0, 0, 500000, tzinfo=UTC)
    assert parse_rfc3339("2024-03-05T12:00:00+02:00") == datetime(2024, 3, 5, 10, tzinfo=UTC)
    assert parse_rfc3339("2024-03-05T05:00:00.000-05:00") == datetime(2024, 3, 5, 10, tzinfo=UTC)


def test_parse_rfc3339_fraction_without_offset_is_utc():
    assert parse_rfc3339("2024-03-05T10:00:00.123") == datetime(2024, 3, 5, 10, 0, 0, 123000, tzinfo=UTC)


def test_parse_rfc3339_rejects_garbage():
    assert parse_rfc3339(None) is None
    assert parse_rfc3339("   ") is None
    assert parse_rfc3339("not-a-date") is None


def test_ensure_utc_naive_and_aware():
    naive = datetime(2024, 1, 1, 8)
    assert ensure_utc(naive).tzinfo is UTC
    aware = datetime(2024, 1, 1, 8, tzinfo=timezone(timedelta(hours=3)))
    assert ensure_utc(aware) == datetime(2024, 1, 1, 5, tzinfo=UTC)


def test_whole_days_between_floors():
    start = datetime(2024, 1, 1, 12, tzinfo=UTC)
    assert whole_days_between(start, start) == 0
    assert whole_days_between(start, start + timedelta(days=1, hours=23)) == 1
    assert whole_days_between(start, start + timedelta(days=2)) == 2
    assert whole_days_between(start, start - timedelta(hours=1)) == -1
    assert whole_days_between(start, start - timedelta(days=3)) == -3
