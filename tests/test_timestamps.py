"""
tests/test_timestamps.py
Timestamp parsing across every on-disk format, display and period labels.
Local time is pinned to UTC by the autouse fixture in conftest.py.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import set_local_timezone
from flowreader.errors import TimestampParseError
from flowreader.timestamps import (
    day_bound_text,
    format_timestamp,
    parse_date_bound,
    parse_timestamp,
    period_label,
    try_parse_timestamp,
)

UTC = timezone.utc


class TestParseTimestamp:

    def test_iso_with_fractional_seconds(self):
        assert parse_timestamp('2025-06-03T19:03:31.586Z') == \
            datetime(2025, 6, 3, 19, 3, 31, 586000, tzinfo=UTC)

    def test_iso_without_fractional_seconds(self):
        assert parse_timestamp('2025-06-03T19:03:31Z') == \
            datetime(2025, 6, 3, 19, 3, 31, tzinfo=UTC)

    def test_iso_with_offset(self):
        parsed = parse_timestamp('2025-06-03T21:03:31+02:00')
        assert parsed == datetime(2025, 6, 3, 19, 3, 31, tzinfo=UTC)

    def test_legacy_with_milliseconds_and_offset(self):
        assert parse_timestamp('2025-06-03 19:03:31.586 +00:00') == \
            datetime(2025, 6, 3, 19, 3, 31, 586000, tzinfo=UTC)

    def test_legacy_without_milliseconds(self):
        assert parse_timestamp('2025-06-03 14:03:31 -05:00') == \
            datetime(2025, 6, 3, 19, 3, 31, tzinfo=UTC)

    def test_naive_is_local_time(self, monkeypatch):
        set_local_timezone(monkeypatch, 'EST+05')
        parsed = parse_timestamp('2025-06-03 19:03:31')
        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timedelta(hours=-5)
        assert parsed.hour == 19

    def test_results_are_comparable(self):
        a = parse_timestamp('2025-06-03T19:03:31.586Z')
        b = parse_timestamp('2025-06-03 19:03:30 +00:00')
        c = parse_timestamp('2025-06-03 19:03:32')
        assert b < a < c

    def test_unrecognized_raises(self):
        with pytest.raises(TimestampParseError) as exc:
            parse_timestamp('03/06/2025 7pm')
        assert exc.value.raw == '03/06/2025 7pm'
        assert isinstance(exc.value, ValueError)

    def test_try_parse_returns_none(self):
        assert try_parse_timestamp('not-a-date') is None
        assert try_parse_timestamp(None) is None


class TestFormatTimestamp:

    def test_medium_style_in_local_time(self):
        assert format_timestamp('2025-06-03T19:03:31.586Z') == 'Jun 3, 2025 at 7:03:31 PM'

    def test_midnight_hour_is_twelve(self):
        assert format_timestamp('2025-01-05T00:05:09Z') == 'Jan 5, 2025 at 12:05:09 AM'

    def test_converts_to_local_zone(self, monkeypatch):
        set_local_timezone(monkeypatch, 'EST+05')
        assert format_timestamp('2025-06-03T02:00:00Z') == 'Jun 2, 2025 at 9:00:00 PM'

    def test_unparseable_returned_unchanged(self):
        assert format_timestamp('yesterday-ish') == 'yesterday-ish'


class TestPeriodLabel:

    instant = datetime(2025, 6, 3, 19, 3, 31, tzinfo=UTC)

    def test_day(self):
        assert period_label(self.instant, 'day') == '2025-06-03'

    def test_month(self):
        assert period_label(self.instant, 'month') == '2025-06'

    def test_week_is_iso_week(self):
        assert period_label(self.instant, 'week') == '2025-W23'

    def test_week_uses_iso_year_at_year_boundary(self):
        assert period_label(datetime(2024, 12, 30, 12, tzinfo=UTC), 'week') == '2025-W01'

    def test_unknown_granularity(self):
        with pytest.raises(ValueError):
            period_label(self.instant, 'year')


class TestDateBounds:

    def test_start_of_day(self):
        assert parse_date_bound('2025-06-03') == datetime(2025, 6, 3, tzinfo=UTC)

    def test_end_of_day_extends_to_last_second(self):
        bound = parse_date_bound('2025-06-03', end_of_day=True)
        assert bound >= datetime(2025, 6, 3, 23, 59, 59, tzinfo=UTC)
        assert bound < datetime(2025, 6, 4, tzinfo=UTC)

    def test_accepts_date_objects(self):
        assert parse_date_bound(date(2025, 6, 3)) == datetime(2025, 6, 3, tzinfo=UTC)

    def test_malformed_date(self):
        with pytest.raises(ValueError):
            parse_date_bound('06/03/2025')

    def test_raw_text_bounds(self):
        assert day_bound_text('2025-06-03') == '2025-06-03'
        assert day_bound_text('2025-06-03', end_of_day=True) == '2025-06-03T23:59:59'
