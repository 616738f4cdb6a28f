"""
flowreader/timestamps.py
Timestamp parsing for the History table.

The timestamp column is not fixed-format. Rows written by different app
versions use ISO-8601 (with or without fractional seconds) or the legacy
"2025-06-03 19:03:31.586 +00:00" layout, and very old rows carry no offset
at all. Formats are tried in order; the first that parses wins.

Display and period grouping always happen in the local timezone.
"""

import logging
from datetime import date, datetime, time
from typing import Optional, Union

from flowreader.errors import TimestampParseError

logger = logging.getLogger(__name__)

# Tried in order. Naive format must stay last.
TIMESTAMP_FORMATS = (
    '%Y-%m-%dT%H:%M:%S.%f%z',   # ISO-8601, fractional seconds
    '%Y-%m-%dT%H:%M:%S%z',      # ISO-8601
    '%Y-%m-%d %H:%M:%S.%f %z',  # legacy, with offset
    '%Y-%m-%d %H:%M:%S %z',     # legacy, no milliseconds
    '%Y-%m-%d %H:%M:%S',        # naive, local time
)

PERIOD_GRANULARITIES = ('day', 'week', 'month')

# Fixed English names, independent of the process locale
_MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
           'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def parse_timestamp(raw: str) -> datetime:
    """
    Parse a raw History timestamp into a timezone-aware datetime.
    Naive values are interpreted as local time.
    Raises TimestampParseError if no format matches.
    """
    if raw is None:
        raise TimestampParseError(raw)
    text = raw.strip()
    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.astimezone()
        return parsed
    raise TimestampParseError(raw)


def try_parse_timestamp(raw: str) -> Optional[datetime]:
    """parse_timestamp, returning None instead of raising."""
    try:
        return parse_timestamp(raw)
    except TimestampParseError:
        logger.debug(f"Unparseable timestamp: {raw!r}")
        return None


def format_timestamp(raw: str) -> str:
    """
    Medium date/time in local time, e.g. "Jun 3, 2025 at 7:03:31 PM".
    Returns raw unchanged if it cannot be parsed.
    """
    parsed = try_parse_timestamp(raw)
    if parsed is None:
        return raw
    return format_instant(parsed)


def format_instant(instant: datetime) -> str:
    local = instant.astimezone()
    hour  = local.hour % 12 or 12
    ampm  = 'AM' if local.hour < 12 else 'PM'
    return (
        f"{_MONTHS[local.month - 1]} {local.day}, {local.year} at "
        f"{hour}:{local.minute:02d}:{local.second:02d} {ampm}"
    )


def period_label(instant: datetime, group_by: str) -> str:
    """
    Bucket label for activity grouping:
      day   → 2025-06-03
      week  → 2025-W23   (ISO week and ISO week-year)
      month → 2025-06
    """
    local = instant.astimezone()
    if group_by == 'day':
        return local.strftime('%Y-%m-%d')
    if group_by == 'week':
        iso_year, iso_week, _ = local.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if group_by == 'month':
        return local.strftime('%Y-%m')
    raise ValueError(
        f"Unknown period granularity: {group_by!r} "
        f"(expected one of {', '.join(PERIOD_GRANULARITIES)})"
    )


def parse_date_bound(value: Union[str, date], end_of_day: bool = False) -> datetime:
    """
    Convert a YYYY-MM-DD range bound to a local, timezone-aware instant.
    Start bounds are 00:00:00; end bounds are extended to 23:59:59.999999
    so the whole end day is included.
    """
    if isinstance(value, datetime):
        day = value.date()
    elif isinstance(value, date):
        day = value
    else:
        try:
            day = datetime.strptime(value.strip(), '%Y-%m-%d').date()
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None

    bound = datetime.combine(day, time.max if end_of_day else time.min)
    return bound.astimezone()


def day_bound_text(value: Union[str, date], end_of_day: bool = False) -> str:
    """
    Raw-string form of a range bound, for rows whose timestamp cannot
    be parsed: "2025-06-03" or "2025-06-03T23:59:59".
    """
    day = parse_date_bound(value, end_of_day).date()
    return f"{day.isoformat()}T23:59:59" if end_of_day else day.isoformat()

