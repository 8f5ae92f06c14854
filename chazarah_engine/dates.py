"""
Civil Date Helpers

All timestamps are local civil time with no timezone conversion.
Quarter boundaries and query bounds are rendered as "YYYY-MM-DD HH:MM:SS".
"""

from datetime import date, datetime, time
from decimal import Decimal

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

MS_PER_MINUTE = 60000
DAYS_PER_WEEK = Decimal("7")

_ACCEPTED_FORMATS = (
    TIMESTAMP_FORMAT,
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M",
    DATE_FORMAT,
)


def parse_timestamp(value) -> datetime | None:
    """
    Parse a civil timestamp.

    Accepts datetime/date objects or strings in the formats the data store
    produces. Returns None for anything that cannot be parsed.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    # Drop a trailing UTC designator or offset; the time is taken as civil time
    if text.endswith("Z"):
        text = text[:-1]
    elif len(text) > 19 and text[-6] in "+-" and text[-3] == ":":
        text = text[:-6]

    for fmt in _ACCEPTED_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_date(value) -> date | None:
    """Parse a date (or the date part of a timestamp). None if unparseable."""
    parsed = parse_timestamp(value)
    return parsed.date() if parsed else None


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def end_of_day(day: date) -> datetime:
    """23:59:59 on the given day, so a date-only end bound covers the whole day."""
    return datetime.combine(day, time(23, 59, 59))


def inclusive_day_count(start: date, end: date) -> int:
    """Whole calendar days from start to end, counting both ends."""
    return (end - start).days + 1


def weeks_between(start: date, end: date) -> Decimal:
    """
    Fractional number of weeks between two dates (inclusive).

    Returns 0 when end is before start.
    """
    if end < start:
        return Decimal("0")
    return Decimal(inclusive_day_count(start, end)) / DAYS_PER_WEEK


def ms_to_minutes(duration_ms: int) -> int:
    """Floor milliseconds to whole minutes."""
    return duration_ms // MS_PER_MINUTE


# =============================================================================
# CLOCKS
# =============================================================================


class SystemClock:
    """Reads today's civil date from the system clock."""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Always reports the same date. Used by tests and by request payloads."""

    def __init__(self, today: date):
        self._today = today

    def today(self) -> date:
        return self._today
