"""Date parsing and calendar helpers."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from dateutil import parser as dateutil_parser


def parse_timestamp(value: str | date | None) -> datetime | None:
    """Parse a record timestamp into a naive, process-local datetime.

    Timezone-aware values are converted to local time before the tzinfo is
    dropped, so calendar arithmetic happens on the dates the process sees.

    Args:
        value: ISO 8601 or free-form date string (US month-first), date or datetime

    Returns:
        Parsed datetime, or None if the value is empty or unparseable
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = dateutil_parser.parse(str(value).strip())
        except (ValueError, OverflowError):
            return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def days_until_date(value: str | date | None, today: date | None = None) -> int | None:
    """Count whole calendar days from today until the given date.

    Both ends are truncated to midnight, so tomorrow is 1, today is 0 and
    yesterday is -1 regardless of the time of day.

    Args:
        value: Target date in any format accepted by ``parse_timestamp``
        today: Reference date (defaults to the process-local current date)

    Returns:
        Signed day count, or None when there is no usable date
    """
    target = parse_timestamp(value)
    if target is None:
        return None
    reference = today or date.today()
    return (target.date() - reference).days


def is_business_hours(
    now: datetime | None = None,
    timezone: str = "America/Los_Angeles",
    open_hour: int = 9,
    close_hour: int = 17,
) -> bool:
    """Check whether the call center is open (Monday-Friday, open to close)."""
    tz = ZoneInfo(timezone)
    local = now.astimezone(tz) if now is not None else datetime.now(tz)
    return local.weekday() < 5 and open_hour <= local.hour < close_hour
