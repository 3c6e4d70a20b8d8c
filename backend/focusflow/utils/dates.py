import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from focusflow.config import get_settings

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today(tz_name: str | None = None) -> str:
    """Current date as YYYY-MM-DD in the configured timezone."""
    zone = ZoneInfo(tz_name or get_settings().day_timezone)
    return datetime.now(zone).date().isoformat()


def previous_day(day: str) -> str:
    return (date.fromisoformat(day) - timedelta(days=1)).isoformat()


def is_valid_date(value: str) -> bool:
    if not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def date_range(end: str, days: int) -> list[str]:
    """The ``days`` dates ending at ``end`` inclusive, oldest first."""
    last = date.fromisoformat(end)
    return [(last - timedelta(days=offset)).isoformat() for offset in range(days - 1, -1, -1)]
