"""Calendar helpers.

``weekday_of`` is the single weekday rule used by every component. Dates are
civil calendar dates; aware datetimes are first converted to the configured
civil timezone (Pacific by default) so a booking made late in the evening UTC
still lands on the local day.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo

from coachplanner.config import get_config
from coachplanner.domain.models import Weekday

DateLike = Union[date, datetime, str]


def parse_date(value: DateLike, tz_name: Optional[str] = None) -> date:
    """Normalize a date-like value to a civil ``date``.

    Args:
        value: A ``date``, a ``datetime`` or an ISO date or datetime string.
            Strings carrying an offset are converted like aware datetimes.
        tz_name: Timezone used for aware datetimes. Defaults to the
            configured timezone.

    Raises:
        ValueError: If a string is not a valid ISO date or datetime.
        TypeError: If the value is not date-like.
    """
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            value = datetime.fromisoformat(text)
        else:
            return date.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            zone = ZoneInfo(tz_name or get_config().timezone)
            return value.astimezone(zone).date()
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date, datetime or ISO string, got {type(value).__name__}")


def weekday_of(value: DateLike, tz_name: Optional[str] = None) -> Weekday:
    """Weekday of a date under the engine's fixed civil calendar."""
    return Weekday.from_index(parse_date(value, tz_name).weekday())


def current_time(tz_name: Optional[str] = None) -> datetime:
    """Current aware time in the configured timezone."""
    return datetime.now(ZoneInfo(tz_name or get_config().timezone))


def today(tz_name: Optional[str] = None) -> date:
    """Current civil date in the configured timezone."""
    return current_time(tz_name).date()


def date_range(start: DateLike, end: DateLike) -> list[date]:
    """All dates from ``start`` to ``end`` inclusive."""
    current = parse_date(start)
    last = parse_date(end)
    dates = []
    while current <= last:
        dates.append(current)
        current += timedelta(days=1)
    return dates


def week_dates_starting_monday(anchor: DateLike) -> list[date]:
    """The seven dates of the Monday-based week containing ``anchor``."""
    d = parse_date(anchor)
    monday = d - timedelta(days=d.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def upcoming_dates(start: DateLike, days: Optional[int] = None) -> list[date]:
    """The ``days`` dates following ``start`` (``start`` itself excluded).

    Used to offer paste targets. Defaults to the configured paste horizon.
    """
    count = get_config().paste_horizon_days if days is None else days
    first = parse_date(start)
    return [first + timedelta(days=i) for i in range(1, count + 1)]


def format_date(value: DateLike) -> str:
    """Long display form, e.g. "Monday, January 15, 2024"."""
    d = parse_date(value)
    return f"{weekday_of(d).label}, {d.strftime('%B')} {d.day}, {d.year}"
