"""Release calendar bucketing and the date arithmetic around it.

Release dates are plain calendar dates. "Today" is always taken in the
catalog's canonical timezone (``Settings.catalog_timezone``), so week and
month boundaries do not drift with the host's local zone.
"""

import calendar
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from metamovies.aggregation.schemas import ReleaseCalendar
from metamovies.catalog.schemas import ReleaseRow

# Sunday-first grid, matching the catalog's calendar page
_GRID = calendar.Calendar(firstweekday=calendar.SUNDAY)


def today_in(tz: ZoneInfo) -> date:
    """Current date in the given zone."""
    return datetime.now(tz).date()


def week_start(day: date) -> date:
    """Monday of the week containing ``day`` (Sunday belongs to the week before)."""
    return day - timedelta(days=day.weekday())


def month_range(day: date) -> tuple[date, date]:
    """First and last day of the month containing ``day``."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def shift_month(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def parse_month(value: str) -> date:
    """Parse ``YYYY-MM`` (or a full ``YYYY-MM-DD``) into the first of that month."""
    try:
        parsed = datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        parsed = date.fromisoformat(value)
    return parsed.replace(day=1)


def calendar_grid(month: date) -> list[list[date | None]]:
    """Weeks of the month as 7-cell rows; days outside the month are None."""
    return [
        [d if d.month == month.month else None for d in week]
        for week in _GRID.monthdatescalendar(month.year, month.month)
    ]


def bucket_releases(rows: Iterable[ReleaseRow]) -> dict[str, list[ReleaseRow]]:
    """Group releases by their exact ISO release date, keeping input order."""
    buckets: dict[str, list[ReleaseRow]] = {}
    for row in rows:
        buckets.setdefault(row.date_key, []).append(row)
    return buckets


def releases_on(buckets: dict[str, list[ReleaseRow]], day: date) -> list[ReleaseRow]:
    return buckets.get(day.isoformat(), [])


def build_release_calendar(month: date, rows: Iterable[ReleaseRow]) -> ReleaseCalendar:
    """Bucket a month's releases and attach the display grid.

    Rows dated outside the month are left out of the buckets.
    """
    start, end = month_range(month)
    in_range = (r for r in rows if start <= r.release_date <= end)
    return ReleaseCalendar(
        start=start,
        end=end,
        buckets=bucket_releases(in_range),
        weeks=calendar_grid(start),
    )
