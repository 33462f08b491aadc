"""Helper functions for anime-episodes."""

import math
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

MINUTES_IN_DAY = 1440
MINUTES_IN_ALMOST_TWO_DAYS = 2520
MINUTES_IN_MONTH = 43200
MINUTES_IN_TWO_MONTHS = 86400


def first_defined(candidates: Iterable[Callable[[], Optional[T]]]) -> Optional[T]:
    """Return the first candidate result that is neither None nor an empty string.

    Candidates are evaluated lazily in order, so a priority chain is just a list.
    """
    for candidate in candidates:
        value = candidate()
        if value is not None and value != "":
            return value
    return None


def _round(x: float) -> int:
    # half-up, as in JS Math.round
    return int(math.floor(x + 0.5))


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def _difference_in_months(later: datetime, earlier: datetime) -> int:
    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    if (later.day, later.time()) < (earlier.day, earlier.time()):
        months -= 1
    return max(months, 0)


def format_distance(date: datetime, now: Optional[datetime] = None) -> str:
    """Human phrase for the distance between `date` and `now`, e.g. "3 days",
    "about 1 month", "over 2 years". Direction is ignored; callers add "ago"/"in".
    """
    now = now or datetime.now(timezone.utc)
    earlier, later = sorted((date, now))
    seconds = int((later - earlier).total_seconds())
    minutes = _round(seconds / 60)

    if minutes < 2:
        return "less than a minute" if minutes == 0 else "1 minute"
    if minutes < 45:
        return _plural(minutes, "minute")
    if minutes < 90:
        return "about 1 hour"
    if minutes < MINUTES_IN_DAY:
        return "about " + _plural(_round(minutes / 60), "hour")
    if minutes < MINUTES_IN_ALMOST_TWO_DAYS:
        return "1 day"
    if minutes < MINUTES_IN_MONTH:
        return _plural(_round(minutes / MINUTES_IN_DAY), "day")
    if minutes < MINUTES_IN_TWO_MONTHS:
        return "about " + _plural(_round(minutes / MINUTES_IN_MONTH), "month")

    months = _difference_in_months(later, earlier)
    if months < 12:
        return _plural(_round(minutes / MINUTES_IN_MONTH), "month")

    years, rem = divmod(months, 12)
    if rem < 3:
        return "about " + _plural(years, "year")
    if rem < 9:
        return "over " + _plural(years, "year")
    return "almost " + _plural(years + 1, "year")
