"""Human-friendly relative time wording ("3 days ago", "in about 1 hour").

The thresholds and phrases follow the common English distance wording
used by web frontends, so server-rendered pages read the same as the
client-rendered ones. Naive datetimes (as returned by SQLite) are
treated as UTC.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

MINUTES_IN_DAY = 1440
MINUTES_IN_ALMOST_TWO_DAYS = 2520
MINUTES_IN_MONTH = 43200
MINUTES_IN_TWO_MONTHS = 86400


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _plural(count: int, one: str, many: str) -> str:
    return one if count == 1 else many.format(count=count)


def _difference_in_months(later: datetime, earlier: datetime) -> int:
    """Whole calendar months between two instants (later >= earlier)."""
    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    if (later.day, later.time()) < (earlier.day, earlier.time()):
        months -= 1
    return max(months, 0)


def format_distance(date: datetime, base: datetime, add_suffix: bool = True) -> str:
    """Describe the distance between `date` and `base` in words."""
    date = _as_utc(date)
    base = _as_utc(base)
    in_future = date > base
    later, earlier = (date, base) if in_future else (base, date)

    seconds = math.trunc((later - earlier).total_seconds())
    minutes = _round_half_up(seconds / 60)

    if minutes < 2:
        text = "less than a minute" if minutes == 0 else "1 minute"
    elif minutes < 45:
        text = f"{minutes} minutes"
    elif minutes < 90:
        text = "about 1 hour"
    elif minutes < MINUTES_IN_DAY:
        hours = _round_half_up(minutes / 60)
        text = _plural(hours, "about 1 hour", "about {count} hours")
    elif minutes < MINUTES_IN_ALMOST_TWO_DAYS:
        text = "1 day"
    elif minutes < MINUTES_IN_MONTH:
        days = _round_half_up(minutes / MINUTES_IN_DAY)
        text = _plural(days, "1 day", "{count} days")
    elif minutes < MINUTES_IN_TWO_MONTHS:
        months = _round_half_up(minutes / MINUTES_IN_MONTH)
        text = _plural(months, "about 1 month", "about {count} months")
    else:
        months = _difference_in_months(later, earlier)
        if months < 12:
            nearest = _round_half_up(minutes / MINUTES_IN_MONTH)
            text = _plural(nearest, "1 month", "{count} months")
        else:
            remainder = months % 12
            years = months // 12
            if remainder < 3:
                text = _plural(years, "about 1 year", "about {count} years")
            elif remainder < 9:
                text = _plural(years, "over 1 year", "over {count} years")
            else:
                text = _plural(years + 1, "almost 1 year", "almost {count} years")

    if not add_suffix:
        return text
    return f"in {text}" if in_future else f"{text} ago"


def format_distance_to_now(date: datetime, now: Optional[datetime] = None, add_suffix: bool = True) -> str:
    """Describe how long ago (or how far ahead) `date` is relative to now."""
    return format_distance(date, now or datetime.now(timezone.utc), add_suffix=add_suffix)
