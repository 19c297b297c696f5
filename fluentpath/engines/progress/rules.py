"""
Progression rules - level and daily streak arithmetic.

Pure functions; the ledger applies them inside its award transaction.
"""

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

POINTS_PER_LEVEL = 100


def level_for_points(points: int) -> int:
    """Level 1 covers 0-99 points, level 2 covers 100-199, and so on."""
    return max(points, 0) // POINTS_PER_LEVEL + 1


def resolve_timezone(name: str) -> tzinfo:
    """Reference timezone for streak day boundaries."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown progress timezone: {name!r}") from exc


def calendar_day(moment: datetime, tz: tzinfo) -> date:
    """Date of `moment` in the reference timezone. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def next_streak(
    current_streak: int,
    last_completed: Optional[datetime],
    now: datetime,
    tz: tzinfo = timezone.utc,
) -> int:
    """
    Streak after a completion at `now`.

    - first completion ever: 1
    - last completion yesterday: continue (+1)
    - last completion before yesterday: broken, restart at 1
    - last completion today: unchanged
    """
    if last_completed is None:
        return 1

    today = calendar_day(now, tz)
    yesterday = today - timedelta(days=1)
    last_day = calendar_day(last_completed, tz)

    if last_day == yesterday:
        return current_streak + 1
    if last_day < yesterday:
        return 1
    # Same day (or a clock-skewed future timestamp). A profile with any
    # completion never drops below 1.
    return max(current_streak, 1)
