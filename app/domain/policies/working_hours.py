"""WorkingHoursPolicy — open/closed evaluation against a weekly schedule."""

from __future__ import annotations

from datetime import datetime, time, tzinfo

from app.domain.entities.working_hour import WorkingHour
from app.domain.value_objects.enums import DayOfWeek


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def is_time_in_range(current: time, start: time | None, end: time | None) -> bool:
    """Inclusive range check; ``end < start`` wraps past midnight."""
    if start is None or end is None:
        return False

    now_m, start_m, end_m = _minutes(current), _minutes(start), _minutes(end)
    if end_m < start_m:
        return now_m >= start_m or now_m <= end_m
    return start_m <= now_m <= end_m


def _localize(instant: datetime, tz: tzinfo | None) -> datetime:
    if tz is not None and instant.tzinfo is not None:
        return instant.astimezone(tz)
    return instant


def today_hours(
    schedule: list[WorkingHour],
    instant: datetime,
    tz: tzinfo | None = None,
) -> WorkingHour | None:
    """Return the active schedule entry for the instant's weekday, if any."""
    if not schedule:
        return None

    day = DayOfWeek.from_weekday(_localize(instant, tz).weekday())
    return next((wh for wh in schedule if wh.day_of_week == day and wh.is_active), None)


def is_open(
    schedule: list[WorkingHour],
    instant: datetime,
    tz: tzinfo | None = None,
) -> bool:
    """Check whether the office is open at ``instant``.

    Aware instants are converted to ``tz`` (the offices' local zone) before the
    weekday and time-of-day are taken; naive instants are used as-is.
    """
    entry = today_hours(schedule, instant, tz)
    if entry is None:
        return False

    local = _localize(instant, tz)
    current = time(local.hour, local.minute)

    if not is_time_in_range(current, entry.from_time, entry.to_time):
        return False

    if entry.has_break_window() and is_time_in_range(
        current, entry.break_from_time, entry.break_to_time
    ):
        return False

    return True
