# venuehours/utils/clock.py

# Time-of-day primitives shared by every hours calculation.
# Everything works on naive local wall-clock values: minutes since midnight,
# "HH:MM" strings and weekday indexes with 0=Sunday..6=Saturday.
# to_venue_local is the single place where a real timezone is applied.

from __future__ import annotations
import re
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

MINUTES_PER_DAY = 24 * 60
END_OF_DAY = "23:59"  # stored sentinel for "until midnight"

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_hhmm(value: str | None) -> int | None:
    """'H:MM' / 'HH:MM' -> minutes since midnight, None if malformed."""
    if not value or not isinstance(value, str):
        return None
    m = _HHMM.match(value.strip())
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour * 60 + minute


def close_minutes(value: str | None) -> int | None:
    """Like parse_hhmm, but the END_OF_DAY sentinel means exactly 1440."""
    if value is not None and value.strip() == END_OF_DAY:
        return MINUTES_PER_DAY
    return parse_hhmm(value)


def format_hhmm(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def minutes_to_hhmm(minutes: int) -> str:
    if minutes >= MINUTES_PER_DAY:
        return END_OF_DAY
    return format_hhmm(minutes // 60, minutes % 60)


def minutes_since_midnight(dt: datetime) -> int:
    return dt.hour * 60 + dt.minute


def day_of_week(d: date | datetime) -> int:
    # date.weekday() is 0=Mon; hours data is indexed 0=Sun
    return (d.weekday() + 1) % 7


def at_minutes(day: date | datetime, minutes: int) -> datetime:
    base = day.date() if isinstance(day, datetime) else day
    return datetime.combine(base, time(0, 0)) + timedelta(minutes=minutes)


def round_up_to_slot(dt: datetime, step: int = 15) -> datetime:
    """Next `step`-minute boundary at or after dt; exact boundaries are kept."""
    rem = dt.minute % step
    if rem == 0 and dt.second == 0 and dt.microsecond == 0:
        return dt
    base = dt.replace(second=0, microsecond=0)
    return base + timedelta(minutes=step - rem)


def format_time_label(dt: datetime) -> str:
    """12-hour clock, no leading zero: '9:00 AM', '3:15 PM'."""
    hour = dt.hour % 12 or 12
    suffix = "PM" if dt.hour >= 12 else "AM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def to_venue_local(instant: datetime, tz: str) -> datetime:
    """
    Convert an instant into the venue's naive wall-clock time.
    Aware values are converted into `tz`; naive values are taken as already local.
    Meant for callers: convert an aware instant with the venue's zone (for example a
    feed's `time_zone`) before passing it to the status, validation or label functions,
    which never apply a timezone themselves.
    """
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(ZoneInfo(tz)).replace(tzinfo=None)
