# venuehours/services/status.py

# Open-status evaluator and next-open-time finder.
# Canonical rows are authoritative; the raw feed is used when no rows exist and,
# if FEED_OVERRIDES_CLOSED is on, to overrule a canonical "closed" when the feed says open.
# Both functions are pure: "now" is always passed in as a naive local wall-clock value.

from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from venuehours.config import settings
from venuehours.schemas import CanonicalHoursRow, OpeningHoursFeed
from venuehours.utils.clock import at_minutes, day_of_week, minutes_since_midnight
from venuehours.utils.windows import period_intervals, row_for_day, row_interval

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


class OpenState(str, enum.Enum):
    OPEN_NOW = "OPEN_NOW"
    OPENS_LATER = "OPENS_LATER"
    CLOSED_NOW = "CLOSED_NOW"
    CLOSED_TODAY = "CLOSED_TODAY"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class OpenStatus:
    is_open: bool
    can_determine: bool
    state: OpenState
    source: str = "none"  # "canonical" | "feed" | "none"
    diagnostic: Optional[str] = None


def feed_open_status(now: datetime, feed: OpeningHoursFeed | None) -> OpenStatus:
    if feed is None:
        return OpenStatus(False, False, OpenState.UNKNOWN, "none")
    if not feed.has_periods:
        # weekday descriptions alone are prose; they cannot answer "open right now"
        return OpenStatus(False, False, OpenState.UNKNOWN, "feed")

    t = minutes_since_midnight(now)
    intervals = period_intervals(feed.periods, day_of_week(now))
    if any(iv.covers(t) for iv in intervals):
        return OpenStatus(True, True, OpenState.OPEN_NOW, "feed")
    if any(iv.start > t for iv in intervals):
        state = OpenState.OPENS_LATER
    elif intervals:
        state = OpenState.CLOSED_NOW
    else:
        state = OpenState.CLOSED_TODAY
    return OpenStatus(False, True, state, "feed")


def get_open_status(
    now: datetime,
    rows: Sequence[CanonicalHoursRow] | None = None,
    feed: OpeningHoursFeed | None = None,
    *,
    feed_overrides_closed: bool | None = None,
) -> OpenStatus:
    if not rows:
        return feed_open_status(now, feed)

    if feed_overrides_closed is None:
        feed_overrides_closed = settings.FEED_OVERRIDES_CLOSED

    dow = day_of_week(now)
    t = minutes_since_midnight(now)
    row = row_for_day(rows, dow)
    iv = row_interval(row)

    if iv is not None and iv.covers(t):
        return OpenStatus(True, True, OpenState.OPEN_NOW, "canonical")

    diagnostic = None
    if iv is None:
        state = OpenState.CLOSED_TODAY
        if row is not None and not row.is_closed:
            diagnostic = f"Invalid open/close for {DAY_NAMES[dow]} ({row.open_time}-{row.close_time})"
            logger.warning("%s", diagnostic)
    elif t < iv.start:
        state = OpenState.OPENS_LATER
    else:
        state = OpenState.CLOSED_NOW

    if feed_overrides_closed and feed is not None:
        from_feed = feed_open_status(now, feed)
        if from_feed.is_open:
            logger.debug("canonical hours say %s on %s but feed says open", state.value, DAY_NAMES[dow])
            return from_feed

    return OpenStatus(False, True, state, "canonical", diagnostic)


def _next_open_canonical(now: datetime, rows: Sequence[CanonicalHoursRow], days: int) -> Optional[datetime]:
    dow = day_of_week(now)
    t = minutes_since_midnight(now)
    today = row_interval(row_for_day(rows, dow))
    if today is not None:
        if today.covers(t):
            return None
        if t < today.start:
            return at_minutes(now, today.start)
    for offset in range(1, days + 1):
        iv = row_interval(row_for_day(rows, (dow + offset) % 7))
        if iv is not None:
            return at_minutes(now.date() + timedelta(days=offset), iv.start)
    return None


def _next_open_feed(now: datetime, feed: OpeningHoursFeed, days: int) -> Optional[datetime]:
    if feed_open_status(now, feed).is_open:
        return None
    dow = day_of_week(now)
    t = minutes_since_midnight(now)
    later = [iv.start for iv in period_intervals(feed.periods, dow) if iv.start > t]
    if later:
        return at_minutes(now, min(later))
    for offset in range(1, days + 1):
        intervals = period_intervals(feed.periods, (dow + offset) % 7)
        if intervals:
            return at_minutes(now.date() + timedelta(days=offset), min(iv.start for iv in intervals))
    return None


def next_open_time(
    now: datetime,
    rows: Sequence[CanonicalHoursRow] | None = None,
    feed: OpeningHoursFeed | None = None,
    *,
    search_days: int | None = None,
) -> Optional[datetime]:
    """
    Next instant the venue opens, searching today and the following `search_days` days.
    None when the venue is open right now or nothing opens inside the horizon.
    """
    days = search_days if search_days is not None else settings.NEXT_OPEN_SEARCH_DAYS
    if rows:
        return _next_open_canonical(now, rows, days)
    if feed is not None and feed.has_periods:
        return _next_open_feed(now, feed, days)
    return None
