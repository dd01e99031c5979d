# venuehours/services/validate.py

# Reservation-window validation against venue hours.
# A reservation must start and end on the same calendar date and its minute range
# must fit entirely inside one open interval of that weekday.
# Canonical rows are preferred, the raw feed is the fallback, no hours data => allowed.

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Sequence

from venuehours.schemas import CanonicalHoursRow, OpeningHoursFeed
from venuehours.utils.clock import day_of_week, minutes_since_midnight
from venuehours.utils.windows import MinuteInterval, merge_overlaps, period_intervals, row_for_day, row_interval

logger = logging.getLogger(__name__)

MSG_MULTI_DAY = "Reservations must start and end on the same day."
MSG_END_BEFORE_START = "Reservation must end after it starts."
MSG_CLOSED_DAY = "This venue is closed on that day."
MSG_NOT_OPEN = "This venue isn't open at this time. Please check opening hours."


@dataclass(frozen=True)
class WindowCheck:
    is_valid: bool
    error: Optional[str] = None


def open_intervals_for_date(
    day: date | datetime,
    rows: Sequence[CanonicalHoursRow] | None = None,
    feed: OpeningHoursFeed | None = None,
) -> List[MinuteInterval]:
    """Open minute intervals for a calendar day; [] when closed or nothing is known."""
    dow = day_of_week(day)
    if rows:
        iv = row_interval(row_for_day(rows, dow))
        return [iv] if iv is not None else []
    if feed is not None and feed.has_periods:
        return merge_overlaps(period_intervals(feed.periods, dow))
    return []


def validate_reservation_window(
    start_at: datetime,
    end_at: datetime,
    rows: Sequence[CanonicalHoursRow] | None = None,
    feed: OpeningHoursFeed | None = None,
) -> WindowCheck:
    if start_at.date() != end_at.date():
        return WindowCheck(False, MSG_MULTI_DAY)
    if end_at <= start_at:
        return WindowCheck(False, MSG_END_BEFORE_START)

    start_min = minutes_since_midnight(start_at)
    end_min = minutes_since_midnight(end_at)
    dow = day_of_week(start_at)

    if rows:
        row = row_for_day(rows, dow)
        if row is None or row.is_closed:
            return WindowCheck(False, MSG_CLOSED_DAY)
        iv = row_interval(row)
        if iv is None or not iv.contains(start_min, end_min):
            return WindowCheck(False, MSG_NOT_OPEN)
        return WindowCheck(True)

    if feed is not None and feed.has_periods:
        intervals = open_intervals_for_date(start_at, feed=feed)
        if not intervals:
            return WindowCheck(False, MSG_CLOSED_DAY)
        if not any(iv.contains(start_min, end_min) for iv in intervals):
            return WindowCheck(False, MSG_NOT_OPEN)
        return WindowCheck(True)

    logger.debug("no hours data; allowing reservation %s-%s", start_at, end_at)
    return WindowCheck(True)
