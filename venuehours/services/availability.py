# venuehours/services/availability.py

# Availability label engine: one customer-facing sentence per venue.
# Combines capacity, active reservations and the open status; when open it runs a
# bounded slot search (15-minute steps over 12 hours, 1-hour lookahead windows)
# for the first window whose booked seats stay below capacity.

from __future__ import annotations
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from venuehours.config import settings
from venuehours.schemas import CanonicalHoursRow, OpeningHoursFeed, ReservationInterval
from venuehours.services.status import DAY_NAMES, OpenStatus, get_open_status, next_open_time
from venuehours.services.validate import open_intervals_for_date
from venuehours.utils.clock import at_minutes, day_of_week, format_time_label, round_up_to_slot

logger = logging.getLogger(__name__)

LABEL_SOLD_OUT = "Sold out for now"
LABEL_CLOSED = "Currently Closed"
LABEL_AVAILABLE_NOW = "Available now"


def hours_source(
    rows: Sequence[CanonicalHoursRow] | None,
    feed: OpeningHoursFeed | None,
) -> str:
    """Which hours data drives decisions: venue_hours | opening_hours_json | fallback | none."""
    if rows:
        return "venue_hours"
    if feed is not None and feed.has_periods:
        return "opening_hours_json"
    if rows is not None or feed is not None:
        return "fallback"
    return "none"


def has_hours_data(rows: Sequence[CanonicalHoursRow] | None, feed: OpeningHoursFeed | None) -> bool:
    return hours_source(rows, feed) in ("venue_hours", "opening_hours_json")


def booked_seats(reservations: Iterable[ReservationInterval], start: datetime, end: datetime) -> int:
    return sum(r.seat_count for r in reservations if r.start_at < end and r.end_at > start)


def find_next_slot(
    now: datetime,
    capacity: int,
    reservations: Sequence[ReservationInterval],
) -> Optional[Tuple[datetime, int]]:
    """(window_start, step_index) of the first window with free capacity, or None."""
    step = timedelta(minutes=settings.SLOT_STEP_MINUTES)
    window = timedelta(minutes=settings.SLOT_WINDOW_MINUTES)
    steps = settings.SLOT_HORIZON_HOURS * 60 // settings.SLOT_STEP_MINUTES

    base = round_up_to_slot(now, settings.SLOT_STEP_MINUTES)
    for i in range(steps):
        window_start = base + i * step
        if booked_seats(reservations, window_start, window_start + window) < capacity:
            return window_start, i
    return None


def _slot_label(now: datetime, capacity: int, reservations: Sequence[ReservationInterval]) -> str:
    found = find_next_slot(now, capacity, reservations)
    if found is None:
        return LABEL_SOLD_OUT
    window_start, i = found
    if i == 0:
        return LABEL_AVAILABLE_NOW
    return f"Next available at {format_time_label(window_start)}"


def _opens_label(now: datetime, opens_at: datetime) -> str:
    t = format_time_label(opens_at)
    if opens_at.date() == now.date():
        return f"Opens at {t}"
    if opens_at.date() == now.date() + timedelta(days=1):
        return f"Opens tomorrow at {t}"
    return f"Opens {DAY_NAMES[day_of_week(opens_at)]} at {t}"


def compute_availability_label(
    now: datetime,
    capacity: int,
    reservations: Sequence[ReservationInterval],
    open_status: OpenStatus | None = None,
    next_open_at: datetime | None = None,
    *,
    rows: Sequence[CanonicalHoursRow] | None = None,
    feed: OpeningHoursFeed | None = None,
) -> str:
    if capacity <= 0:
        return LABEL_SOLD_OUT

    status = open_status or get_open_status(now, rows, feed)
    hours_known = has_hours_data(rows, feed)

    if not status.can_determine and not hours_known:
        # venues without any hours configured: reservations alone decide
        return _slot_label(now, capacity, reservations)

    if not status.is_open:
        opens_at = next_open_at or next_open_time(now, rows, feed)
        if opens_at is None:
            if not hours_known:
                return LABEL_CLOSED
            recheck = get_open_status(now, rows, feed)
            if not recheck.is_open:
                return LABEL_CLOSED
            logger.debug("open status flipped to open on re-check at %s", now)
        else:
            return _opens_label(now, opens_at)

    return _slot_label(now, capacity, reservations)


def slot_times_for_date(
    day: date,
    rows: Sequence[CanonicalHoursRow] | None = None,
    feed: OpeningHoursFeed | None = None,
    step: int = 15,
) -> List[Tuple[datetime, datetime]]:
    """Bookable (start, end) slot boundaries inside the day's open intervals."""
    slots: List[Tuple[datetime, datetime]] = []
    for iv in open_intervals_for_date(day, rows, feed):
        m = iv.start
        while m + step <= iv.end:
            slots.append((at_minutes(day, m), at_minutes(day, m + step)))
            m += step
    return slots
