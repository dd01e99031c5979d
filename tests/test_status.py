# Unit tests for the open-status evaluator and next-open-time finder.
# Dates are fixed: 2024-01-05 is a Friday (weekday 5), 2024-01-06 a Saturday.
# Covers canonical rows, the feed-only fallback, the configurable feed tie-break
# and the 7-day next-opening search.

from datetime import datetime

from venuehours.schemas import CanonicalHoursRow, OpeningHoursFeed
from venuehours.services.status import OpenState, get_open_status, next_open_time

def dt(y, m, d, hh, mm=0, ss=0):
    return datetime(y, m, d, hh, mm, ss)

def week(open_time="09:00", close_time="17:00", closed_days=()):
    return [
        CanonicalHoursRow.closed(d) if d in closed_days
        else CanonicalHoursRow(day_of_week=d, is_closed=False, open_time=open_time, close_time=close_time)
        for d in range(7)
    ]

def feed(*periods):
    out = []
    for p in periods:
        od, oh, om = p[0]
        item = {"open": {"day": od, "hour": oh, "minute": om}}
        if len(p) > 1:
            cd, ch, cm = p[1]
            item["close"] = {"day": cd, "hour": ch, "minute": cm}
        out.append(item)
    return OpeningHoursFeed.from_raw({"periods": out})

OVERNIGHT = feed(((5, 22, 0), (6, 2, 0)))  # Fri 22:00 -> Sat 02:00

def test_open_inside_canonical_interval():
    s = get_open_status(dt(2024, 1, 5, 10), week())
    assert (s.is_open, s.can_determine, s.state, s.source) == (True, True, OpenState.OPEN_NOW, "canonical")

def test_closing_time_is_exclusive():
    s = get_open_status(dt(2024, 1, 5, 17, 0), week())
    assert (s.is_open, s.can_determine, s.state) == (False, True, OpenState.CLOSED_NOW)
    assert get_open_status(dt(2024, 1, 5, 8, 0), week()).state == OpenState.OPENS_LATER

def test_sentinel_close_keeps_last_minute_open():
    s = get_open_status(dt(2024, 1, 5, 23, 59, 30), week("09:00", "23:59"))
    assert s.is_open

def test_all_closed_week_is_determinably_closed():
    rows = week(closed_days=range(7))
    s = get_open_status(dt(2024, 1, 5, 12), rows)
    assert (s.is_open, s.can_determine, s.state) == (False, True, OpenState.CLOSED_TODAY)
    assert next_open_time(dt(2024, 1, 5, 12), rows) is None

def test_feed_overrides_canonical_closed_day():
    rows = week(closed_days=(5,))
    f = feed(((5, 10, 0), (5, 18, 0)))
    s = get_open_status(dt(2024, 1, 5, 12), rows, f)
    assert (s.is_open, s.source) == (True, "feed")

    s = get_open_status(dt(2024, 1, 5, 12), rows, f, feed_overrides_closed=False)
    assert (s.is_open, s.can_determine, s.source) == (False, True, "canonical")

def test_feed_overrides_canonical_after_close():
    f = feed(((5, 9, 0), (5, 20, 0)))
    assert get_open_status(dt(2024, 1, 5, 18), week(), f).is_open
    assert not get_open_status(dt(2024, 1, 5, 21), week(), f).is_open

def test_invalid_row_reports_diagnostic():
    rows = week()
    rows[5] = CanonicalHoursRow(day_of_week=5, is_closed=False, open_time="22:00", close_time="02:00")
    s = get_open_status(dt(2024, 1, 5, 23), rows)
    assert not s.is_open and s.can_determine
    assert "Friday" in s.diagnostic

def test_feed_only_overnight_period():
    assert get_open_status(dt(2024, 1, 5, 23), feed=OVERNIGHT).is_open
    assert get_open_status(dt(2024, 1, 6, 1, 30), feed=OVERNIGHT).is_open
    s = get_open_status(dt(2024, 1, 6, 3), feed=OVERNIGHT)
    assert (s.is_open, s.can_determine) == (False, True)
    assert not get_open_status(dt(2024, 1, 5, 21), feed=OVERNIGHT).is_open

def test_feed_only_24_hour_period():
    f = feed(((3, 0, 0),))
    assert get_open_status(dt(2024, 1, 3, 3), feed=f).is_open  # Wednesday
    assert not get_open_status(dt(2024, 1, 4, 3), feed=f).is_open

def test_undeterminable_without_usable_hours():
    prose = OpeningHoursFeed.from_raw({"weekdayDescriptions": ["Monday: 9 AM – 5 PM"]})
    s = get_open_status(dt(2024, 1, 5, 12), feed=prose)
    assert (s.is_open, s.can_determine) == (False, False)
    s = get_open_status(dt(2024, 1, 5, 12))
    assert (s.is_open, s.can_determine, s.state) == (False, False, OpenState.UNKNOWN)

def test_next_open_later_today():
    assert next_open_time(dt(2024, 1, 5, 8), week()) == dt(2024, 1, 5, 9)

def test_next_open_skips_closed_days():
    rows = week(closed_days=(0, 6))
    assert next_open_time(dt(2024, 1, 5, 18), rows) == dt(2024, 1, 8, 9)

def test_next_open_is_none_while_open():
    assert next_open_time(dt(2024, 1, 5, 10), week()) is None
    assert next_open_time(dt(2024, 1, 5, 23), feed=OVERNIGHT) is None

def test_next_open_from_feed():
    assert next_open_time(dt(2024, 1, 5, 21), feed=OVERNIGHT) == dt(2024, 1, 5, 22)
    assert next_open_time(dt(2024, 1, 6, 3), feed=OVERNIGHT) == dt(2024, 1, 12, 22)
    assert next_open_time(dt(2024, 1, 6, 3)) is None
