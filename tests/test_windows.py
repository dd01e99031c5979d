# Unit tests for minute-of-day window helpers (clip, merge, row and feed intervals).
# Validates overlap clipping and merging logic.
# Ensures overnight feed periods split at midnight into opening-day and closing-day parts.
# Verifies the 23:59 sentinel covers the last minute of the day.

from venuehours.schemas import CanonicalHoursRow, ExternalPeriod
from venuehours.utils.windows import (
    WHOLE_DAY, MinuteInterval, clip, merge_overlaps, period_intervals, row_for_day, row_interval,
)

def period(od, oh, om=0, cd=None, ch=0, cm=0):
    raw = {"open": {"day": od, "hour": oh, "minute": om}}
    if cd is not None:
        raw["close"] = {"day": cd, "hour": ch, "minute": cm}
    return ExternalPeriod.model_validate(raw)

def test_clip_and_merge():
    a = MinuteInterval(600, 720)
    b = MinuteInterval(660, 780)
    c = clip(a, b)
    assert c == MinuteInterval(660, 720)
    assert clip(MinuteInterval(0, 60), MinuteInterval(60, 120)) is None

    merged = merge_overlaps([b, a, MinuteInterval(900, 960)])
    assert merged == [MinuteInterval(600, 780), MinuteInterval(900, 960)]
    # touching intervals join
    assert merge_overlaps([MinuteInterval(600, 840), MinuteInterval(840, 1080)]) == [MinuteInterval(600, 1080)]

def test_row_interval_sentinel_covers_last_minute():
    row = CanonicalHoursRow(day_of_week=5, is_closed=False, open_time="09:00", close_time="23:59")
    iv = row_interval(row)
    assert iv == MinuteInterval(540, 1440)
    assert iv.covers(1439)
    assert iv.contains(1320, 1440)

def test_row_interval_invalid_or_closed():
    assert row_interval(CanonicalHoursRow.closed(1)) is None
    assert row_interval(None) is None
    inverted = CanonicalHoursRow(day_of_week=1, is_closed=False, open_time="22:00", close_time="02:00")
    assert row_interval(inverted) is None
    garbage = CanonicalHoursRow(day_of_week=1, is_closed=False, open_time="9am", close_time="17:00")
    assert row_interval(garbage) is None

def test_row_for_day():
    rows = [CanonicalHoursRow.closed(d) for d in range(7)]
    assert row_for_day(rows, 3).day_of_week == 3
    assert row_for_day([], 3) is None

def test_period_intervals_overnight_split():
    periods = [period(5, 22, 0, 6, 2, 0)]  # Fri 22:00 -> Sat 02:00
    assert period_intervals(periods, 5) == [MinuteInterval(1320, 1440)]
    assert period_intervals(periods, 6) == [MinuteInterval(0, 120)]
    assert period_intervals(periods, 4) == []

def test_period_intervals_same_day_and_24h():
    periods = [period(1, 11, 0, 1, 14, 0), period(1, 17, 0, 1, 22, 0), period(3, 0, 0)]
    assert period_intervals(periods, 1) == [MinuteInterval(660, 840), MinuteInterval(1020, 1320)]
    assert period_intervals(periods, 3) == [WHOLE_DAY]
