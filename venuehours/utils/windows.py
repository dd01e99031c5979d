# venuehours/utils/windows.py

# Minute-of-day open windows for a single weekday.
# Builds [start, end) intervals from canonical rows and from raw feed periods,
# splitting overnight periods at midnight (opening day -> 1440, closing day from 0).
# Provides helpers to clip intervals to the day and merge overlapping intervals.

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from venuehours.schemas import CanonicalHoursRow, ExternalPeriod
from venuehours.utils.clock import MINUTES_PER_DAY, close_minutes, parse_hhmm

@dataclass(frozen=True)
class MinuteInterval:
    start: int
    end: int

    def covers(self, minute: int) -> bool:
        return self.start <= minute < self.end

    def contains(self, start: int, end: int) -> bool:
        return self.start <= start and end <= self.end

WHOLE_DAY = MinuteInterval(0, MINUTES_PER_DAY)

def clip(a: MinuteInterval, b: MinuteInterval) -> MinuteInterval | None:
    s = max(a.start, b.start)
    e = min(a.end, b.end)
    return None if s >= e else MinuteInterval(s, e)

def merge_overlaps(intervals: Iterable[MinuteInterval]) -> List[MinuteInterval]:
    xs = sorted(intervals, key=lambda i: i.start)
    out: List[MinuteInterval] = []
    for iv in xs:
        if not out or iv.start > out[-1].end:
            out.append(iv)
        else:
            out[-1] = MinuteInterval(out[-1].start, max(out[-1].end, iv.end))
    return out

def row_for_day(rows: Sequence[CanonicalHoursRow] | None, dow: int) -> CanonicalHoursRow | None:
    for r in rows or ():
        if r.day_of_week == dow:
            return r
    return None

def row_interval(row: CanonicalHoursRow | None) -> MinuteInterval | None:
    """The row's open interval, or None if closed / unparsable / close <= open."""
    if row is None or row.is_closed:
        return None
    start = parse_hhmm(row.open_time)
    end = close_minutes(row.close_time)
    if start is None or end is None or end <= start:
        return None
    return MinuteInterval(start, end)

def period_intervals(periods: Iterable[ExternalPeriod], dow: int) -> List[MinuteInterval]:
    """
    Open intervals on weekday `dow` contributed by feed periods.
    - no close: the whole day the period opens on
    - same-day: [open, close)
    - overnight opening on dow: [open, 1440); overnight closing on dow: [0, close)
    """
    out: List[MinuteInterval] = []
    for p in periods:
        if p.close is None:
            if p.open.day == dow:
                out.append(WHOLE_DAY)
            continue
        if p.open.day == p.close.day:
            if p.open.day == dow:
                iv = clip(MinuteInterval(p.open.minutes, p.close.minutes), WHOLE_DAY)
                if iv:
                    out.append(iv)
            continue
        if p.open.day == dow:
            iv = clip(MinuteInterval(p.open.minutes, MINUTES_PER_DAY), WHOLE_DAY)
            if iv:
                out.append(iv)
        if p.close.day == dow:
            iv = clip(MinuteInterval(0, p.close.minutes), WHOLE_DAY)
            if iv:
                out.append(iv)
    return out
