# venuehours/services/reconcile.py

# Hours reconciler: turns an external "periods" feed into 7 canonical rows
# (one per weekday, source="external") and merges them over the stored week.
# Overnight periods are split at midnight; several periods on the same day collapse
# into one interval (earliest open, latest close). Manual rows are never overwritten.

from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from venuehours.schemas import CanonicalHoursRow, ExternalPeriod, HoursSource
from venuehours.utils.clock import MINUTES_PER_DAY, minutes_to_hhmm

logger = logging.getLogger(__name__)

Span = Tuple[int, int]  # (open, close) minutes; close 1440 = until end of day


def _widen(days: Dict[int, Optional[Span]], dow: int, start: int, end: int) -> None:
    cur = days[dow]
    if cur is None:
        days[dow] = (start, end)
    else:
        days[dow] = (min(cur[0], start), max(cur[1], end))


def periods_to_rows(periods: Iterable[ExternalPeriod] | None) -> List[CanonicalHoursRow]:
    days: Dict[int, Optional[Span]] = {d: None for d in range(7)}

    for p in periods or ():
        o = p.open
        if p.close is None:
            _widen(days, o.day, 0, MINUTES_PER_DAY)
            continue
        c = p.close
        if o.day == c.day:
            _widen(days, o.day, o.minutes, c.minutes)
            continue
        # crosses midnight
        cur = days[o.day]
        days[o.day] = (o.minutes if cur is None else min(cur[0], o.minutes), MINUTES_PER_DAY)
        if c.minutes > 0:
            cur = days[c.day]
            days[c.day] = (0, c.minutes if cur is None else max(cur[1], c.minutes))

    rows: List[CanonicalHoursRow] = []
    for dow in range(7):
        span = days[dow]
        if span is None:
            rows.append(CanonicalHoursRow.closed(dow))
        else:
            rows.append(CanonicalHoursRow(
                day_of_week=dow,
                is_closed=False,
                open_time=minutes_to_hhmm(span[0]),
                close_time=minutes_to_hhmm(span[1]),
                source="external",
            ))
    return rows


def plan_upserts(
    computed: Sequence[CanonicalHoursRow],
    existing: Sequence[CanonicalHoursRow] | None,
) -> List[CanonicalHoursRow]:
    """Computed rows that may be written: every day whose stored row is not manual."""
    manual_days = {r.day_of_week for r in existing or () if r.source == "manual"}
    return [r for r in computed if r.day_of_week not in manual_days]


def reconcile_hours(
    periods: Iterable[ExternalPeriod] | None,
    existing: Sequence[CanonicalHoursRow] | None,
) -> List[CanonicalHoursRow]:
    """The week after applying the feed: manual rows verbatim, the rest from the feed."""
    computed = periods_to_rows(periods)
    writes = {r.day_of_week: r for r in plan_upserts(computed, existing)}
    kept = {r.day_of_week: r for r in existing or () if r.day_of_week not in writes}
    week = [writes.get(d) or kept[d] for d in range(7)]
    logger.debug(
        "reconciled hours: wrote days %s, preserved manual days %s",
        sorted(writes), sorted(kept),
    )
    return week


def effective_hours(
    rows: Sequence[CanonicalHoursRow] | None,
    preference: HoursSource | None,
) -> List[CanonicalHoursRow]:
    """Rows from the preferred source only: manual rows for "manual", feed rows otherwise."""
    wanted = "manual" if preference == "manual" else "external"
    return [r for r in rows or () if r.source == wanted]
