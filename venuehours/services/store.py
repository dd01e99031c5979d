# venuehours/services/store.py

# Hours storage: loads and persists the canonical week for a venue.
# Feed sync re-reads the stored rows with SELECT ... FOR UPDATE, lets the reconciler
# decide which days may be written (never manual ones) and upserts them in one commit.
# The engine itself stays pure; this module is the only place that touches the database.

from __future__ import annotations
import logging
from typing import Dict, Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from venuehours.models import SourceEnum, VenueHours
from venuehours.schemas import CanonicalHoursRow, HoursSource, OpeningHoursFeed
from venuehours.services.reconcile import effective_hours, periods_to_rows, plan_upserts

logger = logging.getLogger(__name__)


def _to_row(obj: VenueHours) -> CanonicalHoursRow:
    source = obj.source.value if hasattr(obj.source, "value") else obj.source
    return CanonicalHoursRow(
        day_of_week=obj.day_of_week,
        is_closed=obj.is_closed,
        open_time=obj.open_time,
        close_time=obj.close_time,
        source=source,
    )


async def _rows_by_day(session: AsyncSession, venue_id: str, lock: bool = False) -> Dict[int, VenueHours]:
    q = select(VenueHours).where(VenueHours.venue_id == venue_id)
    if lock:
        q = q.with_for_update()
    objs = (await session.execute(q)).scalars().all()
    return {o.day_of_week: o for o in objs}


def _apply(session: AsyncSession, venue_id: str, existing: Dict[int, VenueHours], rows: Iterable[CanonicalHoursRow]) -> List[int]:
    written: List[int] = []
    for r in rows:
        obj = existing.get(r.day_of_week)
        if obj is None:
            obj = VenueHours(venue_id=venue_id, day_of_week=r.day_of_week)
            session.add(obj)
            existing[r.day_of_week] = obj
        obj.is_closed = r.is_closed
        obj.open_time = r.open_time
        obj.close_time = r.close_time
        obj.source = SourceEnum(r.source)
        written.append(r.day_of_week)
    return written


async def load_hours(
    session: AsyncSession, venue_id: str, preference: HoursSource | None = None,
) -> List[CanonicalHoursRow]:
    """Stored week sorted by weekday; with a preference, only rows from that source."""
    by_day = await _rows_by_day(session, venue_id)
    rows = [_to_row(by_day[d]) for d in sorted(by_day)]
    if preference is None:
        return rows
    return effective_hours(rows, preference)


async def create_default_hours(session: AsyncSession, venue_id: str) -> List[int]:
    """New venue: seven closed, feed-owned days. Days that already exist are left alone."""
    existing = await _rows_by_day(session, venue_id)
    missing = [CanonicalHoursRow.closed(d) for d in range(7) if d not in existing]
    created = _apply(session, venue_id, existing, missing)
    await session.commit()
    return created


async def save_manual_hours(session: AsyncSession, venue_id: str, rows: Iterable[CanonicalHoursRow]) -> List[int]:
    """Staff edits; stored as manual so later feed syncs keep them."""
    existing = await _rows_by_day(session, venue_id, lock=True)
    manual = [r.model_copy(update={"source": "manual"}) for r in rows]
    written = _apply(session, venue_id, existing, manual)
    await session.commit()
    logger.info("venue %s: saved manual hours for days %s", venue_id, written)
    return written


async def sync_hours_from_feed(session: AsyncSession, venue_id: str, feed: OpeningHoursFeed | None) -> List[int]:
    """Reconcile a fresh feed snapshot into storage; returns the days that were written."""
    existing = await _rows_by_day(session, venue_id, lock=True)
    computed = periods_to_rows(feed.periods if feed is not None else None)
    current = [_to_row(o) for o in existing.values()]
    written = _apply(session, venue_id, existing, plan_upserts(computed, current))
    await session.commit()
    logger.info(
        "venue %s: feed sync wrote days %s, kept manual days %s",
        venue_id, written, sorted(set(range(7)) - set(written)),
    )
    return written
