# venuehours/ingest.py

# Ingestion script to load venue hours into the database.
# Reads staff-curated weekly hours from a CSV (stored as manual rows) and
# third-party opening-hours payloads from a JSON file (reconciled as external rows).
# Every venue seen gets its 7 default rows first, so the table always holds full weeks.

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Dict, List

import pandas as pd

from venuehours.config import settings
from venuehours.db import engine, SessionLocal
from venuehours.schemas import CanonicalHoursRow, OpeningHoursFeed
from venuehours.services.store import create_default_hours, save_manual_hours, sync_hours_from_feed
from venuehours.utils.clock import END_OF_DAY
import venuehours.models as models  # ensure models are registered

logger = logging.getLogger(__name__)


# ---------- helpers ----------

def _read_csv(path: str) -> pd.DataFrame:
    if not os.path.exists(path):
        raise FileNotFoundError(f"CSV not found: {path}")
    return pd.read_csv(path, dtype={"venue_id": str})

def _ensure_time_str(x) -> str | None:
    """Return HH:MM from 'H:M' / 'H:M:S' / '9am'-style values; None for blanks.

    "24:00" is read as end of day and stored as the 23:59 sentinel.
    """
    if x is None or pd.isna(x) or not str(x).strip():
        return None
    s = str(x).strip()
    if s in ("24:00", "24:00:00"):
        return END_OF_DAY
    return pd.to_datetime(s).strftime("%H:%M")

def _truthy(x) -> bool:
    return str(x).strip().lower() in {"1", "true", "yes", "y", "closed"}

def hours_frame_to_rows(df: pd.DataFrame) -> Dict[str, List[CanonicalHoursRow]]:
    df = df.copy()
    df.columns = [c.strip().lower() for c in df.columns]
    if "day_of_week" not in df.columns:
        for c in ("dayofweek", "day", "dow"):
            if c in df.columns:
                df.rename(columns={c: "day_of_week"}, inplace=True)
                break
    if "day_of_week" not in df.columns:
        raise ValueError("hours CSV must contain 'day_of_week' (0=Sun..6=Sat).")

    df["venue_id"] = df["venue_id"].astype(str)
    df["day_of_week"] = df["day_of_week"].astype(int)
    if "is_closed" in df.columns:
        df["is_closed"] = df["is_closed"].map(_truthy)
    else:
        df["is_closed"] = False

    out: Dict[str, List[CanonicalHoursRow]] = {}
    for rec in df.to_dict(orient="records"):
        vid, dow = rec["venue_id"], int(rec["day_of_week"])
        times = []
        for col in ("open_time", "close_time"):
            try:
                times.append(_ensure_time_str(rec[col]))
            except ValueError as e:
                raise ValueError(f"venue {vid} day {dow}: unparseable {col} {rec[col]!r}") from e
        open_time, close_time = times
        closed = bool(rec["is_closed"]) or open_time is None or close_time is None
        out.setdefault(vid, []).append(CanonicalHoursRow(
            day_of_week=dow,
            is_closed=closed,
            open_time=None if closed else open_time,
            close_time=None if closed else close_time,
            source="manual",
        ))
    return out

def _read_feeds(path: str) -> Dict[str, OpeningHoursFeed | None]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"feeds JSON not found: {path}")
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("feeds JSON must map venue_id -> opening hours payload")
    return {str(k): OpeningHoursFeed.from_raw(v) for k, v in raw.items()}


# ---------- public entrypoint ----------

async def ingest(hours_csv: str | None, feeds_json: str | None) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)

    manual = hours_frame_to_rows(_read_csv(hours_csv)) if hours_csv else {}
    feeds = _read_feeds(feeds_json) if feeds_json else {}

    async with SessionLocal() as session:
        for venue_id in sorted(set(manual) | set(feeds)):
            await create_default_hours(session, venue_id)
        for venue_id, rows in manual.items():
            await save_manual_hours(session, venue_id, rows)
        for venue_id, feed in feeds.items():
            await sync_hours_from_feed(session, venue_id, feed)

    logger.info("ingest complete: %d venues with manual hours, %d feeds", len(manual), len(feeds))


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if not (settings.HOURS_CSV or settings.FEEDS_JSON):
        raise SystemExit("Set HOURS_CSV and/or FEEDS_JSON via .env or environment variables.")
    asyncio.run(ingest(settings.HOURS_CSV, settings.FEEDS_JSON))
