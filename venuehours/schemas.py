# venuehours/schemas.py

# Pydantic boundary types for hours data and reservations.
# The third-party opening-hours payload is validated here (OpeningHoursFeed.from_raw)
# before any engine code sees it; canonical rows carry their provenance tag.

from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

HoursSource = Literal["manual", "external"]


class PeriodPoint(BaseModel):
    day: int = Field(ge=0, le=6)  # 0=Sun..6=Sat
    hour: int = Field(ge=0, le=23)
    minute: int = Field(ge=0, le=59)

    @property
    def minutes(self) -> int:
        return self.hour * 60 + self.minute


class ExternalPeriod(BaseModel):
    open: PeriodPoint
    close: PeriodPoint | None = None  # missing => open 24 hours from `open`


class OpeningHoursFeed(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    periods: list[ExternalPeriod] = Field(default_factory=list)
    weekday_descriptions: list[str] = Field(default_factory=list, alias="weekdayDescriptions")
    time_zone: str | None = Field(default=None, alias="timeZone")

    @property
    def has_periods(self) -> bool:
        return len(self.periods) > 0

    @classmethod
    def from_raw(cls, raw: Any) -> OpeningHoursFeed | None:
        """Validate a raw payload, dropping malformed periods instead of failing."""
        if not isinstance(raw, dict):
            return None
        periods: list[ExternalPeriod] = []
        raw_periods = raw.get("periods")
        if isinstance(raw_periods, list):
            for i, p in enumerate(raw_periods):
                try:
                    periods.append(ExternalPeriod.model_validate(p))
                except ValidationError as e:
                    logger.warning("dropping malformed period #%d: %s", i, e.errors()[0]["msg"])
        descriptions = raw.get("weekdayDescriptions")
        if not isinstance(descriptions, list):
            descriptions = []
        tz = raw.get("timeZone")
        return cls(
            periods=periods,
            weekday_descriptions=[str(d) for d in descriptions],
            time_zone=tz if isinstance(tz, str) else None,
        )


class CanonicalHoursRow(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    day_of_week: int = Field(ge=0, le=6)
    is_closed: bool
    open_time: str | None = None   # "HH:MM" wall-clock
    close_time: str | None = None  # "23:59" = until end of day
    source: HoursSource = "external"

    @model_validator(mode="after")
    def check_closed_has_no_times(self):
        if self.is_closed and (self.open_time is not None or self.close_time is not None):
            raise ValueError("closed day cannot carry open/close times")
        if not self.is_closed and (self.open_time is None or self.close_time is None):
            raise ValueError("open day needs both open_time and close_time")
        return self

    @classmethod
    def closed(cls, day_of_week: int, source: HoursSource = "external") -> CanonicalHoursRow:
        return cls(day_of_week=day_of_week, is_closed=True, source=source)


class ReservationInterval(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_at: datetime
    end_at: datetime
    seat_count: int = Field(ge=0)

    @model_validator(mode="after")
    def check_single_day(self):
        if self.end_at < self.start_at:
            raise ValueError("end_at before start_at")
        if self.start_at.date() != self.end_at.date():
            raise ValueError("reservation must not span two calendar dates")
        return self
