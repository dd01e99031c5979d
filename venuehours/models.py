# venuehours/models.py

# SQLAlchemy ORM model for the canonical weekly hours table.
# One row per (venue_id, day_of_week), 0=Sun..6=Sat, tagged with its provenance.
# Rows are created closed at venue creation and only ever overwritten, never deleted.


from __future__ import annotations
import enum

from sqlalchemy import Boolean, Enum, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from venuehours.db import Base


class SourceEnum(str, enum.Enum):
    manual = "manual"
    external = "external"


class VenueHours(Base):
    __tablename__ = "venue_hours"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    venue_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=Sun..6=Sat
    is_closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    open_time: Mapped[str | None] = mapped_column(String(5), nullable=True)  # "HH:MM"
    close_time: Mapped[str | None] = mapped_column(String(5), nullable=True)  # "23:59" = end of day
    source: Mapped[SourceEnum] = mapped_column(Enum(SourceEnum), nullable=False, default=SourceEnum.external)

    __table_args__ = (
        UniqueConstraint("venue_id", "day_of_week", name="uq_venue_hours_venue_day"),
    )
