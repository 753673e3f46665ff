"""Yearly equipment downtime map.

One optional record per (equipment, year, week). Weeks are numbered 1-52 and
grouped under month headers in quarters of 4-4-5 weeks.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import YearlyDowntime

WEEKS_PER_YEAR = 52

_MONTH_SPANS: tuple[tuple[str, int], ...] = (
    ("january", 4),
    ("february", 4),
    ("march", 5),
    ("april", 4),
    ("may", 4),
    ("june", 5),
    ("july", 4),
    ("august", 5),
    ("september", 4),
    ("october", 4),
    ("november", 4),
    ("december", 5),
)


@dataclass(frozen=True)
class MonthHeader:
    name: str
    first_week: int
    last_week: int

    @property
    def col_span(self) -> int:
        return self.last_week - self.first_week + 1


@dataclass(frozen=True)
class DowntimeEntry:
    """Downtime cell as submitted by the map view."""

    equipment_id: str
    year: int
    week_number: int
    stop_type: str | None = None
    reason: str | None = None
    status: str | None = None


def month_headers() -> list[MonthHeader]:
    headers: list[MonthHeader] = []
    first_week = 1
    for name, span in _MONTH_SPANS:
        headers.append(MonthHeader(name=name, first_week=first_week, last_week=first_week + span - 1))
        first_week += span
    return headers


def _validate_week(week_number: int) -> None:
    if not 1 <= week_number <= WEEKS_PER_YEAR:
        raise ValueError(f"week_number must be between 1 and {WEEKS_PER_YEAR}, got {week_number}")


def list_downtime(session: Session, year: int) -> list[YearlyDowntime]:
    return list(
        session.execute(
            select(YearlyDowntime)
            .where(YearlyDowntime.year == year)
            .order_by(YearlyDowntime.equipment_id, YearlyDowntime.week_number)
        )
        .scalars()
        .all()
    )


def save_downtime(session: Session, entry: DowntimeEntry) -> YearlyDowntime | None:
    """Upsert the downtime record for (equipment, year, week).

    Saving an empty cell (no reason, no stop type) that has no stored record
    is a no-op and returns None.
    """
    _validate_week(entry.week_number)

    existing = session.execute(
        select(YearlyDowntime).where(
            YearlyDowntime.equipment_id == entry.equipment_id,
            YearlyDowntime.year == entry.year,
            YearlyDowntime.week_number == entry.week_number,
        )
    ).scalar_one_or_none()

    if existing is None and not entry.reason and not entry.stop_type:
        return None

    if existing is None:
        existing = YearlyDowntime(
            equipment_id=entry.equipment_id,
            year=entry.year,
            week_number=entry.week_number,
        )
        session.add(existing)

    existing.stop_type = entry.stop_type
    existing.reason = entry.reason
    existing.status = entry.status
    session.flush()

    logger.info(
        f"[DOWNTIME] Saved equipment_id={entry.equipment_id} year={entry.year} week={entry.week_number} "
        f"stop_type={entry.stop_type}"
    )
    return existing


def delete_downtime(session: Session, downtime_id: str) -> bool:
    record = session.get(YearlyDowntime, downtime_id)
    if record is None:
        return False
    session.delete(record)
    session.flush()
    logger.info(f"[DOWNTIME] Deleted id={downtime_id}")
    return True
