"""Maintenance plan recurrence projection.

Turns a plan's recurrence rule and its schedule cursor into a bounded, lazy
sequence of candidate occurrence dates:
- Raw candidates start at the cursor and advance by frequency_days
- Daily plans honour the weekday whitelist when one is set
- Every candidate falling on a weekend is moved to the following Monday
- Candidates beyond the plan end date or the horizon are never emitted

Pure calendar-day arithmetic on datetime.date values. No I/O, no time zone
conversion, no hidden state: the same inputs always yield the same sequence.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import StrEnum

from loguru import logger


class Weekday(StrEnum):
    """Weekday names as stored in schedule_days_of_week."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


# Index matches date.weekday() (Monday == 0)
_WEEKDAYS_BY_INDEX: tuple[Weekday, ...] = tuple(Weekday)


def weekday_of(day: date) -> Weekday:
    return _WEEKDAYS_BY_INDEX[day.weekday()]


def parse_weekdays(names: Iterable[str] | None) -> frozenset[Weekday] | None:
    """Normalize stored weekday names.

    Unknown names are dropped with a warning. Returns None when nothing valid
    remains so that "no whitelist" and "empty whitelist" behave the same.
    """
    if not names:
        return None

    parsed: set[Weekday] = set()
    for name in names:
        normalized = str(name).strip().lower()
        try:
            parsed.add(Weekday(normalized))
        except ValueError:
            logger.warning(f"[RECURRENCE] Ignoring unknown weekday name: {name!r}")

    return frozenset(parsed) or None


@dataclass(frozen=True)
class MaintenancePlanInput:
    """Input representation of a maintenance plan.

    Only plan_id, frequency_days, end_date, schedule_days_of_week and active
    drive the projection; the rest is carried through to virtual occurrences
    and materialized work orders unchanged.
    """

    plan_id: str
    name: str
    frequency_days: int | None
    end_date: date | None = None
    schedule_days_of_week: frozenset[Weekday] | None = None
    active: bool = True
    type: str = "preventiva"
    priority: str = "medium"
    description: str | None = None
    tasks: tuple[str, ...] = field(default_factory=tuple)
    equipment_id: str | None = None
    equipment_name: str | None = None
    start_date: date | None = None
    estimated_duration_hours: float | None = None

    @property
    def has_valid_frequency(self) -> bool:
        return isinstance(self.frequency_days, int) and self.frequency_days > 0

    @property
    def is_schedulable(self) -> bool:
        """Active plans with a positive frequency are auto-scheduled."""
        return self.active and self.has_valid_frequency


@dataclass(frozen=True)
class ScheduleCursor:
    """Persisted projection cursor for one plan."""

    plan_id: str
    next_scheduled_date: date
    last_generated_date: date | None = None


def adjust_for_weekend(day: date) -> date:
    """Move Saturday and Sunday to the following Monday.

    Args:
        day: Candidate date

    Returns:
        Monday for weekend dates, the same date otherwise
    """
    weekday = day.weekday()
    if weekday == 5:
        return day + timedelta(days=2)
    if weekday == 6:
        return day + timedelta(days=1)
    return day


def iter_raw_candidates(
    plan: MaintenancePlanInput,
    cursor: ScheduleCursor,
    horizon: date,
) -> Iterator[date]:
    """Yield unadjusted candidate dates from the cursor up to the horizon.

    Consecutive values differ by exactly frequency_days. Iteration stops for
    good at the first date past the plan end date.

    Args:
        plan: Plan whose recurrence rule is projected
        cursor: Schedule cursor giving the first candidate
        horizon: Last date (inclusive) that may be yielded

    Yields:
        Raw candidate dates in ascending order
    """
    if not plan.has_valid_frequency:
        return

    step = timedelta(days=plan.frequency_days)
    current = cursor.next_scheduled_date
    while current <= horizon:
        if plan.end_date is not None and current > plan.end_date:
            return
        yield current
        current += step


def project_occurrences(
    plan: MaintenancePlanInput,
    cursor: ScheduleCursor,
    horizon: date,
) -> Iterator[date]:
    """Yield weekday-adjusted occurrence dates for a plan.

    The weekday whitelist only applies to daily plans. Weekend adjustment is
    applied to every candidate regardless of the whitelist. An adjusted date
    past the end date or the horizon is dropped, never clipped back.

    Args:
        plan: Plan whose recurrence rule is projected
        cursor: Schedule cursor giving the first candidate
        horizon: Last date (inclusive) that may be yielded

    Yields:
        Adjusted occurrence dates in non-decreasing order
    """
    allowed_days = plan.schedule_days_of_week if plan.frequency_days == 1 else None

    for raw in iter_raw_candidates(plan, cursor, horizon):
        if allowed_days and weekday_of(raw) not in allowed_days:
            continue

        adjusted = adjust_for_weekend(raw)
        if adjusted > horizon:
            continue
        if plan.end_date is not None and adjusted > plan.end_date:
            continue
        yield adjusted
