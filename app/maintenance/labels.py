"""Display labels for plan frequencies and schedule urgency."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

_FREQUENCY_LABELS: dict[int, str] = {
    1: "daily",
    7: "weekly",
    15: "biweekly",
    30: "monthly",
    365: "yearly",
}


class ScheduleUrgency(StrEnum):
    OVERDUE = "overdue"
    TODAY = "today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this_week"
    FUTURE = "future"


@dataclass(frozen=True)
class ScheduleStatus:
    urgency: ScheduleUrgency
    days_until: int


def frequency_label(days: int | None) -> str | None:
    if not days:
        return None
    return _FREQUENCY_LABELS.get(days, f"{days} days")


def schedule_status(next_date: date, today: date) -> ScheduleStatus:
    """Classify how soon the next scheduled occurrence is due."""
    days_until = (next_date - today).days
    if days_until < 0:
        urgency = ScheduleUrgency.OVERDUE
    elif days_until == 0:
        urgency = ScheduleUrgency.TODAY
    elif days_until == 1:
        urgency = ScheduleUrgency.TOMORROW
    elif days_until <= 7:
        urgency = ScheduleUrgency.THIS_WEEK
    else:
        urgency = ScheduleUrgency.FUTURE
    return ScheduleStatus(urgency=urgency, days_until=days_until)
