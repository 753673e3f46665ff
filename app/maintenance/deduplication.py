"""Suppression of projected occurrences already covered by work orders.

A projected occurrence is identified by (plan_id, date). When a work order
referencing the same plan is scheduled on exactly that date, the occurrence
is not offered again. Matching is exact: an order one day off does not
suppress the occurrence.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date

from app.maintenance.recurrence import MaintenancePlanInput

AUTO_SCHEDULED_STATUS = "auto_scheduled"

OccurrenceKey = tuple[str, date]


@dataclass(frozen=True)
class MaterializedWorkOrderInput:
    """Input representation of an existing work order."""

    work_order_id: str
    maintenance_plan_id: str | None
    scheduled_date: date | None
    status: str | None = None


@dataclass(frozen=True)
class VirtualOccurrence:
    """A projected, not yet materialized maintenance occurrence."""

    plan_id: str
    date: date
    plan_name: str
    type: str
    priority: str
    equipment_id: str | None
    equipment_name: str | None
    status: str = AUTO_SCHEDULED_STATUS

    @property
    def key(self) -> OccurrenceKey:
        return (self.plan_id, self.date)


def build_materialized_keys(work_orders: Iterable[MaterializedWorkOrderInput]) -> set[OccurrenceKey]:
    """Collect (plan_id, scheduled_date) pairs of plan-backed work orders.

    Manually created orders (no plan) and orders without a date are ignored.
    """
    return {
        (order.maintenance_plan_id, order.scheduled_date)
        for order in work_orders
        if order.maintenance_plan_id is not None and order.scheduled_date is not None
    }


def filter_materialized(
    plan: MaintenancePlanInput,
    candidates: Iterable[date],
    materialized_keys: set[OccurrenceKey],
) -> Iterator[VirtualOccurrence]:
    """Turn candidate dates into virtual occurrences, skipping covered ones.

    Args:
        plan: Plan the candidates belong to
        candidates: Adjusted candidate dates
        materialized_keys: Output of build_materialized_keys()

    Yields:
        One VirtualOccurrence per uncovered (plan_id, date), in candidate order
    """
    surfaced: set[date] = set()
    for candidate in candidates:
        if (plan.plan_id, candidate) in materialized_keys or candidate in surfaced:
            continue
        surfaced.add(candidate)
        yield VirtualOccurrence(
            plan_id=plan.plan_id,
            date=candidate,
            plan_name=plan.name,
            type=plan.type,
            priority=plan.priority,
            equipment_id=plan.equipment_id,
            equipment_name=plan.equipment_name,
        )
