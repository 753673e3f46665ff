"""Maintenance reporting aggregates.

Pure aggregation over work order snapshots. No chart rendering; the API
returns the numbers and the client draws them.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from app.work_orders.lifecycle import ACTIVE_STATUSES, WorkOrderStatus

CORRECTIVE_TYPE = "corretiva"


@dataclass(frozen=True)
class WorkOrderFact:
    """Input representation of a work order for reporting."""

    work_order_id: str
    type: str
    priority: str | None
    status: str | None
    equipment_id: str | None
    equipment_name: str | None
    scheduled_date: date | None
    completed_date: date | None
    actual_hours: float | None


@dataclass
class EquipmentReport:
    equipment_id: str
    equipment_name: str | None
    total_orders: int = 0
    corrective_orders: int = 0
    completed_orders: int = 0
    mttr_hours: float | None = None


@dataclass
class MaintenanceSummary:
    total_orders: int
    by_status: dict[str, int]
    by_type: dict[str, int]
    by_priority: dict[str, int]
    completion_rate: float
    overdue_orders: int
    equipment: list[EquipmentReport] = field(default_factory=list)


def _is_overdue(fact: WorkOrderFact, today: date) -> bool:
    status = fact.status or WorkOrderStatus.OPEN.value
    return status in ACTIVE_STATUSES and fact.scheduled_date is not None and fact.scheduled_date < today


def summarize_work_orders(facts: Iterable[WorkOrderFact], today: date) -> MaintenanceSummary:
    """Aggregate work orders into dashboard/report figures.

    completion_rate is completed / (all orders except cancelled), 0.0 when
    there is nothing to complete. mttr_hours is the mean actual_hours of
    completed corrective orders with recorded hours.

    Args:
        facts: Work orders to aggregate
        today: Reference date for overdue detection

    Returns:
        MaintenanceSummary
    """
    facts = list(facts)

    by_status = Counter(f.status or WorkOrderStatus.OPEN.value for f in facts)
    by_type = Counter(f.type for f in facts)
    by_priority = Counter(f.priority or "medium" for f in facts)

    completed = by_status.get(WorkOrderStatus.COMPLETED.value, 0)
    actionable = len(facts) - by_status.get(WorkOrderStatus.CANCELLED.value, 0)
    completion_rate = round(completed / actionable, 4) if actionable else 0.0

    reports: dict[str, EquipmentReport] = {}
    repair_hours: dict[str, list[float]] = {}
    for fact in facts:
        if fact.equipment_id is None:
            continue
        report = reports.setdefault(fact.equipment_id, EquipmentReport(fact.equipment_id, fact.equipment_name))
        report.total_orders += 1
        is_completed = fact.status == WorkOrderStatus.COMPLETED.value
        if is_completed:
            report.completed_orders += 1
        if fact.type == CORRECTIVE_TYPE:
            report.corrective_orders += 1
            if is_completed and fact.actual_hours is not None:
                repair_hours.setdefault(fact.equipment_id, []).append(fact.actual_hours)

    for equipment_id, hours in repair_hours.items():
        reports[equipment_id].mttr_hours = round(sum(hours) / len(hours), 2)

    return MaintenanceSummary(
        total_orders=len(facts),
        by_status=dict(by_status),
        by_type=dict(by_type),
        by_priority=dict(by_priority),
        completion_rate=completion_rate,
        overdue_orders=sum(1 for f in facts if _is_overdue(f, today)),
        equipment=sorted(reports.values(), key=lambda r: (r.equipment_name or "", r.equipment_id)),
    )
