"""Work order lifecycle.

Status flow:
    open -> in_progress -> completed
    open -> completed
    open | in_progress -> cancelled

completed and cancelled are terminal. Assignment is allowed while the order
is open or in progress.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from loguru import logger

from app.db.models import WorkOrder
from app.db.serialization import clean_string_list


class WorkOrderStatus(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_ALLOWED_TRANSITIONS: dict[WorkOrderStatus, set[WorkOrderStatus]] = {
    WorkOrderStatus.OPEN: {WorkOrderStatus.IN_PROGRESS, WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED},
    WorkOrderStatus.IN_PROGRESS: {WorkOrderStatus.COMPLETED, WorkOrderStatus.CANCELLED},
    WorkOrderStatus.COMPLETED: set(),
    WorkOrderStatus.CANCELLED: set(),
}

ACTIVE_STATUSES = frozenset({WorkOrderStatus.OPEN, WorkOrderStatus.IN_PROGRESS})


class WorkOrderTransitionError(RuntimeError):
    """Raised when a work order cannot move to the requested status.

    Attributes:
        work_order_id: Order that was being changed
        current: Current status
        target: Requested status or action
    """

    def __init__(self, work_order_id: str, current: str, target: str):
        self.work_order_id = work_order_id
        self.current = current
        self.target = target
        super().__init__(f"Work order {work_order_id} cannot go from '{current}' to '{target}'")


def current_status(order: WorkOrder) -> WorkOrderStatus:
    """Stored status, treating NULL and unknown values as open."""
    try:
        return WorkOrderStatus(order.status or WorkOrderStatus.OPEN)
    except ValueError:
        logger.warning(f"[WORK_ORDER] Unknown status '{order.status}' on {order.id}, treating as open")
        return WorkOrderStatus.OPEN


def _transition(order: WorkOrder, target: WorkOrderStatus) -> None:
    current = current_status(order)
    if target not in _ALLOWED_TRANSITIONS[current]:
        raise WorkOrderTransitionError(order.id, current.value, target.value)
    order.status = target.value
    logger.info(f"[WORK_ORDER] id={order.id} status {current.value} -> {target.value}")


def start_work_order(order: WorkOrder) -> WorkOrder:
    _transition(order, WorkOrderStatus.IN_PROGRESS)
    return order


def execute_work_order(
    order: WorkOrder,
    completed_date: date,
    actual_hours: float | None = None,
    used_resources: list[str] | None = None,
) -> WorkOrder:
    """Mark an order as completed and record execution data.

    Args:
        order: Work order to complete
        completed_date: Date the work was finished
        actual_hours: Hours actually worked, if recorded
        used_resources: Materials/parts consumed, in the order entered

    Returns:
        The updated order
    """
    if actual_hours is not None and actual_hours < 0:
        raise ValueError("actual_hours must not be negative")
    _transition(order, WorkOrderStatus.COMPLETED)
    order.completed_date = completed_date
    if actual_hours is not None:
        order.actual_hours = actual_hours
    if used_resources is not None:
        order.used_resources = clean_string_list(used_resources)
    return order


def cancel_work_order(order: WorkOrder) -> WorkOrder:
    _transition(order, WorkOrderStatus.CANCELLED)
    return order


def assign_work_order(order: WorkOrder, assignee: str | None) -> WorkOrder:
    """Assign (or unassign with None) a technician."""
    current = current_status(order)
    if current not in ACTIVE_STATUSES:
        raise WorkOrderTransitionError(order.id, current.value, "assign")
    order.assigned_to = assignee
    logger.info(f"[WORK_ORDER] id={order.id} assigned_to={assignee}")
    return order
