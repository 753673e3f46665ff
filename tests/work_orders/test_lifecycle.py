"""Unit tests for work order status transitions."""

from datetime import date

import pytest

from app.db.models import WorkOrder
from app.work_orders.lifecycle import (
    WorkOrderStatus,
    WorkOrderTransitionError,
    assign_work_order,
    cancel_work_order,
    current_status,
    execute_work_order,
    start_work_order,
)


def _order(status="open") -> WorkOrder:
    return WorkOrder(id="wo-1", title="Plano: Lubrificação", type="preventiva", priority="medium", status=status)


class TestTransitions:
    def test_open_to_in_progress_to_completed(self):
        order = start_work_order(_order())
        assert order.status == "in_progress"

        execute_work_order(order, completed_date=date(2024, 1, 10), actual_hours=1.5, used_resources=["Graxa"])

        assert order.status == "completed"
        assert order.completed_date == date(2024, 1, 10)
        assert order.actual_hours == 1.5
        assert order.used_resources == ["Graxa"]

    def test_open_can_be_executed_directly(self):
        order = execute_work_order(_order(), completed_date=date(2024, 1, 10))

        assert order.status == "completed"
        assert order.actual_hours is None

    def test_cancel_active_order(self):
        assert cancel_work_order(_order("in_progress")).status == "cancelled"

    @pytest.mark.parametrize("terminal", ["completed", "cancelled"])
    def test_terminal_statuses_reject_changes(self, terminal):
        with pytest.raises(WorkOrderTransitionError) as exc_info:
            start_work_order(_order(terminal))

        assert exc_info.value.current == terminal
        assert exc_info.value.target == "in_progress"

    def test_in_progress_cannot_restart(self):
        with pytest.raises(WorkOrderTransitionError):
            start_work_order(_order("in_progress"))

    def test_negative_hours_rejected(self):
        order = _order()
        with pytest.raises(ValueError):
            execute_work_order(order, completed_date=date(2024, 1, 10), actual_hours=-1)
        assert order.status == "open"


class TestAssignment:
    def test_assign_active_order(self):
        assert assign_work_order(_order(), "Carlos").assigned_to == "Carlos"

    def test_assign_completed_order_rejected(self):
        with pytest.raises(WorkOrderTransitionError):
            assign_work_order(_order("completed"), "Carlos")


class TestCurrentStatus:
    def test_null_is_open(self):
        assert current_status(_order(None)) == WorkOrderStatus.OPEN

    def test_unknown_is_open(self):
        assert current_status(_order("aguardando")) == WorkOrderStatus.OPEN
