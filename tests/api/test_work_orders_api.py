"""Work order API tests."""

from datetime import date

import pytest
from fastapi import HTTPException

from app.api.schemas.schemas import WorkOrderAssignRequest, WorkOrderCreateRequest, WorkOrderExecuteRequest
from app.api.work_orders import (
    assign,
    cancel,
    create_work_order,
    delete_work_order,
    execute,
    list_work_orders,
    start,
)


@pytest.fixture
def manual_order(db_session):
    return create_work_order(
        WorkOrderCreateRequest(title="Troca de correia", type="corretiva", priority="high", scheduled_date=date(2024, 1, 10))
    )


class TestWorkOrderLifecycleEndpoints:
    def test_create_manual_order(self, db_session, manual_order):
        assert manual_order.status == "open"
        assert manual_order.maintenance_plan_id is None
        assert list_work_orders().total == 1

    def test_assign_start_execute(self, db_session, manual_order):
        assigned = assign(manual_order.id, WorkOrderAssignRequest(assigned_to="Marina"))
        assert assigned.assigned_to == "Marina"

        assert start(manual_order.id).status == "in_progress"

        done = execute(
            manual_order.id,
            WorkOrderExecuteRequest(actual_hours=3.5, completed_date=date(2024, 1, 11), used_resources=["Correia B-42"]),
        )
        assert done.status == "completed"
        assert done.completed_date == date(2024, 1, 11)
        assert done.actual_hours == 3.5
        assert done.used_resources == ["Correia B-42"]

    def test_execute_defaults_completed_date(self, db_session, manual_order):
        done = execute(manual_order.id, WorkOrderExecuteRequest())

        assert done.completed_date is not None

    def test_cancel_completed_order_conflicts(self, db_session, manual_order):
        execute(manual_order.id, WorkOrderExecuteRequest(completed_date=date(2024, 1, 11)))

        with pytest.raises(HTTPException) as exc_info:
            cancel(manual_order.id)

        assert exc_info.value.status_code == 409
        assert exc_info.value.detail["code"] == "INVALID_TRANSITION"

    def test_unknown_order_is_404(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            start("missing")

        assert exc_info.value.status_code == 404


class TestListAndDelete:
    def test_status_filter(self, db_session, manual_order):
        create_work_order(WorkOrderCreateRequest(title="Limpeza", type="preventiva"))
        cancel(manual_order.id)

        assert list_work_orders(status_filter="cancelled").total == 1
        assert list_work_orders(status_filter="open").total == 1

    def test_delete(self, db_session, manual_order):
        response = delete_work_order(manual_order.id)

        assert response.status_code == 204
        assert list_work_orders().total == 0
