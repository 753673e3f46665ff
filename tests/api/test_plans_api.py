"""Plan and equipment API tests."""

from datetime import date

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from app.api.plans import create_equipment, create_plan, list_equipment, list_plans, update_plan
from app.api.schemas.schemas import EquipmentCreateRequest, PlanCreateRequest, PlanUpdateRequest
from app.db.models import MaintenancePlan


def _plan_request(**overrides) -> PlanCreateRequest:
    values = dict(name="Inspeção termográfica", type="Preditiva", frequency_days=30, priority="HIGH")
    values.update(overrides)
    return PlanCreateRequest(**values)


class TestPlans:
    def test_create_normalizes_fields(self, db_session):
        response = create_plan(
            _plan_request(tasks=["Medir temperatura", " "], schedule_days_of_week=["Friday", "monday", "domingo"])
        )

        assert response.type == "preditiva"
        assert response.priority == "high"
        assert response.tasks == ["Medir temperatura"]
        assert response.schedule_days_of_week == ["monday", "friday"]

        stored = db_session.get(MaintenancePlan, response.id)
        assert stored.tasks == ["Medir temperatura"]

    def test_invalid_type_rejected(self):
        with pytest.raises(ValidationError):
            _plan_request(type="emergencial")

    def test_end_before_start_rejected(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            create_plan(_plan_request(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1)))

        assert exc_info.value.status_code == 422

    def test_update_partial(self, db_session):
        created = create_plan(_plan_request(description="Painéis elétricos"))

        updated = update_plan(created.id, PlanUpdateRequest(active=False, priority="Low", tasks=["Fotografar"]))

        assert updated.active is False
        assert updated.priority == "low"
        assert updated.tasks == ["Fotografar"]
        assert updated.description == "Painéis elétricos"

    def test_update_unknown_plan(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            update_plan("missing", PlanUpdateRequest(active=False))

        assert exc_info.value.status_code == 404

    def test_list_active_filter(self, db_session):
        create_plan(_plan_request(name="A"))
        create_plan(_plan_request(name="B", active=False))

        assert list_plans().total == 2
        assert [p.name for p in list_plans(active=True).plans] == ["A"]


class TestEquipment:
    def test_create_and_list(self, db_session):
        created = create_equipment(EquipmentCreateRequest(code="CLD-01", name="Caldeira", type="caldeira"))

        listed = list_equipment()

        assert listed.total == 1
        assert listed.equipment[0].id == created.id
        assert listed.equipment[0].status == "operational"
