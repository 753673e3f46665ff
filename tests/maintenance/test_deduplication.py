"""Unit tests for suppression of materialized occurrences."""

from datetime import date

from app.maintenance.deduplication import (
    AUTO_SCHEDULED_STATUS,
    MaterializedWorkOrderInput,
    build_materialized_keys,
    filter_materialized,
)
from app.maintenance.recurrence import MaintenancePlanInput, ScheduleCursor, project_occurrences

PLAN = MaintenancePlanInput(
    plan_id="plan-1",
    name="Inspeção bomba",
    frequency_days=7,
    type="preditiva",
    priority="high",
    equipment_id="eq-1",
    equipment_name="Bomba 01",
)
CURSOR = ScheduleCursor(plan_id="plan-1", next_scheduled_date=date(2024, 1, 6))
HORIZON = date(2024, 2, 1)


def _order(plan_id, scheduled_date, order_id="wo-1") -> MaterializedWorkOrderInput:
    return MaterializedWorkOrderInput(work_order_id=order_id, maintenance_plan_id=plan_id, scheduled_date=scheduled_date)


def _dates(keys) -> list[date]:
    return [o.date for o in filter_materialized(PLAN, project_occurrences(PLAN, CURSOR, HORIZON), keys)]


class TestFilterMaterialized:
    """Test exact (plan, date) suppression."""

    def test_materialized_occurrence_suppressed(self):
        keys = build_materialized_keys([_order("plan-1", date(2024, 1, 8))])

        assert _dates(keys) == [date(2024, 1, 15), date(2024, 1, 22), date(2024, 1, 29)]

    def test_order_one_day_off_does_not_suppress(self):
        keys = build_materialized_keys([_order("plan-1", date(2024, 1, 9))])

        assert _dates(keys)[0] == date(2024, 1, 8)
        assert len(_dates(keys)) == 4

    def test_order_of_other_plan_does_not_suppress(self):
        keys = build_materialized_keys([_order("plan-2", date(2024, 1, 8))])

        assert len(_dates(keys)) == 4

    def test_occurrences_carry_plan_details(self):
        occurrence = next(filter_materialized(PLAN, [date(2024, 1, 8)], set()))

        assert occurrence.plan_id == "plan-1"
        assert occurrence.plan_name == "Inspeção bomba"
        assert occurrence.type == "preditiva"
        assert occurrence.priority == "high"
        assert occurrence.equipment_name == "Bomba 01"
        assert occurrence.status == AUTO_SCHEDULED_STATUS
        assert occurrence.key == ("plan-1", date(2024, 1, 8))

    def test_repeated_dates_within_one_run_surface_once(self):
        candidates = [date(2024, 1, 8), date(2024, 1, 8), date(2024, 1, 9)]

        result = [o.date for o in filter_materialized(PLAN, candidates, set())]

        assert result == [date(2024, 1, 8), date(2024, 1, 9)]


class TestBuildMaterializedKeys:
    """Test which work orders count as materializations."""

    def test_manual_orders_ignored(self):
        keys = build_materialized_keys([_order(None, date(2024, 1, 8))])

        assert keys == set()

    def test_orders_without_date_ignored(self):
        keys = build_materialized_keys([_order("plan-1", None)])

        assert keys == set()

    def test_duplicate_orders_collapse_to_one_key(self):
        keys = build_materialized_keys(
            [_order("plan-1", date(2024, 1, 8), "wo-1"), _order("plan-1", date(2024, 1, 8), "wo-2")]
        )

        assert keys == {("plan-1", date(2024, 1, 8))}
