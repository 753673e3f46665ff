"""Unit tests for the projection pipeline."""

from datetime import date

from app.maintenance.deduplication import MaterializedWorkOrderInput
from app.maintenance.projection import default_horizon, project_plan, project_virtual_occurrences
from app.maintenance.recurrence import MaintenancePlanInput, ScheduleCursor

HORIZON = date(2024, 2, 1)


def _plan(plan_id, name, frequency_days=7, active=True) -> MaintenancePlanInput:
    return MaintenancePlanInput(plan_id=plan_id, name=name, frequency_days=frequency_days, active=active)


def _cursor(plan_id, next_date) -> ScheduleCursor:
    return ScheduleCursor(plan_id=plan_id, next_scheduled_date=next_date)


class TestProjectVirtualOccurrences:
    """Test the multi-plan projection."""

    def test_ordered_by_date_then_plan_name(self):
        plans = [_plan("p-b", "Bomba"), _plan("p-a", "Ar condicionado")]
        cursors = {"p-a": _cursor("p-a", date(2024, 1, 8)), "p-b": _cursor("p-b", date(2024, 1, 8))}

        result = project_virtual_occurrences(plans, cursors, [], date(2024, 1, 15))

        assert [(o.date, o.plan_id) for o in result] == [
            (date(2024, 1, 8), "p-a"),
            (date(2024, 1, 8), "p-b"),
            (date(2024, 1, 15), "p-a"),
            (date(2024, 1, 15), "p-b"),
        ]

    def test_inactive_plans_excluded(self):
        plans = [_plan("p-1", "Ativo"), _plan("p-2", "Inativo", active=False)]
        cursors = {"p-1": _cursor("p-1", date(2024, 1, 8)), "p-2": _cursor("p-2", date(2024, 1, 8))}

        result = project_virtual_occurrences(plans, cursors, [], HORIZON)

        assert {o.plan_id for o in result} == {"p-1"}

    def test_plans_without_cursor_excluded(self):
        result = project_virtual_occurrences([_plan("p-1", "Sem cursor")], {}, [], HORIZON)

        assert result == []

    def test_materialized_orders_suppressed(self):
        plans = [_plan("p-1", "Compressor")]
        cursors = {"p-1": _cursor("p-1", date(2024, 1, 8))}
        orders = [MaterializedWorkOrderInput("wo-1", "p-1", date(2024, 1, 15))]

        result = project_virtual_occurrences(plans, cursors, orders, date(2024, 1, 22))

        assert [o.date for o in result] == [date(2024, 1, 8), date(2024, 1, 22)]

    def test_same_inputs_same_output(self):
        plans = [_plan("p-1", "Compressor", frequency_days=3), _plan("p-2", "Caldeira", frequency_days=5)]
        cursors = {"p-1": _cursor("p-1", date(2024, 1, 1)), "p-2": _cursor("p-2", date(2024, 1, 2))}

        assert project_virtual_occurrences(plans, cursors, [], HORIZON) == project_virtual_occurrences(
            plans, cursors, [], HORIZON
        )

    def test_project_plan_returns_empty_for_unschedulable_plan(self):
        plan = _plan("p-1", "Sem frequência", frequency_days=None)

        assert project_plan(plan, _cursor("p-1", date(2024, 1, 8)), HORIZON, set()) == []


class TestDefaultHorizon:
    def test_three_calendar_months(self):
        assert default_horizon(date(2024, 1, 15)) == date(2024, 4, 15)

    def test_month_end_clamped(self):
        assert default_horizon(date(2023, 11, 30)) == date(2024, 2, 29)

    def test_custom_months(self):
        assert default_horizon(date(2024, 1, 15), months=1) == date(2024, 2, 15)
