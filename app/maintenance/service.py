"""Maintenance scheduling service.

Orchestrates the projection engine around the backend repository:
- project_calendar: read-only projection of auto-scheduled occurrences
- materialize_occurrence / skip_occurrence: explicit user actions that write
  a work order (materialize only) and advance the plan's schedule cursor
- initialize_schedules: create cursors for plans that have none
- generate_scheduled_orders: materialize every due occurrence up to today

Fetch failures propagate and no partial projection is produced. On write
failure the cursor is left unchanged; nothing is cached optimistically.

Two actors materializing the same occurrence concurrently can both succeed
(there is no uniqueness constraint on (plan, date)); the second order is a
valid record and shows up as a duplicate entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from loguru import logger

from app.config.settings import settings
from app.maintenance.deduplication import VirtualOccurrence, build_materialized_keys, filter_materialized
from app.maintenance.errors import (
    OccurrenceAlreadyMaterializedError,
    OccurrenceNotProjectedError,
    PlanNotFoundError,
    PlanNotSchedulableError,
    ScheduleNotFoundError,
)
from app.maintenance.labels import ScheduleStatus, frequency_label, schedule_status
from app.maintenance.projection import default_horizon, project_virtual_occurrences, today_in
from app.maintenance.recurrence import MaintenancePlanInput, ScheduleCursor, project_occurrences
from app.maintenance.repository import MaintenanceRepository, WorkOrderDraft
from app.maintenance.tracker import advance_cursor

WORK_ORDER_TITLE_PREFIX = "Plano: "


@dataclass(frozen=True)
class MaterializationResult:
    """Outcome of turning one occurrence into a work order."""

    plan_id: str
    occurrence_date: date
    work_order_id: str
    cursor: ScheduleCursor


@dataclass(frozen=True)
class ScheduleOverview:
    """A plan's cursor with display labels."""

    plan: MaintenancePlanInput
    cursor: ScheduleCursor
    frequency_label: str | None
    status: ScheduleStatus


class MaintenanceScheduleService:
    """Scheduling operations over an injected MaintenanceRepository."""

    def __init__(
        self,
        repository: MaintenanceRepository,
        timezone_name: str | None = None,
        horizon_months: int | None = None,
    ):
        self.repository = repository
        self.timezone_name = timezone_name or settings.schedule_timezone
        self.horizon_months = horizon_months or settings.projection_horizon_months

    def resolve_today(self, today: date | None) -> date:
        return today if today is not None else today_in(self.timezone_name)

    def resolve_horizon(self, today: date, horizon: date | None) -> date:
        return horizon if horizon is not None else default_horizon(today, self.horizon_months)

    def project_calendar(self, horizon: date | None = None, today: date | None = None) -> list[VirtualOccurrence]:
        """Project auto-scheduled occurrences from current cursors up to the horizon."""
        today = self.resolve_today(today)
        horizon = self.resolve_horizon(today, horizon)

        plans = self.repository.fetch_plans(active_only=True)
        cursors = self.repository.fetch_schedules()
        work_orders = self.repository.fetch_work_orders()

        return project_virtual_occurrences(plans, cursors, work_orders, horizon)

    def _load_plan_and_cursor(self, plan_id: str) -> tuple[MaintenancePlanInput, ScheduleCursor]:
        plan = next((p for p in self.repository.fetch_plans(active_only=False) if p.plan_id == plan_id), None)
        if plan is None:
            raise PlanNotFoundError(f"Maintenance plan {plan_id} not found")
        if not plan.is_schedulable:
            raise PlanNotSchedulableError(f"Maintenance plan {plan_id} is inactive or has no frequency")

        cursor = self.repository.fetch_schedules().get(plan_id)
        if cursor is None:
            raise ScheduleNotFoundError(f"Maintenance plan {plan_id} has no schedule; initialize schedules first")
        return plan, cursor

    def _check_projected(
        self,
        plan: MaintenancePlanInput,
        cursor: ScheduleCursor,
        occurrence_date: date,
        today: date | None,
        horizon: date | None,
    ) -> None:
        keys = build_materialized_keys(self.repository.fetch_work_orders())
        if (plan.plan_id, occurrence_date) in keys:
            raise OccurrenceAlreadyMaterializedError(
                f"A work order already covers plan {plan.plan_id} on {occurrence_date.isoformat()}"
            )

        horizon = self.resolve_horizon(self.resolve_today(today), horizon)
        if occurrence_date not in set(project_occurrences(plan, cursor, horizon)):
            raise OccurrenceNotProjectedError(
                f"{occurrence_date.isoformat()} is not a projected occurrence of plan {plan.plan_id}"
            )

    def _materialize(self, plan: MaintenancePlanInput, cursor: ScheduleCursor, occurrence_date: date) -> MaterializationResult:
        draft = WorkOrderDraft(
            title=f"{WORK_ORDER_TITLE_PREFIX}{plan.name}",
            type=plan.type,
            priority=plan.priority,
            maintenance_plan_id=plan.plan_id,
            scheduled_date=occurrence_date,
            description=plan.description,
            equipment_id=plan.equipment_id,
            estimated_hours=plan.estimated_duration_hours,
            tasks=plan.tasks,
        )
        work_order_id = self.repository.create_work_order(draft)

        new_cursor = advance_cursor(cursor, plan, occurrence_date)
        self.repository.update_schedule(new_cursor)

        logger.info(
            f"[MATERIALIZE] plan_id={plan.plan_id} date={occurrence_date.isoformat()} "
            f"work_order_id={work_order_id} next_scheduled_date={new_cursor.next_scheduled_date.isoformat()}"
        )
        return MaterializationResult(
            plan_id=plan.plan_id,
            occurrence_date=occurrence_date,
            work_order_id=work_order_id,
            cursor=new_cursor,
        )

    def materialize_occurrence(
        self,
        plan_id: str,
        occurrence_date: date,
        today: date | None = None,
        horizon: date | None = None,
    ) -> MaterializationResult:
        """Turn a projected occurrence into a work order and advance the cursor.

        Args:
            plan_id: Plan the occurrence belongs to
            occurrence_date: Projected (weekday-adjusted) occurrence date
            today: Override for the current date (defaults to today in the schedule time zone)
            horizon: Horizon the occurrence was projected with (defaults to today +
                the configured number of months)

        Returns:
            MaterializationResult with the new work order id and advanced cursor

        Raises:
            PlanNotFoundError, PlanNotSchedulableError, ScheduleNotFoundError,
            OccurrenceAlreadyMaterializedError, OccurrenceNotProjectedError,
            BackendFetchError, BackendWriteError
        """
        plan, cursor = self._load_plan_and_cursor(plan_id)
        self._check_projected(plan, cursor, occurrence_date, today, horizon)
        return self._materialize(plan, cursor, occurrence_date)

    def skip_occurrence(
        self,
        plan_id: str,
        occurrence_date: date,
        today: date | None = None,
        horizon: date | None = None,
    ) -> ScheduleCursor:
        """Advance the cursor past a projected occurrence without creating a work order."""
        plan, cursor = self._load_plan_and_cursor(plan_id)
        self._check_projected(plan, cursor, occurrence_date, today, horizon)

        new_cursor = advance_cursor(cursor, plan, occurrence_date)
        self.repository.update_schedule(new_cursor)
        logger.info(
            f"[SKIP] plan_id={plan_id} date={occurrence_date.isoformat()} "
            f"next_scheduled_date={new_cursor.next_scheduled_date.isoformat()}"
        )
        return new_cursor

    def initialize_schedules(self, today: date | None = None) -> int:
        """Create a schedule cursor for every schedulable plan that lacks one.

        The first candidate is the plan's start date, or today when unset.

        Returns:
            Number of cursors created
        """
        today = self.resolve_today(today)
        plans = self.repository.fetch_plans(active_only=True)
        cursors = self.repository.fetch_schedules()

        created = 0
        for plan in plans:
            if not plan.is_schedulable or plan.plan_id in cursors:
                continue
            self.repository.create_schedule(
                ScheduleCursor(plan_id=plan.plan_id, next_scheduled_date=plan.start_date or today)
            )
            created += 1

        logger.info(f"[SCHEDULES] Initialized {created} schedule(s) for {len(plans)} active plan(s)")
        return created

    def generate_scheduled_orders(self, today: date | None = None) -> list[MaterializationResult]:
        """Materialize every due occurrence (date <= today) that no work order covers yet.

        The projection is recomputed from the advanced cursor after each
        materialization so that the cadence follows the stored cursor exactly
        as the calendar would show it.
        """
        today = self.resolve_today(today)
        plans = self.repository.fetch_plans(active_only=True)
        cursors = self.repository.fetch_schedules()
        keys = build_materialized_keys(self.repository.fetch_work_orders())

        results: list[MaterializationResult] = []
        for plan in plans:
            cursor = cursors.get(plan.plan_id)
            if cursor is None or not plan.is_schedulable:
                continue

            while True:
                due = next(filter_materialized(plan, project_occurrences(plan, cursor, today), keys), None)
                if due is None:
                    break
                result = self._materialize(plan, cursor, due.date)
                keys.add(due.key)
                cursor = result.cursor
                results.append(result)

        logger.info(f"[SCHEDULES] Generated {len(results)} scheduled work order(s) up to {today.isoformat()}")
        return results

    def schedule_overview(self, today: date | None = None) -> list[ScheduleOverview]:
        """List plans that have a cursor, ordered by next scheduled date."""
        today = self.resolve_today(today)
        plans = {p.plan_id: p for p in self.repository.fetch_plans(active_only=False)}
        cursors = self.repository.fetch_schedules()

        overview = [
            ScheduleOverview(
                plan=plans[plan_id],
                cursor=cursor,
                frequency_label=frequency_label(plans[plan_id].frequency_days),
                status=schedule_status(cursor.next_scheduled_date, today),
            )
            for plan_id, cursor in cursors.items()
            if plan_id in plans
        ]
        overview.sort(key=lambda o: (o.cursor.next_scheduled_date, o.plan.name))
        return overview
