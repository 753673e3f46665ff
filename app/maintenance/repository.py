"""Backend access for the maintenance scheduling engine.

The engine and the scheduling service depend only on the
MaintenanceRepository protocol. SqlMaintenanceRepository implements it over
the SQLAlchemy models and is the only place where stored rows are converted
into engine inputs (including reading stored string lists).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.models import MaintenancePlan, MaintenancePlanSchedule, WorkOrder
from app.db.serialization import decode_string_list
from app.maintenance.deduplication import MaterializedWorkOrderInput
from app.maintenance.errors import BackendFetchError, BackendWriteError, ScheduleNotFoundError
from app.maintenance.recurrence import MaintenancePlanInput, ScheduleCursor, parse_weekdays


@dataclass(frozen=True)
class WorkOrderDraft:
    """Work order to be created from a plan occurrence."""

    title: str
    type: str
    priority: str
    maintenance_plan_id: str
    scheduled_date: date
    description: str | None = None
    equipment_id: str | None = None
    estimated_hours: float | None = None
    tasks: tuple[str, ...] = field(default_factory=tuple)
    status: str = "open"


class MaintenanceRepository(Protocol):
    """Capabilities the scheduling service needs from the backing store."""

    def fetch_plans(self, active_only: bool = True) -> list[MaintenancePlanInput]: ...

    def fetch_schedules(self) -> dict[str, ScheduleCursor]: ...

    def fetch_work_orders(self) -> list[MaterializedWorkOrderInput]: ...

    def create_work_order(self, draft: WorkOrderDraft) -> str: ...

    def update_schedule(self, cursor: ScheduleCursor) -> None: ...

    def create_schedule(self, cursor: ScheduleCursor) -> None: ...


def plan_to_input(plan: MaintenancePlan) -> MaintenancePlanInput:
    """Convert a MaintenancePlan row to engine input."""
    return MaintenancePlanInput(
        plan_id=plan.id,
        name=plan.name,
        frequency_days=plan.frequency_days,
        end_date=plan.end_date,
        schedule_days_of_week=parse_weekdays(decode_string_list(plan.schedule_days_of_week)),
        active=bool(plan.active),
        type=plan.type,
        priority=plan.priority or "medium",
        description=plan.description,
        tasks=tuple(decode_string_list(plan.tasks)),
        equipment_id=plan.equipment_id,
        equipment_name=plan.equipment.name if plan.equipment else None,
        start_date=plan.start_date,
        estimated_duration_hours=plan.estimated_duration_hours,
    )


def schedule_to_cursor(schedule: MaintenancePlanSchedule) -> ScheduleCursor:
    return ScheduleCursor(
        plan_id=schedule.maintenance_plan_id,
        next_scheduled_date=schedule.next_scheduled_date,
        last_generated_date=schedule.last_generated_date,
    )


class SqlMaintenanceRepository:
    """MaintenanceRepository over a SQLAlchemy session.

    Writes are flushed but not committed; the caller owns the transaction.
    """

    def __init__(self, session: Session):
        self.session = session

    def fetch_plans(self, active_only: bool = True) -> list[MaintenancePlanInput]:
        query = select(MaintenancePlan).order_by(MaintenancePlan.name)
        if active_only:
            query = query.where(MaintenancePlan.active.is_(True), MaintenancePlan.frequency_days.is_not(None))
        try:
            rows = self.session.execute(query).unique().scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"[REPOSITORY] Failed to fetch maintenance plans: {e}")
            raise BackendFetchError("Could not load maintenance plans") from e
        return [plan_to_input(row) for row in rows]

    def fetch_schedules(self) -> dict[str, ScheduleCursor]:
        try:
            rows = self.session.execute(select(MaintenancePlanSchedule)).unique().scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"[REPOSITORY] Failed to fetch schedules: {e}")
            raise BackendFetchError("Could not load maintenance schedules") from e
        return {row.maintenance_plan_id: schedule_to_cursor(row) for row in rows}

    def fetch_work_orders(self) -> list[MaterializedWorkOrderInput]:
        query = select(WorkOrder.id, WorkOrder.maintenance_plan_id, WorkOrder.scheduled_date, WorkOrder.status).where(
            WorkOrder.maintenance_plan_id.is_not(None),
            WorkOrder.scheduled_date.is_not(None),
        )
        try:
            rows = self.session.execute(query).all()
        except SQLAlchemyError as e:
            logger.error(f"[REPOSITORY] Failed to fetch work orders: {e}")
            raise BackendFetchError("Could not load work orders") from e
        return [
            MaterializedWorkOrderInput(
                work_order_id=row.id,
                maintenance_plan_id=row.maintenance_plan_id,
                scheduled_date=row.scheduled_date,
                status=row.status,
            )
            for row in rows
        ]

    def create_work_order(self, draft: WorkOrderDraft) -> str:
        order = WorkOrder(
            title=draft.title,
            description=draft.description,
            type=draft.type,
            priority=draft.priority,
            status=draft.status,
            equipment_id=draft.equipment_id,
            maintenance_plan_id=draft.maintenance_plan_id,
            scheduled_date=draft.scheduled_date,
            estimated_hours=draft.estimated_hours,
            tasks=list(draft.tasks) or None,
        )
        try:
            self.session.add(order)
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"[REPOSITORY] Failed to create work order for plan_id={draft.maintenance_plan_id}: {e}")
            raise BackendWriteError("Could not create work order") from e
        return order.id

    def update_schedule(self, cursor: ScheduleCursor) -> None:
        try:
            schedule = self.session.execute(
                select(MaintenancePlanSchedule).where(MaintenancePlanSchedule.maintenance_plan_id == cursor.plan_id)
            ).unique().scalar_one_or_none()
            if schedule is None:
                raise ScheduleNotFoundError(f"No schedule for plan {cursor.plan_id}")
            schedule.next_scheduled_date = cursor.next_scheduled_date
            schedule.last_generated_date = cursor.last_generated_date
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"[REPOSITORY] Failed to update schedule for plan_id={cursor.plan_id}: {e}")
            raise BackendWriteError("Could not update maintenance schedule") from e

    def create_schedule(self, cursor: ScheduleCursor) -> None:
        schedule = MaintenancePlanSchedule(
            maintenance_plan_id=cursor.plan_id,
            next_scheduled_date=cursor.next_scheduled_date,
            last_generated_date=cursor.last_generated_date,
        )
        try:
            self.session.add(schedule)
            self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"[REPOSITORY] Failed to create schedule for plan_id={cursor.plan_id}: {e}")
            raise BackendWriteError("Could not create maintenance schedule") from e
