"""Schedule cursor endpoints: overview, initialization and order generation."""

from __future__ import annotations

from fastapi import APIRouter
from loguru import logger

from app.api.calendar import materialization_to_response
from app.api.dependencies.maintenance import maintenance_service
from app.api.schemas.schemas import (
    GenerateOrdersResponse,
    InitializeSchedulesResponse,
    ScheduleResponse,
    SchedulesResponse,
)
from app.maintenance.service import ScheduleOverview

router = APIRouter(prefix="/schedules", tags=["schedules"])


def _overview_to_response(overview: ScheduleOverview) -> ScheduleResponse:
    return ScheduleResponse(
        plan_id=overview.plan.plan_id,
        plan_name=overview.plan.name,
        equipment_name=overview.plan.equipment_name,
        frequency_days=overview.plan.frequency_days,
        frequency_label=overview.frequency_label,
        active=overview.plan.active,
        next_scheduled_date=overview.cursor.next_scheduled_date,
        last_generated_date=overview.cursor.last_generated_date,
        urgency=overview.status.urgency.value,
        days_until=overview.status.days_until,
    )


@router.get("", response_model=SchedulesResponse)
def list_schedules() -> SchedulesResponse:
    """List schedule cursors ordered by next scheduled date."""
    with maintenance_service() as service:
        overview = service.schedule_overview()

    schedules = [_overview_to_response(o) for o in overview]
    return SchedulesResponse(schedules=schedules, total=len(schedules))


@router.post("/initialize", response_model=InitializeSchedulesResponse)
def initialize_schedules() -> InitializeSchedulesResponse:
    """Create schedule cursors for active plans that have none."""
    logger.info("[SCHEDULES] POST /schedules/initialize")
    with maintenance_service() as service:
        created = service.initialize_schedules()
    return InitializeSchedulesResponse(created=created)


@router.post("/generate", response_model=GenerateOrdersResponse)
def generate_scheduled_orders() -> GenerateOrdersResponse:
    """Create work orders for every due occurrence up to today."""
    logger.info("[SCHEDULES] POST /schedules/generate")
    with maintenance_service() as service:
        results = service.generate_scheduled_orders()

    generated = [materialization_to_response(r) for r in results]
    return GenerateOrdersResponse(generated=generated, total=len(generated))
