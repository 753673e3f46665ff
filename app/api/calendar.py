"""Calendar API endpoints for auto-scheduled maintenance.

Projected occurrences are computed on every request from the stored plans,
schedule cursors and work orders. They are never persisted until a user
materializes one.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter
from loguru import logger

from app.api.dependencies.maintenance import maintenance_service
from app.api.schemas.schemas import (
    CalendarOccurrencesResponse,
    MaterializeResponse,
    OccurrenceActionRequest,
    ScheduleCursorResponse,
    VirtualOccurrenceResponse,
)
from app.maintenance.deduplication import VirtualOccurrence
from app.maintenance.service import MaterializationResult

router = APIRouter(prefix="/calendar", tags=["calendar"])


def _occurrence_to_response(occurrence: VirtualOccurrence) -> VirtualOccurrenceResponse:
    return VirtualOccurrenceResponse(
        plan_id=occurrence.plan_id,
        date=occurrence.date,
        plan_name=occurrence.plan_name,
        type=occurrence.type,
        priority=occurrence.priority,
        equipment_id=occurrence.equipment_id,
        equipment_name=occurrence.equipment_name,
        status=occurrence.status,
    )


def materialization_to_response(result: MaterializationResult) -> MaterializeResponse:
    return MaterializeResponse(
        work_order_id=result.work_order_id,
        plan_id=result.plan_id,
        occurrence_date=result.occurrence_date,
        next_scheduled_date=result.cursor.next_scheduled_date,
        last_generated_date=result.cursor.last_generated_date,
    )


@router.get("/occurrences", response_model=CalendarOccurrencesResponse)
def get_occurrences(
    horizon: date | None = None,
    maintenance_type: str | None = None,
    today: date | None = None,
) -> CalendarOccurrencesResponse:
    """Get projected auto-scheduled occurrences.

    Args:
        horizon: Last date to project (defaults to today + configured months)
        maintenance_type: Optional filter (preventiva | preditiva | corretiva)
        today: Override for the current date (defaults to today in the schedule time zone)

    Returns:
        CalendarOccurrencesResponse ordered by date
    """
    logger.info(f"[CALENDAR] GET /calendar/occurrences horizon={horizon} type={maintenance_type}")

    with maintenance_service() as service:
        effective_today = service.resolve_today(today)
        effective_horizon = service.resolve_horizon(effective_today, horizon)
        occurrences = service.project_calendar(horizon=effective_horizon, today=effective_today)

    if maintenance_type:
        occurrences = [o for o in occurrences if o.type.lower() == maintenance_type.lower()]

    return CalendarOccurrencesResponse(
        horizon=effective_horizon,
        occurrences=[_occurrence_to_response(o) for o in occurrences],
        total=len(occurrences),
    )


@router.post("/occurrences/materialize", response_model=MaterializeResponse)
def materialize_occurrence(request: OccurrenceActionRequest) -> MaterializeResponse:
    """Create a work order for a projected occurrence and advance the plan's schedule."""
    logger.info(f"[CALENDAR] POST /calendar/occurrences/materialize plan_id={request.plan_id} date={request.date}")

    with maintenance_service() as service:
        result = service.materialize_occurrence(request.plan_id, request.date, horizon=request.horizon)

    return materialization_to_response(result)


@router.post("/occurrences/skip", response_model=ScheduleCursorResponse)
def skip_occurrence(request: OccurrenceActionRequest) -> ScheduleCursorResponse:
    """Advance a plan's schedule past an occurrence without creating a work order."""
    logger.info(f"[CALENDAR] POST /calendar/occurrences/skip plan_id={request.plan_id} date={request.date}")

    with maintenance_service() as service:
        cursor = service.skip_occurrence(request.plan_id, request.date, horizon=request.horizon)

    return ScheduleCursorResponse(
        plan_id=cursor.plan_id,
        next_scheduled_date=cursor.next_scheduled_date,
        last_generated_date=cursor.last_generated_date,
    )
