"""Maintenance plan and equipment registry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.api.errors import raise_not_found
from app.api.schemas.schemas import (
    EquipmentCreateRequest,
    EquipmentListResponse,
    EquipmentResponse,
    PlanCreateRequest,
    PlanResponse,
    PlansResponse,
    PlanUpdateRequest,
)
from app.db.models import Equipment, MaintenancePlan
from app.db.serialization import clean_string_list, decode_string_list
from app.db.session import get_session
from app.maintenance.recurrence import Weekday, parse_weekdays

router = APIRouter(tags=["plans"])

_LIST_FIELDS = ("tasks", "required_resources", "schedule_days_of_week")


def _normalize_weekdays(names: list[str]) -> list[str]:
    """Keep valid weekday names in Monday-first order."""
    parsed = parse_weekdays(names) or frozenset()
    return [day.value for day in Weekday if day in parsed]


def plan_to_response(plan: MaintenancePlan) -> PlanResponse:
    return PlanResponse(
        id=plan.id,
        name=plan.name,
        type=plan.type,
        equipment_id=plan.equipment_id,
        equipment_name=plan.equipment.name if plan.equipment else None,
        frequency_days=plan.frequency_days,
        estimated_duration_hours=plan.estimated_duration_hours,
        priority=plan.priority,
        active=bool(plan.active),
        description=plan.description,
        tasks=decode_string_list(plan.tasks),
        required_resources=decode_string_list(plan.required_resources),
        start_date=plan.start_date,
        end_date=plan.end_date,
        schedule_days_of_week=decode_string_list(plan.schedule_days_of_week),
    )


def _validate_dates(start_date, end_date) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail="end_date must not be before start_date")


@router.get("/plans", response_model=PlansResponse)
def list_plans(active: bool | None = None) -> PlansResponse:
    query = select(MaintenancePlan).order_by(MaintenancePlan.name)
    if active is not None:
        query = query.where(MaintenancePlan.active.is_(active))
    with get_session() as session:
        plans = [plan_to_response(p) for p in session.execute(query).unique().scalars().all()]
    return PlansResponse(plans=plans, total=len(plans))


@router.post("/plans", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
def create_plan(request: PlanCreateRequest) -> PlanResponse:
    _validate_dates(request.start_date, request.end_date)
    with get_session() as session:
        plan = MaintenancePlan(
            name=request.name,
            type=request.type,
            equipment_id=request.equipment_id,
            frequency_days=request.frequency_days,
            estimated_duration_hours=request.estimated_duration_hours,
            priority=request.priority,
            active=request.active,
            description=request.description,
            tasks=clean_string_list(request.tasks),
            required_resources=clean_string_list(request.required_resources),
            start_date=request.start_date,
            end_date=request.end_date,
            schedule_days_of_week=clean_string_list(_normalize_weekdays(request.schedule_days_of_week)),
        )
        session.add(plan)
        session.flush()
        session.refresh(plan)
        response = plan_to_response(plan)
    logger.info(f"[PLANS] Created plan id={response.id} name={response.name}")
    return response


@router.patch("/plans/{plan_id}", response_model=PlanResponse)
def update_plan(plan_id: str, request: PlanUpdateRequest) -> PlanResponse:
    """Partially update a plan. Schedule cursors are not touched."""
    changes = request.model_dump(exclude_unset=True)

    with get_session() as session:
        plan = session.get(MaintenancePlan, plan_id)
        if plan is None:
            raise_not_found("Maintenance plan", plan_id)

        if "schedule_days_of_week" in changes and changes["schedule_days_of_week"] is not None:
            changes["schedule_days_of_week"] = _normalize_weekdays(changes["schedule_days_of_week"])
        for field_name, value in changes.items():
            if field_name in _LIST_FIELDS:
                value = clean_string_list(value)
            setattr(plan, field_name, value)

        _validate_dates(plan.start_date, plan.end_date)
        session.flush()
        session.refresh(plan)
        response = plan_to_response(plan)

    logger.info(f"[PLANS] Updated plan id={plan_id} fields={sorted(changes)}")
    return response


def _equipment_to_response(equipment: Equipment) -> EquipmentResponse:
    return EquipmentResponse(
        id=equipment.id,
        code=equipment.code,
        name=equipment.name,
        type=equipment.type,
        location=equipment.location,
        manufacturer=equipment.manufacturer,
        model=equipment.model,
        criticality=equipment.criticality,
        status=equipment.status,
        installation_date=equipment.installation_date,
    )


@router.get("/equipment", response_model=EquipmentListResponse)
def list_equipment() -> EquipmentListResponse:
    with get_session() as session:
        rows = session.execute(select(Equipment).order_by(Equipment.name)).scalars().all()
        equipment = [_equipment_to_response(e) for e in rows]
    return EquipmentListResponse(equipment=equipment, total=len(equipment))


@router.post("/equipment", response_model=EquipmentResponse, status_code=status.HTTP_201_CREATED)
def create_equipment(request: EquipmentCreateRequest) -> EquipmentResponse:
    try:
        with get_session() as session:
            equipment = Equipment(**request.model_dump())
            session.add(equipment)
            session.flush()
            response = _equipment_to_response(equipment)
    except IntegrityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Equipment code '{request.code}' already exists") from e
    logger.info(f"[EQUIPMENT] Created equipment id={response.id} code={response.code}")
    return response
