"""API contract schemas for the maintenance backend.

Pydantic models defining what each endpoint accepts and returns. Dates are
ISO 8601 calendar dates (YYYY-MM-DD); string lists are always JSON arrays
in the API, never serialized text.
"""

from datetime import date as date_type

from pydantic import BaseModel, Field, field_validator

# ============================================================================
# Calendar Schemas (/calendar)
# ============================================================================


class VirtualOccurrenceResponse(BaseModel):
    """A projected, not yet materialized plan occurrence."""

    plan_id: str = Field(description="Maintenance plan ID")
    date: date_type = Field(description="Occurrence date (weekday adjusted)")
    plan_name: str = Field(description="Plan name")
    type: str = Field(description="Maintenance type: preventiva | preditiva | corretiva")
    priority: str = Field(description="Priority: low | medium | high | critical")
    equipment_id: str | None = Field(default=None, description="Equipment ID")
    equipment_name: str | None = Field(default=None, description="Equipment name")
    status: str = Field(description="Always 'auto_scheduled'")


class CalendarOccurrencesResponse(BaseModel):
    horizon: date_type = Field(description="Last projected date (inclusive)")
    occurrences: list[VirtualOccurrenceResponse]
    total: int


class OccurrenceActionRequest(BaseModel):
    """Identifies one projected occurrence."""

    plan_id: str
    date: date_type
    horizon: date_type | None = Field(
        default=None,
        description="Horizon the occurrence was projected with (defaults to today + configured months)",
    )


class ScheduleCursorResponse(BaseModel):
    plan_id: str
    next_scheduled_date: date_type
    last_generated_date: date_type | None = None


class MaterializeResponse(BaseModel):
    work_order_id: str
    plan_id: str
    occurrence_date: date_type
    next_scheduled_date: date_type
    last_generated_date: date_type | None


# ============================================================================
# Schedule Schemas (/schedules)
# ============================================================================


class ScheduleResponse(BaseModel):
    plan_id: str
    plan_name: str
    equipment_name: str | None = None
    frequency_days: int | None = None
    frequency_label: str | None = Field(default=None, description="daily | weekly | biweekly | monthly | yearly | '<n> days'")
    active: bool
    next_scheduled_date: date_type
    last_generated_date: date_type | None = None
    urgency: str = Field(description="overdue | today | tomorrow | this_week | future")
    days_until: int


class SchedulesResponse(BaseModel):
    schedules: list[ScheduleResponse]
    total: int


class InitializeSchedulesResponse(BaseModel):
    created: int


class GenerateOrdersResponse(BaseModel):
    generated: list[MaterializeResponse]
    total: int


# ============================================================================
# Work Order Schemas (/work-orders)
# ============================================================================


class WorkOrderCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    type: str
    priority: str = "medium"
    description: str | None = None
    equipment_id: str | None = None
    assigned_to: str | None = None
    scheduled_date: date_type | None = None
    estimated_hours: float | None = Field(default=None, ge=0)


class WorkOrderAssignRequest(BaseModel):
    assigned_to: str | None = None


class WorkOrderExecuteRequest(BaseModel):
    actual_hours: float | None = Field(default=None, ge=0)
    completed_date: date_type | None = Field(default=None, description="Defaults to today")
    used_resources: list[str] | None = None


class WorkOrderResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    type: str
    priority: str | None = None
    status: str
    equipment_id: str | None = None
    equipment_name: str | None = None
    assigned_to: str | None = None
    maintenance_plan_id: str | None = None
    scheduled_date: date_type | None = None
    completed_date: date_type | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None
    tasks: list[str] = Field(default_factory=list, description="Tasks copied from the maintenance plan")
    used_resources: list[str] = Field(default_factory=list)


class WorkOrdersResponse(BaseModel):
    work_orders: list[WorkOrderResponse]
    total: int


# ============================================================================
# Plan & Equipment Schemas (/plans, /equipment)
# ============================================================================

MAINTENANCE_TYPES = {"preventiva", "preditiva", "corretiva"}
PRIORITIES = {"low", "medium", "high", "critical"}


class PlanCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    type: str
    equipment_id: str | None = None
    frequency_days: int | None = Field(default=None, ge=1)
    estimated_duration_hours: float | None = Field(default=None, ge=0)
    priority: str = "medium"
    active: bool = True
    description: str | None = None
    tasks: list[str] = Field(default_factory=list)
    required_resources: list[str] = Field(default_factory=list)
    start_date: date_type | None = None
    end_date: date_type | None = None
    schedule_days_of_week: list[str] = Field(default_factory=list)

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: str) -> str:
        lowered = value.lower()
        if lowered not in MAINTENANCE_TYPES:
            raise ValueError(f"type must be one of {sorted(MAINTENANCE_TYPES)}")
        return lowered

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, value: str) -> str:
        lowered = value.lower()
        if lowered not in PRIORITIES:
            raise ValueError(f"priority must be one of {sorted(PRIORITIES)}")
        return lowered


class PlanUpdateRequest(BaseModel):
    name: str | None = None
    equipment_id: str | None = None
    frequency_days: int | None = Field(default=None, ge=1)
    estimated_duration_hours: float | None = Field(default=None, ge=0)
    priority: str | None = None
    active: bool | None = None
    description: str | None = None
    tasks: list[str] | None = None
    required_resources: list[str] | None = None
    start_date: date_type | None = None
    end_date: date_type | None = None
    schedule_days_of_week: list[str] | None = None

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, value: str | None) -> str | None:
        if value is None:
            return value
        lowered = value.lower()
        if lowered not in PRIORITIES:
            raise ValueError(f"priority must be one of {sorted(PRIORITIES)}")
        return lowered


class PlanResponse(BaseModel):
    id: str
    name: str
    type: str
    equipment_id: str | None = None
    equipment_name: str | None = None
    frequency_days: int | None = None
    estimated_duration_hours: float | None = None
    priority: str | None = None
    active: bool
    description: str | None = None
    tasks: list[str] = Field(default_factory=list)
    required_resources: list[str] = Field(default_factory=list)
    start_date: date_type | None = None
    end_date: date_type | None = None
    schedule_days_of_week: list[str] = Field(default_factory=list)


class PlansResponse(BaseModel):
    plans: list[PlanResponse]
    total: int


class EquipmentCreateRequest(BaseModel):
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: str
    location: str | None = None
    manufacturer: str | None = None
    model: str | None = None
    criticality: str | None = None
    status: str | None = "operational"
    installation_date: date_type | None = None


class EquipmentResponse(EquipmentCreateRequest):
    id: str


class EquipmentListResponse(BaseModel):
    equipment: list[EquipmentResponse]
    total: int


# ============================================================================
# Downtime Map Schemas (/downtime)
# ============================================================================


class DowntimeSaveRequest(BaseModel):
    equipment_id: str
    year: int = Field(ge=1900, le=9999)
    week_number: int = Field(ge=1, le=52)
    stop_type: str | None = None
    reason: str | None = None
    status: str | None = None


class DowntimeResponse(DowntimeSaveRequest):
    id: str


class DowntimeMapResponse(BaseModel):
    year: int
    entries: list[DowntimeResponse]


class MonthHeaderResponse(BaseModel):
    name: str
    first_week: int
    last_week: int
    col_span: int


# ============================================================================
# Report Schemas (/reports)
# ============================================================================


class EquipmentReportResponse(BaseModel):
    equipment_id: str
    equipment_name: str | None = None
    total_orders: int
    corrective_orders: int
    completed_orders: int
    mttr_hours: float | None = Field(default=None, description="Mean hours of completed corrective orders")


class ReportSummaryResponse(BaseModel):
    total_orders: int
    by_status: dict[str, int]
    by_type: dict[str, int]
    by_priority: dict[str, int]
    completion_rate: float
    overdue_orders: int
    equipment: list[EquipmentReportResponse]
