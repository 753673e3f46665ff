from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""


class Equipment(Base):
    """Registered piece of industrial equipment.

    Stores:
    - code: Unique plant code (e.g., "AR-001")
    - name, type: Display name and equipment category
    - criticality: Optional criticality class (A/B/C or free text)
    - status: Operational status (operational, maintenance, stopped)
    """

    __tablename__ = "equipment"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    code: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str | None] = mapped_column(String, nullable=True)
    manufacturer: Mapped[str | None] = mapped_column(String, nullable=True)
    model: Mapped[str | None] = mapped_column(String, nullable=True)
    criticality: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str | None] = mapped_column(String, nullable=True, default="operational")
    installation_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class MaintenancePlan(Base):
    """Recurring maintenance policy for a piece of equipment.

    Recurrence fields:
    - frequency_days: Interval between occurrences; NULL means not auto-scheduled
    - start_date: Anchor used when the schedule cursor is first created
    - end_date: No occurrence is projected after this date
    - schedule_days_of_week: List of weekday names (daily plans only)

    tasks and required_resources are ordered string lists. Legacy rows may
    hold newline-separated text; read them with app.db.serialization.
    """

    __tablename__ = "maintenance_plans"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)  # preventiva | preditiva | corretiva
    equipment_id: Mapped[str | None] = mapped_column(String, ForeignKey("equipment.id"), nullable=True, index=True)
    frequency_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    estimated_duration_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    priority: Mapped[str | None] = mapped_column(String, nullable=True, default="medium")
    active: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tasks: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    required_resources: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    schedule_days_of_week: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    equipment: Mapped[Equipment | None] = relationship(Equipment, lazy="joined")


class MaintenancePlanSchedule(Base):
    """Persisted schedule cursor, one per maintenance plan.

    next_scheduled_date is where projection resumes; last_generated_date is the
    most recently materialized occurrence (display/audit only).
    """

    __tablename__ = "maintenance_plan_schedules"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    maintenance_plan_id: Mapped[str] = mapped_column(
        String, ForeignKey("maintenance_plans.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    next_scheduled_date: Mapped[date] = mapped_column(Date, nullable=False)
    last_generated_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    plan: Mapped[MaintenancePlan] = relationship(MaintenancePlan, lazy="joined")


class WorkOrder(Base):
    """Actionable maintenance work order.

    Orders created from a plan occurrence carry maintenance_plan_id and the
    occurrence date in scheduled_date. Their tasks are copied from the plan.
    There is no unique constraint on (maintenance_plan_id, scheduled_date).
    """

    __tablename__ = "work_orders"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    priority: Mapped[str | None] = mapped_column(String, nullable=True, default="medium")
    status: Mapped[str | None] = mapped_column(String, nullable=True, default="open")
    equipment_id: Mapped[str | None] = mapped_column(String, ForeignKey("equipment.id"), nullable=True, index=True)
    assigned_to: Mapped[str | None] = mapped_column(String, nullable=True)
    maintenance_plan_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("maintenance_plans.id", ondelete="SET NULL"), nullable=True, index=True
    )
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    estimated_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    actual_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    tasks: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    used_resources: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    equipment: Mapped[Equipment | None] = relationship(Equipment, lazy="joined")

    __table_args__ = (Index("idx_work_orders_plan_scheduled", "maintenance_plan_id", "scheduled_date"),)


class YearlyDowntime(Base):
    """Planned equipment stop for one ISO-like week of a year (weeks 1-52)."""

    __tablename__ = "yearly_downtime_map"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    equipment_id: Mapped[str] = mapped_column(String, ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False, index=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    stop_type: Mapped[str | None] = mapped_column(String, nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (UniqueConstraint("equipment_id", "year", "week_number", name="uq_downtime_equipment_year_week"),)
