"""Maintenance report endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter
from loguru import logger
from sqlalchemy import select

from app.api.schemas.schemas import EquipmentReportResponse, ReportSummaryResponse
from app.config.settings import settings
from app.db.models import WorkOrder
from app.db.session import get_session
from app.maintenance.projection import today_in
from app.reports.summary import WorkOrderFact, summarize_work_orders

router = APIRouter(prefix="/reports", tags=["reports"])


def _to_fact(order: WorkOrder) -> WorkOrderFact:
    return WorkOrderFact(
        work_order_id=order.id,
        type=order.type,
        priority=order.priority,
        status=order.status,
        equipment_id=order.equipment_id,
        equipment_name=order.equipment.name if order.equipment else None,
        scheduled_date=order.scheduled_date,
        completed_date=order.completed_date,
        actual_hours=order.actual_hours,
    )


@router.get("/summary", response_model=ReportSummaryResponse)
def get_summary(
    start_date: date | None = None,
    end_date: date | None = None,
    today: date | None = None,
) -> ReportSummaryResponse:
    """Aggregate work orders, optionally limited to a scheduled date range."""
    query = select(WorkOrder)
    if start_date is not None:
        query = query.where(WorkOrder.scheduled_date >= start_date)
    if end_date is not None:
        query = query.where(WorkOrder.scheduled_date <= end_date)

    with get_session() as session:
        facts = [_to_fact(o) for o in session.execute(query).unique().scalars().all()]

    summary = summarize_work_orders(facts, today or today_in(settings.schedule_timezone))
    logger.debug(f"[REPORTS] Summarized {summary.total_orders} work order(s)")

    return ReportSummaryResponse(
        total_orders=summary.total_orders,
        by_status=summary.by_status,
        by_type=summary.by_type,
        by_priority=summary.by_priority,
        completion_rate=summary.completion_rate,
        overdue_orders=summary.overdue_orders,
        equipment=[EquipmentReportResponse(**asdict(r)) for r in summary.equipment],
    )
