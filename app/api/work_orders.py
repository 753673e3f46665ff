"""Work order endpoints: listing, manual creation and lifecycle actions."""

from __future__ import annotations

from fastapi import APIRouter, Response, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.errors import raise_http_for_transition_error, raise_not_found
from app.api.schemas.schemas import (
    WorkOrderAssignRequest,
    WorkOrderCreateRequest,
    WorkOrderExecuteRequest,
    WorkOrderResponse,
    WorkOrdersResponse,
)
from app.config.settings import settings
from app.db.models import WorkOrder
from app.db.serialization import decode_string_list
from app.db.session import get_session
from app.maintenance.projection import today_in
from app.work_orders.lifecycle import (
    WorkOrderStatus,
    WorkOrderTransitionError,
    assign_work_order,
    cancel_work_order,
    current_status,
    execute_work_order,
    start_work_order,
)

router = APIRouter(prefix="/work-orders", tags=["work-orders"])


def work_order_to_response(order: WorkOrder) -> WorkOrderResponse:
    return WorkOrderResponse(
        id=order.id,
        title=order.title,
        description=order.description,
        type=order.type,
        priority=order.priority,
        status=current_status(order).value,
        equipment_id=order.equipment_id,
        equipment_name=order.equipment.name if order.equipment else None,
        assigned_to=order.assigned_to,
        maintenance_plan_id=order.maintenance_plan_id,
        scheduled_date=order.scheduled_date,
        completed_date=order.completed_date,
        estimated_hours=order.estimated_hours,
        actual_hours=order.actual_hours,
        tasks=decode_string_list(order.tasks),
        used_resources=decode_string_list(order.used_resources),
    )


def _get_order_or_404(session: Session, work_order_id: str) -> WorkOrder:
    order = session.get(WorkOrder, work_order_id)
    if order is None:
        raise_not_found("Work order", work_order_id)
    return order


@router.get("", response_model=WorkOrdersResponse)
def list_work_orders(
    status_filter: str | None = None,
    equipment_id: str | None = None,
    maintenance_plan_id: str | None = None,
) -> WorkOrdersResponse:
    """List work orders, most recently created first."""
    query = select(WorkOrder).order_by(WorkOrder.created_at.desc())
    if status_filter:
        query = query.where(WorkOrder.status == status_filter)
    if equipment_id:
        query = query.where(WorkOrder.equipment_id == equipment_id)
    if maintenance_plan_id:
        query = query.where(WorkOrder.maintenance_plan_id == maintenance_plan_id)

    with get_session() as session:
        orders = [work_order_to_response(o) for o in session.execute(query).unique().scalars().all()]

    return WorkOrdersResponse(work_orders=orders, total=len(orders))


@router.post("", response_model=WorkOrderResponse, status_code=status.HTTP_201_CREATED)
def create_work_order(request: WorkOrderCreateRequest) -> WorkOrderResponse:
    """Create a manual work order (not linked to a maintenance plan)."""
    with get_session() as session:
        order = WorkOrder(
            title=request.title,
            description=request.description,
            type=request.type,
            priority=request.priority,
            status=WorkOrderStatus.OPEN.value,
            equipment_id=request.equipment_id,
            assigned_to=request.assigned_to,
            scheduled_date=request.scheduled_date,
            estimated_hours=request.estimated_hours,
        )
        session.add(order)
        session.flush()
        response = work_order_to_response(order)

    logger.info(f"[WORK_ORDER] Created manual work order id={response.id}")
    return response


@router.post("/{work_order_id}/assign", response_model=WorkOrderResponse)
def assign(work_order_id: str, request: WorkOrderAssignRequest) -> WorkOrderResponse:
    try:
        with get_session() as session:
            order = assign_work_order(_get_order_or_404(session, work_order_id), request.assigned_to)
            session.flush()
            return work_order_to_response(order)
    except WorkOrderTransitionError as e:
        raise_http_for_transition_error(e)


@router.post("/{work_order_id}/start", response_model=WorkOrderResponse)
def start(work_order_id: str) -> WorkOrderResponse:
    try:
        with get_session() as session:
            order = start_work_order(_get_order_or_404(session, work_order_id))
            session.flush()
            return work_order_to_response(order)
    except WorkOrderTransitionError as e:
        raise_http_for_transition_error(e)


@router.post("/{work_order_id}/execute", response_model=WorkOrderResponse)
def execute(work_order_id: str, request: WorkOrderExecuteRequest) -> WorkOrderResponse:
    """Mark a work order as completed, recording hours and used resources."""
    completed_date = request.completed_date or today_in(settings.schedule_timezone)
    try:
        with get_session() as session:
            order = execute_work_order(
                _get_order_or_404(session, work_order_id),
                completed_date=completed_date,
                actual_hours=request.actual_hours,
                used_resources=request.used_resources,
            )
            session.flush()
            return work_order_to_response(order)
    except WorkOrderTransitionError as e:
        raise_http_for_transition_error(e)


@router.post("/{work_order_id}/cancel", response_model=WorkOrderResponse)
def cancel(work_order_id: str) -> WorkOrderResponse:
    try:
        with get_session() as session:
            order = cancel_work_order(_get_order_or_404(session, work_order_id))
            session.flush()
            return work_order_to_response(order)
    except WorkOrderTransitionError as e:
        raise_http_for_transition_error(e)


@router.delete("/{work_order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_work_order(work_order_id: str) -> Response:
    """Delete a work order (the only way to resolve a duplicate materialization)."""
    with get_session() as session:
        session.delete(_get_order_or_404(session, work_order_id))
    logger.info(f"[WORK_ORDER] Deleted id={work_order_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
