"""Translation of domain errors into HTTP responses."""

from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException, status
from loguru import logger

from app.maintenance.errors import (
    BackendFetchError,
    BackendWriteError,
    MaintenanceError,
    OccurrenceAlreadyMaterializedError,
    OccurrenceNotProjectedError,
    PlanNotFoundError,
    PlanNotSchedulableError,
    ScheduleNotFoundError,
)
from app.work_orders.lifecycle import WorkOrderTransitionError

_STATUS_BY_ERROR: dict[type[MaintenanceError], int] = {
    PlanNotFoundError: status.HTTP_404_NOT_FOUND,
    ScheduleNotFoundError: status.HTTP_404_NOT_FOUND,
    PlanNotSchedulableError: status.HTTP_422_UNPROCESSABLE_CONTENT,
    OccurrenceNotProjectedError: status.HTTP_422_UNPROCESSABLE_CONTENT,
    OccurrenceAlreadyMaterializedError: status.HTTP_409_CONFLICT,
    BackendFetchError: status.HTTP_503_SERVICE_UNAVAILABLE,
    BackendWriteError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def raise_http_for_maintenance_error(error: MaintenanceError) -> NoReturn:
    status_code = _STATUS_BY_ERROR.get(type(error), status.HTTP_400_BAD_REQUEST)
    if status_code >= 500:
        logger.error(f"[API] {error.code}: {error.message}")
    else:
        logger.info(f"[API] {error.code}: {error.message}")
    raise HTTPException(status_code=status_code, detail={"code": error.code, "message": error.message}) from error


def raise_http_for_transition_error(error: WorkOrderTransitionError) -> NoReturn:
    logger.info(f"[API] Rejected work order transition: {error}")
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"code": "INVALID_TRANSITION", "message": str(error)},
    ) from error


def raise_not_found(entity: str, entity_id: str) -> NoReturn:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} {entity_id} not found")
