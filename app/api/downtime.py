"""Yearly downtime map endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response, status

from app.api.errors import raise_not_found
from app.api.schemas.schemas import (
    DowntimeMapResponse,
    DowntimeResponse,
    DowntimeSaveRequest,
    MonthHeaderResponse,
)
from app.db.models import YearlyDowntime
from app.db.session import get_session
from app.downtime.yearly_map import DowntimeEntry, delete_downtime, list_downtime, month_headers, save_downtime

router = APIRouter(prefix="/downtime", tags=["downtime"])


def _downtime_to_response(record: YearlyDowntime) -> DowntimeResponse:
    return DowntimeResponse(
        id=record.id,
        equipment_id=record.equipment_id,
        year=record.year,
        week_number=record.week_number,
        stop_type=record.stop_type,
        reason=record.reason,
        status=record.status,
    )


@router.get("/months", response_model=list[MonthHeaderResponse])
def get_month_headers() -> list[MonthHeaderResponse]:
    return [
        MonthHeaderResponse(name=h.name, first_week=h.first_week, last_week=h.last_week, col_span=h.col_span)
        for h in month_headers()
    ]


@router.get("/{year}", response_model=DowntimeMapResponse)
def get_downtime_map(year: int) -> DowntimeMapResponse:
    with get_session() as session:
        entries = [_downtime_to_response(r) for r in list_downtime(session, year)]
    return DowntimeMapResponse(year=year, entries=entries)


@router.put("", response_model=DowntimeResponse | None)
def put_downtime(request: DowntimeSaveRequest) -> DowntimeResponse | None:
    """Upsert one downtime cell. Returns null when an empty cell had nothing stored."""
    try:
        with get_session() as session:
            record = save_downtime(session, DowntimeEntry(**request.model_dump()))
            return _downtime_to_response(record) if record is not None else None
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(e)) from e


@router.delete("/{downtime_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_downtime(downtime_id: str) -> Response:
    with get_session() as session:
        if not delete_downtime(session, downtime_id):
            raise_not_found("Downtime record", downtime_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
