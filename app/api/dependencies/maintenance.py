"""Scheduling service wiring for API endpoints."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from app.api.errors import raise_http_for_maintenance_error
from app.db.session import get_session
from app.maintenance.errors import BackendWriteError, MaintenanceError
from app.maintenance.repository import SqlMaintenanceRepository
from app.maintenance.service import MaintenanceScheduleService


@contextmanager
def maintenance_service() -> Generator[MaintenanceScheduleService, None, None]:
    """Yield a scheduling service bound to one transactional session.

    Domain errors become HTTP errors; a failed commit is reported as a
    backend write failure.
    """
    try:
        with get_session() as session:
            yield MaintenanceScheduleService(SqlMaintenanceRepository(session))
    except MaintenanceError as e:
        raise_http_for_maintenance_error(e)
    except SQLAlchemyError as e:
        raise_http_for_maintenance_error(BackendWriteError(f"Database commit failed: {type(e).__name__}"))
