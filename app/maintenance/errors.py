"""Maintenance scheduling error types.

Standard error codes:
- PLAN_NOT_FOUND: Referenced maintenance plan does not exist
- PLAN_NOT_SCHEDULABLE: Plan is inactive or has no positive frequency
- SCHEDULE_NOT_FOUND: Plan has no schedule cursor yet
- OCCURRENCE_NOT_PROJECTED: Date is not a current projected occurrence of the plan
- OCCURRENCE_ALREADY_MATERIALIZED: A work order already covers (plan, date)
- BACKEND_FETCH_FAILED: Plans, schedules or work orders could not be read
- BACKEND_WRITE_FAILED: Work order or cursor write did not complete
"""


class MaintenanceError(Exception):
    """Base class for maintenance scheduling errors.

    Attributes:
        code: Error code (e.g., "PLAN_NOT_FOUND", "BACKEND_WRITE_FAILED")
        message: Human readable message
    """

    code = "MAINTENANCE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.code}: {message}")


class PlanNotFoundError(MaintenanceError):
    code = "PLAN_NOT_FOUND"


class PlanNotSchedulableError(MaintenanceError):
    code = "PLAN_NOT_SCHEDULABLE"


class ScheduleNotFoundError(MaintenanceError):
    code = "SCHEDULE_NOT_FOUND"


class OccurrenceNotProjectedError(MaintenanceError):
    code = "OCCURRENCE_NOT_PROJECTED"


class OccurrenceAlreadyMaterializedError(MaintenanceError):
    code = "OCCURRENCE_ALREADY_MATERIALIZED"


class BackendFetchError(MaintenanceError):
    """Raised when reads from the backing store fail.

    The projection never runs on partial input; callers decide whether to
    retry or show a stale view.
    """

    code = "BACKEND_FETCH_FAILED"


class BackendWriteError(MaintenanceError):
    """Raised when a work order or cursor write fails.

    The cursor is left as it was; the occurrence stays eligible for a retry.
    """

    code = "BACKEND_WRITE_FAILED"
