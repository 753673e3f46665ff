"""Recurring maintenance projection pipeline.

Plan + schedule cursor -> projected candidates -> weekend adjustment ->
suppression of already materialized occurrences -> virtual occurrences.

Read-only and deterministic. Inputs are in-memory snapshots fetched by the
caller; nothing here performs I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta
from loguru import logger

from app.maintenance.deduplication import (
    MaterializedWorkOrderInput,
    VirtualOccurrence,
    build_materialized_keys,
    filter_materialized,
)
from app.maintenance.recurrence import MaintenancePlanInput, ScheduleCursor, project_occurrences


def today_in(timezone_name: str) -> date:
    """Current calendar date in the configured schedule time zone."""
    return datetime.now(ZoneInfo(timezone_name)).date()


def default_horizon(today: date, months: int = 3) -> date:
    """Projection cutoff: today plus a number of calendar months."""
    return today + relativedelta(months=months)


def project_plan(
    plan: MaintenancePlanInput,
    cursor: ScheduleCursor,
    horizon: date,
    materialized_keys: set[tuple[str, date]],
) -> list[VirtualOccurrence]:
    """Project virtual occurrences for a single plan.

    Returns an empty list for inactive or non-schedulable plans.
    """
    if not plan.is_schedulable:
        return []
    candidates = project_occurrences(plan, cursor, horizon)
    return list(filter_materialized(plan, candidates, materialized_keys))


def project_virtual_occurrences(
    plans: Iterable[MaintenancePlanInput],
    cursors: Mapping[str, ScheduleCursor],
    work_orders: Iterable[MaterializedWorkOrderInput],
    horizon: date,
) -> list[VirtualOccurrence]:
    """Project all auto-scheduled occurrences up to the horizon.

    Args:
        plans: Maintenance plans (inactive / non-schedulable ones are skipped)
        cursors: Schedule cursors keyed by plan id (plans without one are skipped)
        work_orders: Existing work orders used for suppression
        horizon: Last date (inclusive) to project

    Returns:
        Virtual occurrences ordered by (date, plan name, plan id)
    """
    materialized_keys = build_materialized_keys(work_orders)

    occurrences: list[VirtualOccurrence] = []
    skipped_plans = 0
    for plan in plans:
        cursor = cursors.get(plan.plan_id)
        if cursor is None or not plan.is_schedulable:
            skipped_plans += 1
            continue
        occurrences.extend(project_plan(plan, cursor, horizon, materialized_keys))

    occurrences.sort(key=lambda o: (o.date, o.plan_name, o.plan_id))

    logger.info(
        f"[PROJECTION] horizon={horizon.isoformat()} occurrences={len(occurrences)} "
        f"skipped_plans={skipped_plans} materialized_keys={len(materialized_keys)}"
    )
    return occurrences
