"""Schedule cursor advance.

Called when an occurrence is materialized into a work order or explicitly
skipped, never by projection itself. The next date is the raw interval
advance; weekend adjustment is reapplied on the next projection pass.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

from app.maintenance.errors import PlanNotSchedulableError
from app.maintenance.recurrence import MaintenancePlanInput, ScheduleCursor


def advance_cursor(
    cursor: ScheduleCursor,
    plan: MaintenancePlanInput,
    materialized_date: date,
) -> ScheduleCursor:
    """Compute the cursor after an occurrence was handled.

    The next date is materialized_date + frequency_days, except that it never
    moves backwards: when that sum is earlier than the current
    next_scheduled_date (an older occurrence handled after a newer one), the
    current value is kept. This deviates from the plain interval formula on
    purpose so the cursor stays ahead of everything already handled.

    Args:
        cursor: Current cursor (not modified)
        plan: Plan the cursor belongs to
        materialized_date: Date of the materialized or skipped occurrence

    Returns:
        New cursor with last_generated_date and next_scheduled_date updated

    Raises:
        PlanNotSchedulableError: If the plan has no positive frequency
    """
    if not plan.has_valid_frequency:
        raise PlanNotSchedulableError(f"Plan {plan.plan_id} has no positive frequency_days")

    next_date = materialized_date + timedelta(days=plan.frequency_days)
    return replace(
        cursor,
        last_generated_date=materialized_date,
        next_scheduled_date=max(next_date, cursor.next_scheduled_date),
    )
