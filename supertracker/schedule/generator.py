"""
Payment Cycle Schedule

Expected payment dates for a calendar year, given a pay frequency.

Dates start on January 1 and step forward until they leave the year.
Month and year steps use relativedelta, always measured from January 1
(start + n * step), so a day that does not exist in the target month is
clamped to that month's last day rather than rolling into the next month.
"""

from collections.abc import Iterable
from datetime import date
from typing import Any

from dateutil.relativedelta import relativedelta

from supertracker.models.contribution import format_day_month_key
from supertracker.models.tracker import PaymentCycle


CYCLE_STEPS: dict[PaymentCycle, relativedelta] = {
    PaymentCycle.WEEKLY: relativedelta(days=7),
    PaymentCycle.BIWEEKLY: relativedelta(days=14),
    PaymentCycle.QUADWEEKLY: relativedelta(days=28),
    PaymentCycle.MONTHLY: relativedelta(months=1),
    PaymentCycle.QUARTERLY: relativedelta(months=3),
    PaymentCycle.HALFYEAR: relativedelta(months=6),
    PaymentCycle.YEARLY: relativedelta(years=1),
}


def generate_cycle_dates(cycle: PaymentCycle | str | None, target_year: int) -> list[date]:
    """
    Expected payment dates in target_year, in order.

    Returns an empty list for NONE, empty or unrecognized cycles.
    """
    step = CYCLE_STEPS.get(PaymentCycle.coerce(cycle))
    if step is None:
        return []

    start = date(target_year, 1, 1)
    dates = []
    n = 0
    current = start
    while current.year == target_year:
        dates.append(current)
        n += 1
        try:
            current = start + step * n
        except (ValueError, OverflowError):
            # stepped past date.max, which only happens in year 9999
            break
    return dates


def cycle_day_keys(cycle_dates: Iterable[date]) -> set[str]:
    """Day-month keys of the given dates."""
    return {format_day_month_key(d.day, d.month) for d in cycle_dates}


def is_cycle_day(cycle_dates: Iterable[Any], day: int, month: int) -> bool:
    """Whether any cycle date falls on this day and month. The year is ignored."""
    return any(d.day == day and d.month == month for d in cycle_dates)
