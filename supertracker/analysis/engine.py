"""
Aggregation & Variance Engine

DESIGN DECISION: Aggregation is DETERMINISTIC and returns plain models.
Nothing here knows how results are displayed.

All arithmetic is Decimal. Inputs given as float are converted through
str() first, so many small additions do not drift. Rounding to cents
happens only for display, via round_money().

Known simplification: expected amounts always use the current income and
super rate, including for past years.
"""

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from supertracker.models.analysis import (
    AnalysisReport,
    AnalysisSummary,
    MonthlyAggregate,
    YearlyAggregate,
)
from supertracker.models.contribution import parse_day_month_key, to_decimal
from supertracker.models.tracker import PaymentCycle


ZERO = Decimal("0")
CENT = Decimal("0.01")
MONTHS_PER_YEAR = 12

OCCURRENCES_PER_YEAR: dict[PaymentCycle, int] = {
    PaymentCycle.WEEKLY: 52,
    PaymentCycle.BIWEEKLY: 26,
    PaymentCycle.QUADWEEKLY: 13,
    PaymentCycle.MONTHLY: 12,
    PaymentCycle.QUARTERLY: 4,
    PaymentCycle.HALFYEAR: 2,
    PaymentCycle.YEARLY: 1,
}


def round_money(value: Any) -> Decimal:
    """Round to cents, half up, for display."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def occurrences_per_year(cycle: PaymentCycle | str | None) -> int:
    """Payments per year for a cycle; 0 for NONE or unrecognized cycles."""
    coerced = PaymentCycle.coerce(cycle)
    if coerced is None:
        return 0
    return OCCURRENCES_PER_YEAR.get(coerced, 0)


def expected_annual_contribution(annual_income: Any, super_rate: Any) -> Decimal:
    """income * rate / 100"""
    return to_decimal(annual_income) * to_decimal(super_rate) / Decimal(100)


def expected_contribution(
    cycle: PaymentCycle | str | None,
    annual_income: Any,
    super_rate: Any,
) -> Decimal:
    """
    Expected amount of a single payment under the given cycle.

    Returns 0 when the cycle is empty or unrecognized.
    """
    occurrences = occurrences_per_year(cycle)
    if occurrences == 0:
        return ZERO
    return expected_annual_contribution(annual_income, super_rate) / occurrences


def total_contributions(contributions: Mapping[str, Any]) -> Decimal:
    """Sum of all amounts; 0 for an empty mapping."""
    return sum((to_decimal(amount) for amount in contributions.values()), ZERO)


def monthly_breakdown(
    contributions: Mapping[str, Any],
    annual_income: Any,
    super_rate: Any,
) -> list[MonthlyAggregate]:
    """
    Per-month totals for one year's day-month mapping.

    Only months with at least one contribution appear, in month order.
    Expected is the same for every month: a twelfth of the annual amount.
    """
    expected = expected_annual_contribution(annual_income, super_rate) / MONTHS_PER_YEAR

    totals: dict[int, Decimal] = {}
    for key, amount in contributions.items():
        _, month = parse_day_month_key(key)
        totals[month] = totals.get(month, ZERO) + to_decimal(amount)

    return [
        MonthlyAggregate(
            month=month,
            total=total,
            expected=expected,
            variance=total - expected,
        )
        for month, total in sorted(totals.items())
    ]


def yearly_breakdown(
    year_data: Mapping[int, Mapping[str, Any]],
    annual_income: Any,
    super_rate: Any,
) -> list[YearlyAggregate]:
    """One aggregate per stored year, oldest first."""
    expected = expected_annual_contribution(annual_income, super_rate)

    result = []
    for year in sorted(year_data):
        total = total_contributions(year_data[year])
        result.append(YearlyAggregate(
            year=year,
            total=total,
            expected=expected,
            variance=total - expected,
        ))
    return result


def analysis_summary(
    contributions: Mapping[str, Any],
    cycle: PaymentCycle | str | None,
    annual_income: Any,
    super_rate: Any,
) -> AnalysisSummary:
    """Headline numbers for the selected year."""
    return AnalysisSummary(
        annual_income=to_decimal(annual_income),
        super_rate=to_decimal(super_rate),
        payment_cycle=PaymentCycle.coerce(cycle) or PaymentCycle.NONE,
        expected_annual=expected_annual_contribution(annual_income, super_rate),
        expected_per_payment=expected_contribution(cycle, annual_income, super_rate),
        total_to_date=total_contributions(contributions),
    )


def build_report(
    contributions: Mapping[str, Any],
    year_data: Mapping[int, Mapping[str, Any]],
    cycle: PaymentCycle | str | None,
    annual_income: Any,
    super_rate: Any,
) -> AnalysisReport:
    """Summary plus monthly and yearly breakdowns in one object."""
    return AnalysisReport(
        summary=analysis_summary(contributions, cycle, annual_income, super_rate),
        monthly=monthly_breakdown(contributions, annual_income, super_rate),
        yearly=yearly_breakdown(year_data, annual_income, super_rate),
    )
