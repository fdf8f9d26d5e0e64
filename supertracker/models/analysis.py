"""
Analysis Models

Plain result objects produced by the aggregation engine and handed to
whatever renders them. No formatting happens here beyond exposing a
rounded view of the numbers.
"""

import calendar
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from supertracker.models.tracker import PaymentCycle


class MonthlyAggregate(BaseModel):
    """Contributions for one month against the expected monthly amount."""

    month: int = Field(..., ge=1, le=12)
    total: Decimal
    expected: Decimal
    variance: Decimal = Field(..., description="total - expected")

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def is_negative(self) -> bool:
        """Under-contributed for the month."""
        return self.variance < 0


class YearlyAggregate(BaseModel):
    """Contributions for one year against the expected annual amount."""

    year: int
    total: Decimal
    expected: Decimal
    variance: Decimal = Field(..., description="total - expected")

    @property
    def is_negative(self) -> bool:
        return self.variance < 0


class AnalysisSummary(BaseModel):
    """Headline numbers shown above the breakdown tables."""

    annual_income: Decimal
    super_rate: Decimal
    payment_cycle: PaymentCycle
    expected_annual: Decimal = Field(..., description="Income times super rate")
    expected_per_payment: Decimal = Field(
        ...,
        description="Expected annual amount split across the cycle's payments"
    )
    total_to_date: Decimal = Field(..., description="Sum of the selected year's contributions")


class AnalysisReport(BaseModel):
    """Everything the analysis panel needs."""

    summary: AnalysisSummary
    monthly: list[MonthlyAggregate] = Field(default_factory=list)
    yearly: list[YearlyAggregate] = Field(default_factory=list)


class CalendarPayload(BaseModel):
    """
    Rendering boundary.

    Contains the selected year's day-month mapping, the year's cycle dates
    and the analysis report. Classification and number formatting are left
    to the renderer.
    """

    year: int
    contributions: dict[str, Decimal] = Field(default_factory=dict)
    cycle_dates: list[date] = Field(default_factory=list)
    report: AnalysisReport
    high_threshold: Decimal = Field(
        ...,
        description="Amounts above this are classed as employer contributions"
    )
