"""Aggregation and variance package."""

from supertracker.analysis.engine import (
    OCCURRENCES_PER_YEAR,
    analysis_summary,
    build_report,
    expected_annual_contribution,
    expected_contribution,
    monthly_breakdown,
    occurrences_per_year,
    round_money,
    total_contributions,
    yearly_breakdown,
)

__all__ = [
    "OCCURRENCES_PER_YEAR",
    "analysis_summary",
    "build_report",
    "expected_annual_contribution",
    "expected_contribution",
    "monthly_breakdown",
    "occurrences_per_year",
    "round_money",
    "total_contributions",
    "yearly_breakdown",
]
