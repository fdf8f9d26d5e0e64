"""
Data Models Package

This package contains all Pydantic models used in Super Tracker.
All data flowing through the system must conform to these schemas.
"""

from supertracker.models.analysis import (
    AnalysisReport,
    AnalysisSummary,
    CalendarPayload,
    MonthlyAggregate,
    YearlyAggregate,
)
from supertracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from supertracker.models.contribution import (
    Contribution,
    ImportIssue,
    ImportRecord,
    ImportSummary,
    ImportValidationResult,
    format_day_month_key,
    parse_day_month_key,
)
from supertracker.models.tracker import (
    DEFAULT_SUPER_RATE,
    PaymentCycle,
    TrackerSettings,
)

__all__ = [
    # Analysis models
    "AnalysisReport",
    "AnalysisSummary",
    "CalendarPayload",
    "MonthlyAggregate",
    "YearlyAggregate",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Contribution models
    "Contribution",
    "ImportIssue",
    "ImportRecord",
    "ImportSummary",
    "ImportValidationResult",
    "format_day_month_key",
    "parse_day_month_key",
    # Settings models
    "DEFAULT_SUPER_RATE",
    "PaymentCycle",
    "TrackerSettings",
]
