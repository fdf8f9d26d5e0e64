"""
Audit Models for Super Tracker

Every user action that changes tracker state is logged for audit purposes.
This provides:
1. Traceability of imports and settings changes
2. Debugging information when an import is rejected
3. A record of when settings silently fell back to defaults

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Import
    CONTRIBUTIONS_IMPORTED = "contributions_imported"
    IMPORT_REJECTED = "import_rejected"

    # Navigation and user settings
    YEAR_SELECTED = "year_selected"
    PAYMENT_CYCLE_UPDATED = "payment_cycle_updated"

    # Persistence
    SETTINGS_LOADED = "settings_loaded"
    SETTINGS_DEFAULTED = "settings_defaulted"
    SETTINGS_SAVED = "settings_saved"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'contributions', 'settings')"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate events belonging to one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.contributions_imported(...)
        event = AuditEventBuilder.settings_defaulted(reason)
    """

    @staticmethod
    def contributions_imported(
        record_count: int,
        stored_count: int,
        years: list[int],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONTRIBUTIONS_IMPORTED,
            entity_type="contributions",
            correlation_id=correlation_id,
            description=f"Imported {record_count} contribution records",
            details={
                "record_count": record_count,
                "stored_count": stored_count,
                "years": years,
            },
            is_user_action=True,
        )

    @staticmethod
    def import_rejected(
        issues: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="contributions",
            correlation_id=correlation_id,
            description=f"Import rejected with {len(issues)} issue(s)",
            details={"issues": issues[:20]},
            is_user_action=True,
        )

    @staticmethod
    def year_selected(
        year: int,
        entry_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.YEAR_SELECTED,
            severity=AuditSeverity.DEBUG,
            entity_type="contributions",
            correlation_id=correlation_id,
            description=f"Selected year {year}",
            details={"year": year, "entry_count": entry_count},
            is_user_action=True,
        )

    @staticmethod
    def payment_cycle_updated(
        payment_cycle: str,
        annual_income: str,
        super_rate: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_CYCLE_UPDATED,
            entity_type="settings",
            correlation_id=correlation_id,
            description=f"Payment cycle set to {payment_cycle}",
            details={
                "payment_cycle": payment_cycle,
                "annual_income": annual_income,
                "super_rate": super_rate,
            },
            is_user_action=True,
        )

    @staticmethod
    def settings_loaded(key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTINGS_LOADED,
            entity_type="settings",
            description="Loaded saved settings",
            details={"key": key},
        )

    @staticmethod
    def settings_defaulted(key: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTINGS_DEFAULTED,
            severity=AuditSeverity.WARNING,
            entity_type="settings",
            description="Using default settings",
            details={"key": key, "reason": reason},
        )

    @staticmethod
    def settings_saved(
        key: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTINGS_SAVED,
            entity_type="settings",
            correlation_id=correlation_id,
            description="Saved settings",
            details={"key": key},
            is_user_action=True,
        )

    @staticmethod
    def save_failed(
        key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="settings",
            correlation_id=correlation_id,
            description="Failed to save settings",
            details={"key": key},
            error_message=error_message,
            is_user_action=True,
        )
