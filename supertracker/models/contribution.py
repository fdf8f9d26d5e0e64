"""
Contribution Models for Super Tracker

These models define the schemas for contribution data flowing from the
import boundary into the store. They are designed to:
1. Reject malformed records before anything is stored
2. Keep money as Decimal from the first moment it enters the system
3. Give every day of the year one canonical key

DESIGN DECISION: The canonical day key is "DD.MM" (day first, zero padded).
It carries no year, so the store nests it under the year the record came from.
"""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


DAY_MONTH_SEPARATOR = "."


def format_day_month_key(day: int, month: int) -> str:
    """
    Build the canonical "DD.MM" key for a calendar day.

    Raises:
        ValueError: If day is outside 1-31 or month outside 1-12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range: {month}")
    if not 1 <= day <= 31:
        raise ValueError(f"Day out of range: {day}")
    return f"{day:02d}{DAY_MONTH_SEPARATOR}{month:02d}"


def parse_day_month_key(key: str) -> tuple[int, int]:
    """
    Split a "DD.MM" key back into (day, month).

    Unpadded keys such as "5.3" are accepted as well.

    Raises:
        ValueError: If the key is not two numeric parts in range
    """
    parts = key.split(DAY_MONTH_SEPARATOR)
    if len(parts) != 2 or not all(part.strip().isdigit() for part in parts):
        raise ValueError(f"Invalid day-month key: {key!r}")
    day, month = int(parts[0]), int(parts[1])
    # Reuse the range checks
    format_day_month_key(day, month)
    return day, month


def to_decimal(value: Any) -> Decimal:
    """
    Convert a number to Decimal without picking up binary float noise.

    Floats go through str() so 0.1 becomes Decimal("0.1"),
    not Decimal("0.1000000000000000055511151231257827...").
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def parse_iso_date(value: str) -> date:
    """
    Parse an ISO-8601 calendar date.

    Full ISO datetimes are accepted too; only their date part is kept.

    Raises:
        ValueError: If the string is not an ISO date or datetime
    """
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()


# =============================================================================
# IMPORT RECORD
# =============================================================================

class ImportRecord(BaseModel):
    """
    One raw element of an import payload after schema validation.

    CRITICAL: Amounts must arrive as JSON numbers. Strings and booleans are
    rejected rather than coerced.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    contribution_date: date = Field(
        ...,
        alias="date",
        description="Calendar date of the contribution"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Contribution amount"
    )

    @field_validator('contribution_date', mode='before')
    @classmethod
    def parse_date(cls, v: Any) -> date:
        """Only ISO strings are accepted as dates."""
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, date):
            return v
        if not isinstance(v, str):
            raise ValueError("date must be an ISO-8601 string")
        try:
            return parse_iso_date(v)
        except ValueError:
            raise ValueError(f"unparseable date: {v!r}") from None

    @field_validator('amount', mode='before')
    @classmethod
    def parse_amount(cls, v: Any) -> Decimal:
        """Only finite numbers are accepted as amounts."""
        if isinstance(v, bool) or not isinstance(v, (int, float, Decimal)):
            raise ValueError("amount must be a number")
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("amount must be finite")
        if isinstance(v, Decimal) and not v.is_finite():
            raise ValueError("amount must be finite")
        return to_decimal(v)


# =============================================================================
# STORED CONTRIBUTION
# =============================================================================

class Contribution(BaseModel):
    """
    A single contribution as held by the store.

    Immutable once imported.
    """
    model_config = ConfigDict(frozen=True)

    day: int = Field(..., ge=1, le=31)
    month: int = Field(..., ge=1, le=12)
    year: int
    amount: Decimal = Field(..., ge=0)

    @property
    def key(self) -> str:
        """Canonical "DD.MM" key for this contribution."""
        return format_day_month_key(self.day, self.month)

    @classmethod
    def from_record(cls, record: ImportRecord) -> "Contribution":
        return cls(
            day=record.contribution_date.day,
            month=record.contribution_date.month,
            year=record.contribution_date.year,
            amount=record.amount,
        )


# =============================================================================
# VALIDATION / IMPORT RESULTS
# =============================================================================

class ImportIssue(BaseModel):
    """A single problem found in an import payload."""

    index: int | None = Field(
        default=None,
        description="Position of the offending record, None for payload-level issues"
    )
    field: str = Field(
        ...,
        description="Field with the issue (e.g. 'date', 'amount', 'payload')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )

    def describe(self) -> str:
        if self.index is None:
            return self.message
        return f"record {self.index}: {self.field}: {self.message}"


class ImportValidationResult(BaseModel):
    """
    Tagged result of validating an import payload.

    Either is_valid with every record parsed, or invalid with the issues
    that caused the rejection. Never both.
    """

    is_valid: bool
    records: list[ImportRecord] = Field(default_factory=list)
    issues: list[ImportIssue] = Field(default_factory=list)


class ImportSummary(BaseModel):
    """What a successful import did to the store."""

    record_count: int = Field(..., ge=0, description="Records in the payload")
    stored_count: int = Field(..., ge=0, description="Distinct day entries stored")
    overwritten_count: int = Field(
        ...,
        ge=0,
        description="Records replaced by a later record for the same day"
    )
    years: list[int] = Field(default_factory=list)
