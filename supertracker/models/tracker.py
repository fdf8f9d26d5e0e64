"""
Tracker Settings Models

The user's own settings: what they earn, their super rate, how often they
are paid, and which year they are looking at.

DESIGN DECISION: The persisted JSON uses camelCase keys
(annualIncome, superRate, paymentCycle, selectedYear) so records written by
the browser widget load unchanged. Python code uses snake_case attributes.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


DEFAULT_SUPER_RATE = Decimal("11.0")


class PaymentCycle(str, Enum):
    """
    How often contributions are expected to arrive.

    NONE means no schedule is configured: no cycle days are marked and
    the expected per-payment amount is zero.
    """
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    QUADWEEKLY = "quadweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALFYEAR = "halfyear"
    YEARLY = "yearly"
    NONE = "none"

    @classmethod
    def coerce(cls, value: Any) -> "PaymentCycle | None":
        """
        Turn user or stored input into a cycle.

        Empty input means NONE. Unrecognized input returns None so
        callers can degrade to zero instead of failing.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        text = str(value).strip().lower()
        if not text:
            return cls.NONE
        try:
            return cls(text)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        labels = {
            PaymentCycle.WEEKLY: "Weekly",
            PaymentCycle.BIWEEKLY: "Fortnightly",
            PaymentCycle.QUADWEEKLY: "Every 4 weeks",
            PaymentCycle.MONTHLY: "Monthly",
            PaymentCycle.QUARTERLY: "Quarterly",
            PaymentCycle.HALFYEAR: "Half-yearly",
            PaymentCycle.YEARLY: "Yearly",
            PaymentCycle.NONE: "No cycle",
        }
        return labels[self]


def _current_year() -> int:
    return date.today().year


class TrackerSettings(BaseModel):
    """
    Settings state for one tracker session.

    Initialized from persisted state at startup, mutated by user action,
    persisted on explicit save.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    annual_income: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Gross annual income"
    )
    super_rate: Decimal = Field(
        default=DEFAULT_SUPER_RATE,
        ge=0,
        le=100,
        description="Super guarantee rate as a percentage of income"
    )
    payment_cycle: PaymentCycle = Field(
        default=PaymentCycle.NONE,
        description="Expected contribution frequency"
    )
    selected_year: int = Field(
        default_factory=_current_year,
        ge=1,
        le=9999,
        description="Calendar year being viewed"
    )

    @field_validator('annual_income', 'super_rate', mode='before')
    @classmethod
    def floats_via_str(cls, v: Any) -> Any:
        """Keep float input free of binary noise."""
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator('payment_cycle', mode='before')
    @classmethod
    def empty_cycle_is_none(cls, v: Any) -> Any:
        """The widget stores "" for no cycle."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return PaymentCycle.NONE
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_serializer('annual_income', 'super_rate', when_used='json')
    def money_as_number(self, v: Decimal) -> float:
        return float(v)

    @property
    def expected_annual(self) -> Decimal:
        """Income times super rate."""
        return self.annual_income * self.super_rate / Decimal(100)
