"""
Contribution Store

Holds imported contributions grouped by year, each year keyed by "DD.MM".

GUARANTEES:
- An import either fully replaces the store or leaves it untouched
- Within one import, a later record for the same day wins
- Reads hand out copies, never the internal dicts
"""

import threading
from collections.abc import Sequence
from decimal import Decimal
from typing import Any, Optional

from supertracker.models.contribution import (
    Contribution,
    ImportRecord,
    ImportSummary,
    parse_day_month_key,
)
from supertracker.validation import ImportValidator


YearData = dict[int, dict[str, Decimal]]


class ContributionStore:
    """
    In-memory store of contributions for one session.

    Every public operation holds the store lock, so one store can be
    shared by a multi-threaded host.
    """

    def __init__(self, validator: Optional[ImportValidator] = None):
        self._validator = validator or ImportValidator()
        self._data: YearData = {}
        self._selected_year: Optional[int] = None
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def import_records(self, records: Sequence[Any]) -> ImportSummary:
        """
        Replace the store with the given raw records.

        Args:
            records: Sequence of {"date": ISO string, "amount": number}

        Returns:
            ImportSummary describing what was stored

        Raises:
            ValidationError: If the payload or any record is invalid.
                The store is unchanged in that case.
        """
        parsed = self._validator.validate_or_raise(records)
        data, overwritten = self._group_by_year(parsed)

        with self._lock:
            self._data = data

        return ImportSummary(
            record_count=len(parsed),
            stored_count=sum(len(days) for days in data.values()),
            overwritten_count=overwritten,
            years=sorted(data),
        )

    def import_json(self, text: str) -> ImportSummary:
        """
        Decode a JSON document and import it.

        Raises:
            ValidationError: If the text is not JSON or the payload is invalid
        """
        return self.import_records(self._validator.parse_json(text))

    def _group_by_year(self, records: list[ImportRecord]) -> tuple[YearData, int]:
        data: YearData = {}
        overwritten = 0
        for record in records:
            contribution = Contribution.from_record(record)
            days = data.setdefault(contribution.year, {})
            if contribution.key in days:
                overwritten += 1
            days[contribution.key] = contribution.amount
        return data, overwritten

    # -------------------------------------------------------------------------
    # Year selection
    # -------------------------------------------------------------------------

    def select_year(self, year: int) -> dict[str, Decimal]:
        """
        Make a year active and return its day-month mapping.

        Returns an empty mapping for a year without data. Never fails.
        """
        with self._lock:
            self._selected_year = year
            return dict(self._data.get(year, {}))

    def active_contributions(self) -> dict[str, Decimal]:
        """The selected year's mapping, empty if nothing is selected or imported."""
        with self._lock:
            if self._selected_year is None:
                return {}
            return dict(self._data.get(self._selected_year, {}))

    @property
    def selected_year(self) -> Optional[int]:
        with self._lock:
            return self._selected_year

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def year_data(self) -> YearData:
        """Deep copy of everything stored."""
        with self._lock:
            return {year: dict(days) for year, days in self._data.items()}

    @property
    def years(self) -> list[int]:
        with self._lock:
            return sorted(self._data)

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return not self._data

    def contributions(self, year: int) -> list[Contribution]:
        """A year's entries as Contribution objects, in calendar order."""
        with self._lock:
            days = dict(self._data.get(year, {}))

        result = []
        for key, amount in days.items():
            day, month = parse_day_month_key(key)
            result.append(Contribution(day=day, month=month, year=year, amount=amount))
        result.sort(key=lambda c: (c.month, c.day))
        return result
