"""
Session Orchestrator for Super Tracker

This module ties together all the components for one user session:
1. Import (raw payload -> validate -> store)
2. Settings (load on start -> edit -> explicit save)
3. Views (selected year's contributions, cycle dates, analysis)

DESIGN DECISION: All state lives on a TrackerSession object.
There are no module-level globals; the UI owns one session and calls it.
"""

import threading
from collections.abc import Sequence
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from uuid import UUID

from supertracker.analysis import build_report
from supertracker.audit import AuditLogger, configure_logging, create_correlation_id
from supertracker.config import Settings, get_settings
from supertracker.models.analysis import AnalysisReport, CalendarPayload
from supertracker.models.audit import AuditEventBuilder
from supertracker.models.contribution import ImportSummary
from supertracker.models.tracker import DEFAULT_SUPER_RATE, PaymentCycle, TrackerSettings
from supertracker.schedule import generate_cycle_dates
from supertracker.services.storage import InMemoryKeyValueStorage, JsonFileKeyValueStorage
from supertracker.state import SettingsRepository
from supertracker.store import ContributionStore, YearData
from supertracker.validation import ValidationError


DEFAULT_HIGH_THRESHOLD = Decimal("500")


def parse_form_number(value: Any, default: Decimal) -> Decimal:
    """
    Read a number typed into a form field.

    Blank, unparseable or negative input gives the default instead of an error.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, float):
        value = str(value)
    try:
        number = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return default
    if not number.is_finite() or number < 0:
        return default
    return number


class TrackerSession:
    """
    Owns the contribution store and the settings for one user.

    Public operations hold the session lock, so a session can be shared
    across the worker threads of a UI host.
    """

    def __init__(
        self,
        store: Optional[ContributionStore] = None,
        settings_repository: Optional[SettingsRepository] = None,
        audit_logger: Optional[AuditLogger] = None,
        high_threshold: Decimal = DEFAULT_HIGH_THRESHOLD,
    ):
        self._store = store or ContributionStore()
        self._repository = settings_repository
        self._audit_logger = audit_logger
        self._high_threshold = high_threshold
        self._lock = threading.RLock()

        if self._repository:
            self._settings = self._repository.load()
        else:
            self._settings = TrackerSettings()
        self._store.select_year(self._settings.selected_year)

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def settings(self) -> TrackerSettings:
        """A copy of the current settings."""
        with self._lock:
            return self._settings.model_copy()

    @property
    def store(self) -> ContributionStore:
        return self._store

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    @property
    def year_data(self) -> YearData:
        return self._store.year_data

    # -------------------------------------------------------------------------
    # User actions
    # -------------------------------------------------------------------------

    def import_data(
        self,
        payload: str | Sequence[Any],
        correlation_id: Optional[UUID] = None,
    ) -> ImportSummary:
        """
        Replace all contributions with an imported payload.

        Args:
            payload: JSON text, or an already-decoded list of records

        Raises:
            ValidationError: If the payload is rejected. Existing data is kept.
        """
        correlation_id = correlation_id or create_correlation_id()

        with self._lock:
            try:
                if isinstance(payload, str):
                    summary = self._store.import_json(payload)
                else:
                    summary = self._store.import_records(payload)
            except ValidationError as e:
                self._audit(AuditEventBuilder.import_rejected(
                    issues=[issue.describe() for issue in e.issues],
                    correlation_id=correlation_id,
                ))
                raise

        self._audit(AuditEventBuilder.contributions_imported(
            record_count=summary.record_count,
            stored_count=summary.stored_count,
            years=summary.years,
            correlation_id=correlation_id,
        ))
        return summary

    def set_payment_cycle(
        self,
        cycle: PaymentCycle | str | None,
        annual_income: Any = None,
        super_rate: Any = None,
        correlation_id: Optional[UUID] = None,
    ) -> TrackerSettings:
        """
        Apply the settings form.

        Income that cannot be read becomes 0, a rate that cannot be read
        becomes the default rate, and an unknown cycle means no cycle.
        Nothing is persisted until save_settings().
        """
        payment_cycle = PaymentCycle.coerce(cycle) or PaymentCycle.NONE
        income = parse_form_number(annual_income, Decimal("0"))
        rate = parse_form_number(super_rate, DEFAULT_SUPER_RATE)
        if rate > 100:
            rate = DEFAULT_SUPER_RATE

        with self._lock:
            self._settings = self._updated_settings(
                payment_cycle=payment_cycle,
                annual_income=income,
                super_rate=rate,
            )
            updated = self._settings.model_copy()

        self._audit(AuditEventBuilder.payment_cycle_updated(
            payment_cycle=payment_cycle.value,
            annual_income=str(income),
            super_rate=str(rate),
            correlation_id=correlation_id,
        ))
        return updated

    def select_year(
        self,
        year: int,
        correlation_id: Optional[UUID] = None,
    ) -> dict[str, Decimal]:
        """
        Switch the viewed year and return its contributions.

        A year outside the calendar range (1 to 9999) cannot hold any
        contributions: it returns an empty mapping and the view is unchanged.
        """
        if not date.min.year <= year <= date.max.year:
            return {}

        with self._lock:
            self._settings = self._updated_settings(selected_year=year)
            contributions = self._store.select_year(year)

        self._audit(AuditEventBuilder.year_selected(
            year=year,
            entry_count=len(contributions),
            correlation_id=correlation_id,
        ))
        return contributions

    def save_settings(self, correlation_id: Optional[UUID] = None) -> TrackerSettings:
        """
        Persist the current settings.

        Without a repository this is a no-op.

        Raises:
            StorageError: If the storage write fails
        """
        with self._lock:
            settings = self._settings.model_copy()
            if self._repository:
                self._repository.save(settings, correlation_id=correlation_id)
        return settings

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def active_contributions(self) -> dict[str, Decimal]:
        return self._store.active_contributions()

    def cycle_dates(self) -> list[date]:
        """Expected payment dates for the selected year. Recomputed every call."""
        settings = self.settings
        return generate_cycle_dates(settings.payment_cycle, settings.selected_year)

    def analysis(self) -> AnalysisReport:
        with self._lock:
            settings = self._settings.model_copy()
            contributions = self._store.active_contributions()
            year_data = self._store.year_data

        return build_report(
            contributions=contributions,
            year_data=year_data,
            cycle=settings.payment_cycle,
            annual_income=settings.annual_income,
            super_rate=settings.super_rate,
        )

    def calendar_payload(self) -> CalendarPayload:
        """Everything a calendar and analysis renderer needs, in one object."""
        with self._lock:
            settings = self._settings.model_copy()
            contributions = self._store.active_contributions()
            report = self.analysis()

        return CalendarPayload(
            year=settings.selected_year,
            contributions=contributions,
            cycle_dates=generate_cycle_dates(settings.payment_cycle, settings.selected_year),
            report=report,
            high_threshold=self._high_threshold,
        )

    def _updated_settings(self, **changes: Any) -> TrackerSettings:
        # model_copy(update=...) skips validation
        return TrackerSettings.model_validate({**self._settings.model_dump(), **changes})

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)


def create_session(
    settings: Optional[Settings] = None,
    use_storage: bool = True,
) -> TrackerSession:
    """
    Factory function to create a fully wired session.

    Args:
        settings: Application settings; defaults to get_settings()
        use_storage: Persist tracker settings to the configured JSON file.
                    Set to False for in-memory only.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings.effective_log_level)
    audit_logger = AuditLogger(history_size=app_settings.audit_history_size)

    if use_storage:
        storage = JsonFileKeyValueStorage(storage_settings.path)
    else:
        storage = InMemoryKeyValueStorage()

    repository = SettingsRepository(
        storage=storage,
        key=storage_settings.settings_key,
        audit_logger=audit_logger,
    )

    return TrackerSession(
        settings_repository=repository,
        audit_logger=audit_logger,
        high_threshold=app_settings.high_contribution_threshold,
    )
