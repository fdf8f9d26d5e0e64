"""Integration tests for TrackerSession with in-memory storage."""

import json
import logging

import pytest
from datetime import date
from decimal import Decimal

from supertracker.audit import AuditLogger, create_correlation_id
from supertracker.config import get_settings
from supertracker.models.audit import AuditEventType
from supertracker.models.tracker import PaymentCycle
from supertracker.orchestrator import TrackerSession, create_session, parse_form_number
from supertracker.services.storage import InMemoryKeyValueStorage
from supertracker.state import DEFAULT_SETTINGS_KEY, SettingsRepository
from supertracker.validation import ValidationError


RECORDS = [
    {"date": "2024-01-05", "amount": 600},
    {"date": "2024-01-19", "amount": 400},
    {"date": "2024-02-02", "amount": 300},
    {"date": "2023-06-30", "amount": 1200},
]


@pytest.fixture
def storage():
    return InMemoryKeyValueStorage({
        DEFAULT_SETTINGS_KEY: json.dumps({
            "annualIncome": 120000,
            "superRate": 10,
            "paymentCycle": "monthly",
            "selectedYear": 2024,
        }),
    })


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def session(storage, audit_logger):
    repository = SettingsRepository(storage, audit_logger=audit_logger)
    return TrackerSession(settings_repository=repository, audit_logger=audit_logger)


class TestSessionStartup:
    """Tests for session construction."""

    def test_loads_persisted_settings(self, session):
        """Test settings come from storage and select the saved year."""
        assert session.settings.payment_cycle == PaymentCycle.MONTHLY
        assert session.settings.selected_year == 2024
        assert session.store.selected_year == 2024

    def test_without_repository_uses_defaults(self):
        """Test a bare session starts on the current year."""
        session = TrackerSession()
        assert session.settings.selected_year == date.today().year
        assert session.active_contributions() == {}
        assert session.cycle_dates() == []


class TestSessionImport:
    """Tests for TrackerSession.import_data."""

    def test_import_text(self, session, audit_logger):
        """Test JSON text import and its audit event."""
        correlation_id = create_correlation_id()
        summary = session.import_data(json.dumps(RECORDS), correlation_id=correlation_id)

        assert summary.years == [2023, 2024]
        assert session.active_contributions() == {
            "05.01": Decimal("600"),
            "19.01": Decimal("400"),
            "02.02": Decimal("300"),
        }
        events = audit_logger.events_by_correlation_id(correlation_id)
        assert [e.event_type for e in events] == [AuditEventType.CONTRIBUTIONS_IMPORTED]

    def test_import_decoded_list(self, session):
        """Test an already-decoded payload."""
        session.import_data(RECORDS)
        assert session.year_data[2023] == {"30.06": Decimal("1200")}

    def test_rejected_import_keeps_data(self, session, audit_logger):
        """Test a bad import raises and leaves prior data alone."""
        session.import_data(RECORDS)
        before = session.year_data

        with pytest.raises(ValidationError):
            session.import_data('{"foo": "bar"}')
        with pytest.raises(ValidationError):
            session.import_data([{"date": "bad", "amount": 1}])

        assert session.year_data == before
        assert audit_logger.recent_events()[0].event_type == AuditEventType.IMPORT_REJECTED


class TestSessionSettings:
    """Tests for settings changes and persistence."""

    def test_set_payment_cycle(self, session):
        """Test form values are applied."""
        settings = session.set_payment_cycle("weekly", "104000", "11")
        assert settings.payment_cycle == PaymentCycle.WEEKLY
        assert settings.annual_income == Decimal("104000")
        assert session.analysis().summary.expected_per_payment == Decimal("220")

    def test_set_payment_cycle_bad_input(self, session):
        """Test unreadable form values fall back instead of failing."""
        settings = session.set_payment_cycle("daily", "lots", "")
        assert settings.payment_cycle == PaymentCycle.NONE
        assert settings.annual_income == Decimal("0")
        assert settings.super_rate == Decimal("11.0")

    def test_changes_not_persisted_until_save(self, session, storage):
        """Test settings are written only on explicit save."""
        session.set_payment_cycle("quarterly", 90000, 12)
        assert json.loads(storage.get(DEFAULT_SETTINGS_KEY))["paymentCycle"] == "monthly"

        session.save_settings()
        saved = json.loads(storage.get(DEFAULT_SETTINGS_KEY))
        assert saved["paymentCycle"] == "quarterly"
        assert saved["annualIncome"] == 90000.0
        assert saved["superRate"] == 12.0

    def test_select_year(self, session):
        """Test switching years changes the active data and saved year."""
        session.import_data(RECORDS)
        assert session.select_year(2023) == {"30.06": Decimal("1200")}
        assert session.settings.selected_year == 2023
        assert session.select_year(2019) == {}

    @pytest.mark.parametrize("year", [0, -1, 10000])
    def test_select_year_outside_calendar(self, session, year):
        """Test an impossible year gives no contributions and keeps the view."""
        session.import_data(RECORDS)
        assert session.select_year(year) == {}
        assert session.settings.selected_year == 2024
        assert session.active_contributions()["05.01"] == Decimal("600")

    def test_settings_property_is_a_copy(self, session):
        """Test callers cannot change session settings through the property."""
        copy = session.settings
        copy.selected_year = 1990
        assert session.settings.selected_year == 2024


class TestSessionViews:
    """Tests for the rendering boundary."""

    def test_cycle_dates_follow_settings(self, session):
        """Test cycle dates are for the selected year and cycle."""
        dates = session.cycle_dates()
        assert len(dates) == 12
        assert all(d.year == 2024 for d in dates)

    def test_analysis(self, session):
        """Test monthly and yearly aggregates for the loaded settings."""
        session.import_data(RECORDS)
        report = session.analysis()

        # 120000 * 10% = 12000 a year, 1000 a month
        assert [(m.month, m.total, m.variance) for m in report.monthly] == [
            (1, Decimal("1000"), Decimal("0")),
            (2, Decimal("300"), Decimal("-700")),
        ]
        assert [(y.year, y.total) for y in report.yearly] == [
            (2023, Decimal("1200")),
            (2024, Decimal("1300")),
        ]
        assert report.summary.total_to_date == Decimal("1300")

    def test_calendar_payload(self, session):
        """Test the payload carries everything the renderer needs."""
        session.import_data(RECORDS)
        payload = session.calendar_payload()

        assert payload.year == 2024
        assert payload.contributions["05.01"] == Decimal("600")
        assert payload.cycle_dates[0] == date(2024, 1, 1)
        assert payload.high_threshold == Decimal("500")
        assert payload.report.summary.expected_per_payment == Decimal("1000")

    def test_calendar_payload_last_calendar_year(self, session):
        """Test the view still renders with year 9999 selected."""
        session.set_payment_cycle("yearly", 120000, 10)
        session.select_year(9999)
        payload = session.calendar_payload()
        assert payload.year == 9999
        assert payload.cycle_dates == [date(9999, 1, 1)]


class TestParseFormNumber:
    """Tests for form number parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("104000", Decimal("104000")),
        (" 11.5 ", Decimal("11.5")),
        (0.1, Decimal("0.1")),
        (7, Decimal("7")),
        ("", Decimal("3")),
        ("abc", Decimal("3")),
        (None, Decimal("3")),
        ("-2", Decimal("3")),
        ("nan", Decimal("3")),
    ])
    def test_values(self, value, expected):
        assert parse_form_number(value, Decimal("3")) == expected


class TestCreateSession:
    """Tests for the session factory."""

    def test_file_backed_session(self, tmp_path, monkeypatch):
        """Test the factory wires storage from configuration."""
        monkeypatch.setenv("SUPER_TRACKER_STORAGE_PATH", str(tmp_path / "store.json"))
        monkeypatch.setenv("SUPER_TRACKER_HIGH_CONTRIBUTION_THRESHOLD", "750")
        get_settings.cache_clear()
        try:
            session = create_session()
            session.set_payment_cycle("yearly", 50000, 11)
            session.save_settings()

            reloaded = create_session()
            assert reloaded.settings.payment_cycle == PaymentCycle.YEARLY
            assert reloaded.calendar_payload().high_threshold == Decimal("750")
            assert (tmp_path / "store.json").exists()
        finally:
            get_settings.cache_clear()

    def test_in_memory_session(self):
        """Test the factory without persistent storage."""
        session = create_session(use_storage=False)
        assert session.settings.payment_cycle == PaymentCycle.NONE
        events = session.audit_logger.recent_events()
        assert events[0].event_type == AuditEventType.SETTINGS_DEFAULTED

    def test_debug_mode_sets_logger_level(self, monkeypatch):
        """Test the factory applies debug mode to the package logger."""
        monkeypatch.setenv("SUPER_TRACKER_DEBUG_MODE", "true")
        package_logger = logging.getLogger("supertracker")
        previous = package_logger.level
        get_settings.cache_clear()
        try:
            create_session(use_storage=False)
            assert package_logger.level == logging.DEBUG
        finally:
            package_logger.setLevel(previous)
            get_settings.cache_clear()
