"""Tests for key-value storage and the settings repository."""

import json

import pytest
from decimal import Decimal

from supertracker.audit import AuditLogger
from supertracker.models.audit import AuditEventType
from supertracker.models.tracker import PaymentCycle, TrackerSettings
from supertracker.services.storage import (
    CorruptStorageError,
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
    StorageError,
)
from supertracker.state import DEFAULT_SETTINGS_KEY, SettingsRepository


class FailingStorage(KeyValueStorageInterface):
    """Storage whose every operation fails."""

    def get(self, key):
        raise StorageError("backend down")

    def set(self, key, value):
        raise StorageError("backend down")

    def delete(self, key):
        raise StorageError("backend down")


@pytest.fixture
def audit_logger():
    return AuditLogger()


class TestJsonFileStorage:
    """Tests for JsonFileKeyValueStorage."""

    def test_missing_file_is_empty(self, tmp_path):
        """Test a store with no file reads as empty."""
        storage = JsonFileKeyValueStorage(tmp_path / "store.json")
        assert storage.get("anything") is None
        assert storage.delete("anything") is False

    def test_set_get_delete(self, tmp_path):
        """Test values survive a new instance on the same file."""
        path = tmp_path / "nested" / "store.json"
        JsonFileKeyValueStorage(path).set("a", "1")

        storage = JsonFileKeyValueStorage(path)
        assert storage.get("a") == "1"
        assert storage.delete("a") is True
        assert storage.get("a") is None

    def test_file_is_a_json_object(self, tmp_path):
        """Test the on-disk format."""
        path = tmp_path / "store.json"
        JsonFileKeyValueStorage(path).set("k", "v")
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_corrupt_file_raises(self, tmp_path):
        """Test unreadable content is reported, not silently replaced."""
        path = tmp_path / "store.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(CorruptStorageError):
            JsonFileKeyValueStorage(path).get("k")

    def test_non_object_file_raises(self, tmp_path):
        """Test a JSON array file is rejected."""
        path = tmp_path / "store.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(CorruptStorageError):
            JsonFileKeyValueStorage(path).get("k")


class TestInMemoryStorage:
    """Tests for InMemoryKeyValueStorage."""

    def test_round_trip(self):
        """Test set, get and delete."""
        storage = InMemoryKeyValueStorage({"x": "1"})
        storage.set("y", "2")
        assert storage.keys() == ["x", "y"]
        assert storage.get("y") == "2"
        assert storage.delete("x") is True
        assert storage.delete("x") is False


class TestSettingsRepository:
    """Tests for SettingsRepository load and save."""

    def test_missing_entry_gives_defaults(self, audit_logger):
        """Test no saved settings is not an error."""
        repository = SettingsRepository(InMemoryKeyValueStorage(), audit_logger=audit_logger)
        settings = repository.load()
        assert settings == TrackerSettings(selected_year=settings.selected_year)
        assert settings.super_rate == Decimal("11.0")
        assert audit_logger.recent_events()[0].event_type == AuditEventType.SETTINGS_DEFAULTED

    @pytest.mark.parametrize("raw", [
        "{not json",
        "[1, 2]",
        json.dumps({"annualIncome": -5}),
        json.dumps({"paymentCycle": "daily"}),
    ])
    def test_malformed_entry_gives_defaults(self, raw, audit_logger):
        """Test corrupt or invalid records fall back to defaults."""
        storage = InMemoryKeyValueStorage({DEFAULT_SETTINGS_KEY: raw})
        settings = SettingsRepository(storage, audit_logger=audit_logger).load()
        assert settings.annual_income == Decimal("0")
        assert settings.payment_cycle == PaymentCycle.NONE
        assert audit_logger.recent_events()[0].event_type == AuditEventType.SETTINGS_DEFAULTED

    def test_storage_failure_on_load_gives_defaults(self, audit_logger):
        """Test an unreadable backend still yields defaults."""
        settings = SettingsRepository(FailingStorage(), audit_logger=audit_logger).load()
        assert settings.payment_cycle == PaymentCycle.NONE

    def test_corrupt_file_gives_defaults(self, tmp_path):
        """Test a corrupt JSON file on disk does not break loading."""
        path = tmp_path / "store.json"
        path.write_text("garbage", encoding="utf-8")
        settings = SettingsRepository(JsonFileKeyValueStorage(path)).load()
        assert settings.annual_income == Decimal("0")

    def test_corrupt_file_on_long_path_gives_defaults(self, tmp_path, audit_logger):
        """Test a long file path in the storage error does not break the warning event."""
        directory = tmp_path
        for letter in "abcd":
            directory = directory / (letter * 120)
        directory.mkdir(parents=True)
        path = directory / "storage.json"
        path.write_text("garbage", encoding="utf-8")

        repository = SettingsRepository(JsonFileKeyValueStorage(path), audit_logger=audit_logger)
        settings = repository.load()

        assert settings.payment_cycle == PaymentCycle.NONE
        event = audit_logger.recent_events()[0]
        assert event.event_type == AuditEventType.SETTINGS_DEFAULTED
        assert str(path) in event.details["reason"]

    def test_save_then_load(self, tmp_path, audit_logger):
        """Test settings survive a save and a fresh load."""
        storage = JsonFileKeyValueStorage(tmp_path / "store.json")
        repository = SettingsRepository(storage, key="custom", audit_logger=audit_logger)
        original = TrackerSettings(
            annual_income=Decimal("104000"),
            super_rate=Decimal("11.5"),
            payment_cycle=PaymentCycle.BIWEEKLY,
            selected_year=2023,
        )

        repository.save(original)
        loaded = SettingsRepository(storage, key="custom").load()

        assert loaded == original
        assert json.loads(storage.get("custom"))["paymentCycle"] == "biweekly"
        assert audit_logger.recent_events()[0].event_type == AuditEventType.SETTINGS_SAVED

    def test_loads_widget_record(self):
        """Test a record with an empty cycle string loads."""
        raw = json.dumps({
            "annualIncome": 80000,
            "superRate": 11,
            "paymentCycle": "",
            "selectedYear": 2022,
        })
        storage = InMemoryKeyValueStorage({DEFAULT_SETTINGS_KEY: raw})
        settings = SettingsRepository(storage).load()
        assert settings.annual_income == Decimal("80000")
        assert settings.payment_cycle == PaymentCycle.NONE
        assert settings.selected_year == 2022

    def test_save_failure_raises_and_audits(self, audit_logger):
        """Test save errors propagate after an audit event."""
        repository = SettingsRepository(FailingStorage(), audit_logger=audit_logger)
        with pytest.raises(StorageError):
            repository.save(TrackerSettings())
        assert audit_logger.recent_events()[0].event_type == AuditEventType.SAVE_FAILED

    def test_clear(self):
        """Test clearing removes the record."""
        storage = InMemoryKeyValueStorage()
        repository = SettingsRepository(storage)
        repository.save(TrackerSettings())
        assert repository.clear() is True
        assert storage.get(DEFAULT_SETTINGS_KEY) is None
