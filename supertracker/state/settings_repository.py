"""
Settings Repository

Loads and saves TrackerSettings as one JSON record in key-value storage.

DESIGN DECISION: A missing or unreadable record is not an error.
The user gets default settings and a warning lands in the audit log.
Saving, on the other hand, is an explicit user action, so failures there
are raised.
"""

import json
from typing import Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from supertracker.audit import AuditLogger
from supertracker.models.audit import AuditEventBuilder
from supertracker.models.tracker import TrackerSettings
from supertracker.services.storage import KeyValueStorageInterface, StorageError


DEFAULT_SETTINGS_KEY = "superTrackerSettings"


class SettingsRepository:
    """Persists tracker settings under a fixed key."""

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: str = DEFAULT_SETTINGS_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._key = key
        self._audit_logger = audit_logger

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> TrackerSettings:
        """
        Read persisted settings.

        Falls back to defaults on a missing entry, bad JSON, a record that
        fails schema validation, or a storage read failure. Never raises.
        """
        try:
            raw = self._storage.get(self._key)
        except StorageError as e:
            return self._defaulted(f"storage unreadable: {e}")

        if raw is None:
            return self._defaulted("no saved settings")

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            return self._defaulted("saved settings are not valid JSON")

        if not isinstance(data, dict):
            return self._defaulted("saved settings are not a JSON object")

        try:
            settings = TrackerSettings.model_validate(data)
        except PydanticValidationError as e:
            return self._defaulted(f"saved settings failed validation ({e.error_count()} error(s))")

        self._audit(AuditEventBuilder.settings_loaded(self._key))
        return settings

    def save(
        self,
        settings: TrackerSettings,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Persist settings.

        Raises:
            StorageError: If the write fails
        """
        try:
            self._storage.set(self._key, settings.model_dump_json(by_alias=True))
        except StorageError as e:
            self._audit(AuditEventBuilder.save_failed(
                key=self._key,
                error_message=str(e),
                correlation_id=correlation_id,
            ))
            raise

        self._audit(AuditEventBuilder.settings_saved(self._key, correlation_id=correlation_id))

    def clear(self) -> bool:
        """Forget persisted settings; the next load returns defaults."""
        return self._storage.delete(self._key)

    def _defaulted(self, reason: str) -> TrackerSettings:
        self._audit(AuditEventBuilder.settings_defaulted(self._key, reason))
        return TrackerSettings()

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)
