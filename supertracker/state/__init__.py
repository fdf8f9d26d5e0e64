"""Settings state package."""

from supertracker.state.settings_repository import DEFAULT_SETTINGS_KEY, SettingsRepository

__all__ = ["DEFAULT_SETTINGS_KEY", "SettingsRepository"]
