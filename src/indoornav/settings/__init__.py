"""Persisted application settings.

This package provides:
- AppSettings: the settings model and its first-run defaults
- codec: the XML document format of the settings file
- bootstrap/save: load-or-create at startup and explicit re-save
- SettingsStore: the composition root's handle on the current settings
"""

from indoornav.settings.errors import (
    BackgroundWriteError,
    DirectoryUnavailableError,
    MalformedSettingsError,
    SettingsEncodeError,
    SettingsError,
    SettingsFileAccessError,
    SettingsStateError,
)
from indoornav.settings.models import (
    AppSettings,
    CoordinatesKeyValuePair,
    coordinate_value,
    coordinates,
    default_settings,
)
from indoornav.settings.store import BootstrapResult, SettingsStore, bootstrap, load, save

__all__ = [
    "AppSettings",
    "BackgroundWriteError",
    "BootstrapResult",
    "CoordinatesKeyValuePair",
    "DirectoryUnavailableError",
    "MalformedSettingsError",
    "SettingsEncodeError",
    "SettingsError",
    "SettingsFileAccessError",
    "SettingsStateError",
    "SettingsStore",
    "bootstrap",
    "coordinate_value",
    "coordinates",
    "default_settings",
    "load",
    "save",
]
