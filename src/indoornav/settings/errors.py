"""Exception classes for settings persistence.

This module defines a hierarchy of exception classes for the error
conditions that can occur while bootstrapping, loading or saving the
application settings file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SettingsError(Exception):
    """Base error for settings persistence.

    Carries the settings file path involved (when known) and the
    underlying exception that triggered the failure.
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            path: Settings file or directory the error relates to
            original_error: The original exception that was caught
        """
        super().__init__(f"{message} ({path})" if path is not None else message)
        self.message: str = message
        self.path: Optional[Path] = path
        self.original_error: Optional[BaseException] = original_error


class DirectoryUnavailableError(SettingsError):
    """Raised when the settings file's parent directory cannot be listed."""

    pass


class SettingsFileAccessError(SettingsError):
    """Raised when the settings file cannot be opened, read or written."""

    pass


class MalformedSettingsError(SettingsError):
    """Raised when a settings document does not match the expected format."""

    pass


class SettingsEncodeError(SettingsError):
    """Raised when an in-memory settings value cannot be encoded."""

    pass


class BackgroundWriteError(SettingsError):
    """Raised when the first-run default settings write failed.

    Bootstrap never raises this itself; it surfaces only when the caller
    waits on the pending write.
    """

    pass


class SettingsStateError(SettingsError):
    """Raised when the settings handle is used in the wrong lifecycle state."""

    pass
