"""Load-or-create bootstrap and explicit save for the settings file.

Usage preconditions (not enforced here):
    * bootstrap runs once at startup, before anything reads the settings;
    * saves come from one call site at a time and never race the
      first-run background write against the same file.

``SettingsStore`` removes the second race for callers that go through it
by waiting on its own pending write before saving.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Optional

from indoornav.settings import codec
from indoornav.settings.errors import (
    BackgroundWriteError,
    DirectoryUnavailableError,
    SettingsFileAccessError,
    SettingsStateError,
)
from indoornav.settings.models import AppSettings, default_settings

logger: Final = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Settings produced by bootstrap plus the first-run write, if any.

    ``write`` is None when an existing file was loaded. Otherwise it
    resolves to the written path, or holds the OSError that stopped it.
    """

    settings: AppSettings
    write: Optional[Future[Path]] = None

    @property
    def created(self) -> bool:
        """Whether defaults were synthesized because no file existed."""
        return self.write is not None

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the first-run write has finished.

        Args:
            timeout: Seconds to wait (default: no limit)

        Raises:
            BackgroundWriteError: If the write failed or was cancelled
            concurrent.futures.TimeoutError: If the timeout expires first
        """
        if self.write is None:
            return
        if self.write.cancelled():
            raise BackgroundWriteError("Default settings write was cancelled")
        exc = self.write.exception(timeout)
        if exc is not None:
            path = exc.filename if isinstance(exc, OSError) else None
            raise BackgroundWriteError(
                "Failed to write default settings",
                Path(path) if path else None,
                exc,
            ) from exc


def _file_exists(path: Path) -> bool:
    """Check for the settings file by listing its parent directory."""
    directory = path.parent
    try:
        with os.scandir(directory) as entries:
            return any(Path(entry.path) == path for entry in entries if entry.is_file())
    except OSError as exc:
        raise DirectoryUnavailableError(
            "Cannot list settings directory", directory, exc
        ) from exc


def _write_file(path: Path, payload: bytes) -> Path:
    # Create or truncate; no temporary file or rename
    with open(path, "wb") as fh:
        fh.write(payload)
    logger.debug("Wrote %d bytes of settings to %s", len(payload), path)
    return path


def _log_write_outcome(future: Future[Path]) -> None:
    if future.cancelled():
        logger.warning("Default settings write was cancelled")
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Failed to write default settings: %s", exc)


def _write_in_background(path: Path, payload: bytes) -> Future[Path]:
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="settings-write")
    future = executor.submit(_write_file, path, payload)
    future.add_done_callback(_log_write_outcome)
    # Worker threads are joined at interpreter exit, so the write still finishes
    executor.shutdown(wait=False)
    return future


def load(path: Path) -> AppSettings:
    """Read and decode an existing settings file.

    Raises:
        SettingsFileAccessError: If the file cannot be opened or read
        MalformedSettingsError: If the content is not a valid settings document
    """
    try:
        with open(path, "rb") as fh:
            data = fh.read()
    except OSError as exc:
        raise SettingsFileAccessError("Cannot read settings file", path, exc) from exc
    return codec.decode(data, path)


def bootstrap(path: Path | str) -> BootstrapResult:
    """Load the settings file, or create it from defaults on first run.

    On first run the defaults are returned immediately; writing them to
    ``path`` is dispatched to a background thread that has already been
    submitted when this function returns.

    Args:
        path: Absolute path of the settings file; its directory must exist

    Returns:
        BootstrapResult holding the settings and the pending write (if any)

    Raises:
        DirectoryUnavailableError: If the parent directory cannot be listed
        SettingsFileAccessError: If an existing file cannot be read
        MalformedSettingsError: If an existing file cannot be parsed
    """
    path = Path(path)
    if not _file_exists(path):
        logger.info("No settings file at %s, creating defaults", path)
        settings = default_settings()
        payload = codec.encode(settings)
        return BootstrapResult(settings, _write_in_background(path, payload))

    logger.info("Loading settings from %s", path)
    return BootstrapResult(load(path))


def save(path: Path | str, settings: AppSettings) -> None:
    """Overwrite an existing settings file with ``settings``.

    The file must already exist (bootstrap creates it); a missing file is
    an error rather than being recreated.

    Raises:
        SettingsEncodeError: If the settings cannot be encoded; the file
            is left untouched
        SettingsFileAccessError: If the file is missing or cannot be written
    """
    path = Path(path)
    payload = codec.encode(settings)
    try:
        with open(path, "r+b") as fh:
            fh.truncate(0)
            fh.write(payload)
    except OSError as exc:
        raise SettingsFileAccessError("Cannot write settings file", path, exc) from exc
    logger.debug("Saved settings to %s", path)


class SettingsStore:
    """Owner of the application's current settings.

    Created by the application's composition root and handed to whatever
    needs the settings. It starts unbootstrapped; ``bootstrap()`` is the
    only transition to bootstrapped, and there is no way back.

    Examples:
        store = SettingsStore(resolve_settings_path())
        settings = store.bootstrap()
        settings.is_prefer_elevators_enabled = True
        store.save()
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._current: Optional[AppSettings] = None
        self.pending_write: Optional[Future[Path]] = None
        self._result: Optional[BootstrapResult] = None

    @property
    def is_bootstrapped(self) -> bool:
        return self._current is not None

    @property
    def current(self) -> Optional[AppSettings]:
        """The current settings, or None before bootstrap."""
        return self._current

    def require_current(self) -> AppSettings:
        """Return the current settings.

        Raises:
            SettingsStateError: If bootstrap has not run yet
        """
        if self._current is None:
            raise SettingsStateError("Settings have not been bootstrapped", self.path)
        return self._current

    def bootstrap(self) -> AppSettings:
        """Load or create the settings file and make it current.

        Raises:
            SettingsStateError: If already bootstrapped
        """
        if self._current is not None:
            raise SettingsStateError("Settings are already bootstrapped", self.path)
        result = bootstrap(self.path)
        self._result = result
        self.pending_write = result.write
        self._current = result.settings
        return result.settings

    def wait_for_pending_write(self, timeout: Optional[float] = None) -> None:
        """Block until the first-run write (if any) has finished.

        Raises:
            BackgroundWriteError: If that write failed
        """
        if self._result is not None:
            self._result.wait(timeout)

    def save(self) -> None:
        """Persist the current settings to ``path``.

        Raises:
            SettingsStateError: If bootstrap has not run yet
            BackgroundWriteError: If the first-run write failed, so there
                is no file to overwrite
        """
        settings = self.require_current()
        self.wait_for_pending_write()
        save(self.path, settings)
