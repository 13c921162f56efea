from pathlib import Path

import pytest

from indoornav.config import SETTINGS_FILENAME, resolve_settings_path


def test_explicit_path_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INDOORNAV_SETTINGS", str(tmp_path / "env.xml"))
    assert resolve_settings_path(tmp_path / "explicit.xml") == tmp_path / "explicit.xml"


def test_relative_path_made_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    resolved = resolve_settings_path(Path("AppSettings.xml"))
    assert resolved.is_absolute()
    assert resolved == tmp_path / "AppSettings.xml"


def test_env_variable_with_interpolation(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("NAV_DATA", str(tmp_path))
    monkeypatch.setenv("INDOORNAV_SETTINGS", "${NAV_DATA}/nav.xml")
    assert resolve_settings_path() == tmp_path / "nav.xml"


def test_default_location(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("INDOORNAV_SETTINGS", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert resolve_settings_path() == tmp_path / ".config" / "indoornav" / SETTINGS_FILENAME
