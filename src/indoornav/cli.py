"""Indoor navigation settings CLI.

Command-line helpers for inspecting, creating, validating and editing
the application settings file.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Final, Optional

import typer
from pydantic import ValidationError

from indoornav.config import resolve_settings_path
from indoornav.settings import SettingsError, SettingsStore, load
from indoornav.settings.codec import find_field

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="Indoor navigation settings CLI", add_completion=False)
settings_app = typer.Typer(help="Settings file helpers")
app.add_typer(settings_app, name="settings")

logger: Final = logging.getLogger(__name__)  # Will be "indoornav.cli"

DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
PATH_OPTION = typer.Option(
    None,
    "--path",
    "-p",
    dir_okay=False,
    help="Settings file (default: $INDOORNAV_SETTINGS or ~/.config/indoornav/AppSettings.xml)",
)
FILE_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False, help="Settings file")
FIELD_ARGUMENT = typer.Argument(..., help="Field tag or attribute name, e.g. MinScale")
VALUE_ARGUMENT = typer.Argument(..., help="New value")


def _fail(message: str) -> typer.Exit:
    typer.secho(message, fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def _open_store(path: Optional[Path]) -> SettingsStore:
    """Bootstrap the settings file, waiting for a first-run write to land."""
    settings_path = resolve_settings_path(path)
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    store = SettingsStore(settings_path)
    try:
        store.bootstrap()
        store.wait_for_pending_write()
    except SettingsError as exc:
        raise _fail(str(exc)) from exc
    return store


@app.callback()
def main(debug: bool = DEBUG_OPTION) -> None:
    """Manage the indoor navigation settings file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


# ───────────────────────── settings sub-commands ─────────────────────────────
@settings_app.command("show")
def show(path: Optional[Path] = PATH_OPTION) -> None:
    """Print the current settings as JSON, creating defaults if needed."""
    store = _open_store(path)
    data = store.require_current().model_dump(mode="json", by_alias=True)
    typer.echo(json.dumps(data, indent=2))


@settings_app.command("init")
def init(path: Optional[Path] = PATH_OPTION) -> None:
    """Create the settings file from defaults unless it already exists."""
    store = _open_store(path)
    if store.pending_write is not None:
        typer.secho(f"Default settings written to {store.path}", fg=typer.colors.GREEN)
    else:
        typer.echo(f"Settings already exist at {store.path}")


@settings_app.command("validate")
def validate(file: Path = FILE_ARGUMENT) -> None:
    """Check that a file is a valid settings document."""
    try:
        load(file.absolute())
    except SettingsError as exc:
        raise _fail(str(exc)) from exc
    typer.echo("✅ Settings valid")


@settings_app.command("set")
def set_field(
    field: str = FIELD_ARGUMENT,
    value: str = VALUE_ARGUMENT,
    path: Optional[Path] = PATH_OPTION,
) -> None:
    """Change one scalar setting and save the file."""
    try:
        spec = find_field(field)
    except KeyError as exc:
        raise _fail(f"Unknown setting: {field}") from exc
    if spec.is_sequence:
        raise _fail(f"{spec.tag} is a list and cannot be set from the command line")

    store = _open_store(path)
    settings = store.require_current()
    try:
        setattr(settings, spec.attr, value)
    except ValidationError as err:
        typer.secho("Invalid value:", fg=typer.colors.RED, err=True)
        for e in err.errors():
            typer.secho(f"  • {spec.tag} - {e['msg']}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from err

    try:
        store.save()
    except SettingsError as exc:
        raise _fail(str(exc)) from exc
    typer.secho(f"{spec.tag} = {getattr(settings, spec.attr)}", fg=typer.colors.GREEN)


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
