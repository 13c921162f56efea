"""Location of the settings file."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final, Optional

from dotenv import load_dotenv

# Load environment variables from .env file(s)
load_dotenv()

SETTINGS_FILENAME: Final = "AppSettings.xml"
SETTINGS_PATH_ENV: Final = "INDOORNAV_SETTINGS"
DEFAULT_SETTINGS_DIR: Final = Path("~/.config/indoornav")


def _interpolate_env(content: str) -> str:
    return re.sub(r"\$\{(\w+)\}", lambda m: os.getenv(m.group(1), ""), content)


def resolve_settings_path(path: Optional[Path] = None) -> Path:
    """Work out which settings file to use.

    Order: explicit ``path``, then ``INDOORNAV_SETTINGS`` (``${VAR}``
    references are expanded), then ``~/.config/indoornav/AppSettings.xml``.

    Args:
        path: Explicit settings file path (optional)

    Returns:
        Absolute path of the settings file
    """
    if path is None:
        env_path = os.environ.get(SETTINGS_PATH_ENV)
        if env_path:
            path = Path(_interpolate_env(env_path))
        else:
            path = DEFAULT_SETTINGS_DIR / SETTINGS_FILENAME
    return path.expanduser().absolute()
