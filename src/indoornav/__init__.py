"""Indoor navigation application settings."""

__version__ = "0.1.0"
