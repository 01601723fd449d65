"""Errors raised while loading reader settings from a TOML file or the environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class ConfigurationError(RuntimeError):
    """Raised when reader settings cannot be parsed or fail validation.

    ``source`` names where the settings came from: the settings file, or the
    environment variable when no file was given.
    """

    def __init__(self, message: str, *, source: Path | str | None = None) -> None:
        super().__init__(message)
        self.source = source


class MissingConfigurationError(ConfigurationError):
    """Raised when the settings file passed with ``--config`` does not exist."""
