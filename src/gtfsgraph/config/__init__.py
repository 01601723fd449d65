"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError, MissingConfigurationError
from .http import FeedDownloadConfig, RetryPolicy
from .logging import configure_logging
from .reader import DEFAULT_AGENCY_ID_ENV, ReaderSettings, load_reader_settings
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_AGENCY_ID_ENV",
    "ConfigurationError",
    "DatabaseConfig",
    "FeedDownloadConfig",
    "MissingConfigurationError",
    "ReaderSettings",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_storage_config",
    "load_reader_settings",
]
