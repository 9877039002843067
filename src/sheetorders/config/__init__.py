"""Application configuration helpers."""

from __future__ import annotations

from sheetorders.common.logging import configure_logging

from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, InvalidSettingError, MissingConfigurationError
from .ingest import IngestSettings, get_ingest_settings
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "IngestSettings",
    "InvalidSettingError",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_ingest_settings",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
