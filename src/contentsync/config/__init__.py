"""Application configuration helpers."""

from __future__ import annotations

from .contentful import ContentfulConfig, get_contentful_config
from .env import load_config_file, require_env_vars
from .errors import ConfigFileNotFoundError, ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, TableConfig, get_database_config, get_table_config
from .sync import AdmissionConfig, SyncConfig, get_admission_config, get_sync_config

__all__ = [
    "AdmissionConfig",
    "ConfigFileNotFoundError",
    "ConfigurationError",
    "ContentfulConfig",
    "DatabaseConfig",
    "MissingConfigurationError",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "TableConfig",
    "configure_logging",
    "get_admission_config",
    "get_contentful_config",
    "get_database_config",
    "get_sync_config",
    "get_table_config",
    "load_config_file",
    "require_env_vars",
]
