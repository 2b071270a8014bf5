"""Configuration error definitions."""

from __future__ import annotations

from contentsync.domain.errors import NotFoundLocally


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""


class ConfigFileNotFoundError(NotFoundLocally, ConfigurationError):
    """Raised when the config file given on the command line does not exist."""
