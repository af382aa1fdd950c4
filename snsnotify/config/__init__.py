"""Configuration management for the SNS build notifier."""

from .environment import EnvironmentOverrides, load_environment_overrides
from .exceptions import ConfigurationError
from .loader import apply_environment_overrides, load_config, merge_settings
from .models import (
    DEFAULT_MESSAGE_TEMPLATE,
    AppConfig,
    GlobalSettings,
    LogFormat,
    LoggingConfig,
    LogLevel,
    NotificationConfig,
)
from .store import SettingsStore

__all__ = [
    # Loading
    "load_config",
    "load_environment_overrides",
    "apply_environment_overrides",
    "merge_settings",
    # Models
    "AppConfig",
    "GlobalSettings",
    "NotificationConfig",
    "LoggingConfig",
    "EnvironmentOverrides",
    "DEFAULT_MESSAGE_TEMPLATE",
    # Enums
    "LogLevel",
    "LogFormat",
    # Runtime state
    "SettingsStore",
    # Exceptions
    "ConfigurationError",
]
