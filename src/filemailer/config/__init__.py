"""Configuration module for FileMailer."""

from .manager import (
    ConfigManager,
    ConfigurationError,
    get_config_manager,
    reset_config_manager,
)
from .models import (
    EmailSettings,
    FileMailerConfig,
    LoggingSettings,
    SMTPSettings,
    WatchSettings,
)

__all__ = [
    "FileMailerConfig",
    "WatchSettings",
    "EmailSettings",
    "SMTPSettings",
    "LoggingSettings",
    "ConfigManager",
    "ConfigurationError",
    "get_config_manager",
    "reset_config_manager",
]
