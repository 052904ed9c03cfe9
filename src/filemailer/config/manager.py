"""Configuration management - locating, loading and validating the settings file."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import FileMailerConfig

DEFAULT_CONFIG_NAME = "filemailer"
CONFIG_SUFFIXES = (".yaml", ".yml")


class ConfigurationError(Exception):
    """Raised when no usable configuration can be loaded."""


class ConfigManager:
    """Finds and loads the configuration file."""

    DEFAULT_SEARCH_PATHS = [
        Path("."),
        Path.home() / ".config" / "filemailer",
        Path("/etc/filemailer"),
    ]

    def __init__(
        self,
        config_path: Path | None = None,
        config_name: str = DEFAULT_CONFIG_NAME,
        search_paths: list[Path] | None = None,
    ):
        """
        Initialize configuration manager.

        Args:
            config_path: Explicit path to config file. If None, searches by name.
            config_name: Config file name without extension.
            search_paths: Folders searched for ``<config_name>.yaml``.
        """
        self.config_path = config_path
        self.config_name = config_name
        self.search_paths = search_paths if search_paths is not None else self.DEFAULT_SEARCH_PATHS
        self._config: FileMailerConfig | None = None

    def candidate_files(self) -> list[Path]:
        """Files tried when no explicit path is given, in search order."""
        return [
            folder / f"{self.config_name}{suffix}"
            for folder in self.search_paths
            for suffix in CONFIG_SUFFIXES
        ]

    def load(self) -> FileMailerConfig:
        """
        Load configuration from file.

        Returns:
            Loaded and validated configuration.

        Raises:
            ConfigurationError: If no config file is found or it is invalid.
        """
        config_file = self._find_config_file()

        if config_file is None:
            searched = [str(p) for p in self.candidate_files()]
            raise ConfigurationError(f"No configuration file found. Searched: {searched}")

        try:
            with open(config_file, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {config_file}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {config_file}: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Config file {config_file} must contain a mapping")

        try:
            self._config = FileMailerConfig(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_file}: {e}") from e

        self.config_path = config_file
        return self._config

    def _find_config_file(self) -> Path | None:
        """Find the explicit config file or the first match on the search path."""
        if self.config_path is not None:
            return self.config_path if self.config_path.is_file() else None

        for candidate in self.candidate_files():
            if candidate.is_file():
                return candidate

        return None

    @property
    def config(self) -> FileMailerConfig:
        """Get current configuration, loading it on first access."""
        if self._config is None:
            self._config = self.load()
        return self._config


# Global config instance
_config_manager: ConfigManager | None = None


def get_config_manager(
    config_path: Path | None = None,
    config_name: str = DEFAULT_CONFIG_NAME,
) -> ConfigManager:
    """
    Get global config manager instance.

    Args:
        config_path: Optional explicit config path.
        config_name: Config file name searched for when no path is given.

    Returns:
        ConfigManager instance.
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_path, config_name)
    return _config_manager


def reset_config_manager():
    """Forget the global config manager (used between CLI invocations)."""
    global _config_manager
    _config_manager = None

