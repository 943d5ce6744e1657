"""
Configuration Module for Race Card Extraction System.

This module provides centralized configuration management using YAML files.
All system parameters should be controlled through configuration, not hard-coded.
A small set of environment variables may override values from the file.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional


class ConfigurationManager:
    """
    Centralized configuration management for the race card extraction system.

    This class handles loading, validating, and providing access to all
    configuration parameters defined in settings.yaml.

    Attributes:
        config_path (Path): Path to the configuration file.
        config (Dict): Loaded configuration dictionary.

    Example:
        >>> config = ConfigurationManager()
        >>> threshold = config.get("input.pdf.reliable_text_threshold")
        >>> tracks = config.get("parsing.tracks")
    """

    # Environment variable -> (dot-notation key, value type)
    ENV_OVERRIDES = {
        'GOOGLE_CLOUD_KEY_FILE': ('ocr.cloud.key_file', str),
        'GOOGLE_CLOUD_PROJECT_ID': ('ocr.cloud.project_id', str),
        'GOOGLE_CLOUD_API_KEY': ('ocr.cloud.api_key', str),
        'LOG_LEVEL': ('logging.level', str),
        'MAX_FILE_SIZE': ('input.max_file_size', int),
    }

    _instance: Optional['ConfigurationManager'] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        """
        Singleton pattern to ensure only one configuration instance exists.

        Args:
            config_path: Optional path to configuration file.

        Returns:
            ConfigurationManager instance.
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_path: Optional path to configuration file.
                        Defaults to config/settings.yaml.
        """
        if self._initialized:
            return

        if config_path is None:
            self.config_path = Path(__file__).parent / "settings.yaml"
        else:
            self.config_path = Path(config_path)

        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file doesn't exist.
            yaml.YAMLError: If configuration file is invalid.
        """
        if not self.config_path.exists():
            from racecard_extraction.utils.exceptions import ConfigurationError
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}",
                {"path": str(self.config_path)}
            )

        with open(self.config_path, 'r', encoding='utf-8') as f:
            self._config = yaml.safe_load(f) or {}

        self._resolve_paths()
        self._apply_env_overrides()

    def _resolve_paths(self) -> None:
        """
        Resolve relative paths in configuration to absolute paths.
        Uses project root as base directory.
        """
        project_root = Path(__file__).parent.parent

        if 'paths' in self._config:
            for key, value in self._config['paths'].items():
                if value and not Path(value).is_absolute():
                    self._config['paths'][key] = str(project_root / value)

    def _apply_env_overrides(self) -> None:
        """Overlay configured environment variables onto the loaded file."""
        for env_name, (key, cast) in self.ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None or raw == "":
                continue
            try:
                self.set(key, cast(raw))
            except ValueError:
                # Malformed override, keep the file value
                continue

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., "ocr.tesseract.lang").
            default: Default value if key doesn't exist.

        Returns:
            Configuration value or default.

        Example:
            >>> config.get("parsing.lookahead_lines")
            4
            >>> config.get("nonexistent.key", "default_value")
            "default_value"
        """
        keys = key.split('.')
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value using dot notation.

        Intermediate sections are created when missing. Changes are
        in-memory only and are lost on reload().

        Args:
            key: Configuration key in dot notation.
            value: Value to store.
        """
        keys = key.split('.')
        section = self._config
        for k in keys[:-1]:
            if not isinstance(section.get(k), dict):
                section[k] = {}
            section = section[k]
        section[keys[-1]] = value

    def get_all(self) -> Dict[str, Any]:
        """
        Get the complete configuration dictionary.

        Returns:
            Complete configuration dictionary.
        """
        return self._config.copy()

    def reload(self) -> None:
        """
        Reload configuration from file.
        Useful for dynamic configuration updates.
        """
        self._load_config()

    @classmethod
    def reset(cls) -> None:
        """
        Reset the singleton instance.
        Useful for testing or configuration changes.
        """
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get configuration values.

    Args:
        key: Configuration key in dot notation.
        default: Default value if key doesn't exist.

    Returns:
        Configuration value or default.
    """
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config']
