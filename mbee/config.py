"""
Configuration management for MBEE.

This module handles loading and accessing configuration values from config.yaml.
It provides the defaults used by the command line for JMI conversions, the
element store and logging.
"""

import yaml
from pathlib import Path
from typing import Any, Dict
import logging


class ConfigManager:
    """
    Manages configuration loading and access for MBEE.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}

            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logging.warning(f"Failed to load configuration: {e}")
            # Fall back to default configuration
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "jmi": {
                "key_field": "id",
                "parent_field": "parent",
                "type_field": "type",
                "package_type": "package",
                "root_policy": "error",
                "allow_non_package_parents": False
            },
            "database": {
                "filename": "mbee.db"
            },
            "paths": {
                "log_file": "mbee.log"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "jmi.key_field")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("jmi.key_field")  # Returns "id"
            config.get("logging.level")  # Returns "INFO"
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def key_field(self) -> str:
        """Get the field records are keyed on."""
        return self.get("jmi.key_field", "id")

    @property
    def parent_field(self) -> str:
        """Get the field holding parent references."""
        return self.get("jmi.parent_field", "parent")

    @property
    def type_field(self) -> str:
        """Get the field holding element types."""
        return self.get("jmi.type_field", "type")

    @property
    def package_type(self) -> str:
        """Get the element type allowed to contain other elements."""
        return self.get("jmi.package_type", "package")

    @property
    def root_policy(self) -> str:
        """Get the policy for inputs with several roots."""
        return self.get("jmi.root_policy", "error")

    @property
    def allow_non_package_parents(self) -> bool:
        """Get whether elements under non-packages are detached instead of rejected."""
        return bool(self.get("jmi.allow_non_package_parents", False))

    @property
    def database_filename(self) -> str:
        """Get database filename."""
        return self.get("database.filename", "mbee.db")

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "mbee.log")

    def element_tree_options(self) -> Dict[str, Any]:
        """
        Get the keyword options for building element trees.

        Returns:
            Options accepted by create_elements_tree and sort_elements_array
        """
        return {
            "key_field": self.key_field,
            "parent_field": self.parent_field,
            "type_field": self.type_field,
            "package_type": self.package_type,
            "root_policy": self.root_policy,
            "allow_non_package_parents": self.allow_non_package_parents,
        }


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
