"""Configuration manager for loading and saving app settings."""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..utils.constants import (
    CONFIG_FILE,
    DEFAULT_BIND,
    DEFAULT_DISPLAY_PREFIX,
    DEFAULT_DISPLAY_SUFFIX,
    DEFAULT_MANAGER_UNIT,
    DEFAULT_RCON_TIMEOUT,
    DEFAULT_UNIT_PATTERN,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages application settings stored in a YAML file."""

    CONFIG_VERSION = "1.0"

    DEFAULTS = {
        "unit_pattern": DEFAULT_UNIT_PATTERN,
        "manager_unit": DEFAULT_MANAGER_UNIT,
        "display_prefix": DEFAULT_DISPLAY_PREFIX,
        "display_suffix": DEFAULT_DISPLAY_SUFFIX,
        "bind": DEFAULT_BIND,
        "rcon_timeout": DEFAULT_RCON_TIMEOUT,
    }

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize the config manager.

        Args:
            config_file: Path of the YAML file, defaults to CONFIG_FILE
        """
        self.config_file = Path(config_file) if config_file else CONFIG_FILE
        self.settings: Dict[str, Any] = {}
        self._ensure_default_settings()

    def load_config(self) -> bool:
        """Load configuration from file.

        Returns:
            True if config loaded successfully, False otherwise
        """
        if not self.config_file.exists():
            logger.info("Config file not found, using defaults")
            self._load_defaults()
            return False

        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f)

            if not data:
                logger.warning("Empty config file, using defaults")
                self._load_defaults()
                return False

            if not self._validate_config(data):
                logger.error("Invalid config file, using defaults")
                self._load_defaults()
                return False

            self.settings = dict(data.get("settings") or {})
            self._ensure_default_settings()

            logger.info(f"Loaded settings from {self.config_file}")
            return True

        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}")
            self._load_defaults()
            return False
        except OSError as e:
            logger.error(f"Failed to load config: {e}")
            self._load_defaults()
            return False

    def save_config(self) -> bool:
        """Save configuration to file.

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            if self.config_file.exists():
                backup_file = self.config_file.with_suffix('.yaml.bak')
                shutil.copy2(self.config_file, backup_file)
                logger.debug(f"Created backup at {backup_file}")

            data = {
                "version": self.CONFIG_VERSION,
                "settings": self.settings
            }

            # Write to temp file first (atomic write)
            temp_file = self.config_file.with_suffix('.yaml.tmp')
            with open(temp_file, 'w') as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

            temp_file.replace(self.config_file)

            logger.info(f"Saved settings to {self.config_file}")
            return True

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save config: {e}")
            return False

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting value.

        Args:
            key: Setting key
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        return self.settings.get(key, default)

    def _validate_config(self, data: dict) -> bool:
        """Validate configuration data structure.

        Args:
            data: Configuration dictionary

        Returns:
            True if valid, False otherwise
        """
        if not isinstance(data, dict):
            logger.error("Config must be a dictionary")
            return False

        if "version" not in data:
            logger.warning("Config missing version, assuming valid")

        settings = data.get("settings")
        if settings is None:
            return True

        if not isinstance(settings, dict):
            logger.error("Settings must be a dictionary")
            return False

        for key, value in settings.items():
            default = self.DEFAULTS.get(key)
            if isinstance(default, int) and isinstance(value, (int, float)):
                continue
            if default is not None and not isinstance(value, type(default)):
                logger.error(f"Setting {key} must be a {type(default).__name__}")
                return False

        return True

    def _load_defaults(self):
        """Load default configuration."""
        self.settings = {}
        self._ensure_default_settings()
        logger.info("Loaded default configuration")

    def _ensure_default_settings(self):
        """Ensure all default settings exist."""
        for key, value in self.DEFAULTS.items():
            if key not in self.settings:
                self.settings[key] = value
