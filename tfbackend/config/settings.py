"""
Settings management for tfbackend.

Handles loading and accessing run configuration.
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from .defaults import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TFBACKEND_CONFIG"


class Settings:
    """
    Run settings.

    Starts from DEFAULT_SETTINGS and deep-merges an optional JSON file
    on top. The file is taken from the constructor argument, or from the
    TFBACKEND_CONFIG environment variable when no argument is given.
    """

    def __init__(self, config_file: Optional[str] = None, environ: Optional[dict] = None):
        environ = os.environ if environ is None else environ
        path = config_file or environ.get(CONFIG_ENV_VAR) or None
        self.config_file: Optional[Path] = Path(path) if path else None
        self._settings: Dict[str, Any] = {}
        self.load()

    def load(self):
        """
        Load settings from file.

        If no file is configured, or the file is missing or invalid,
        defaults are used.
        """
        self._settings = copy.deepcopy(DEFAULT_SETTINGS)

        if self.config_file is None:
            return

        if not self.config_file.exists():
            logger.warning(f"Config file not found: {self.config_file}, using defaults")
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded_settings = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"Failed to load settings: {e}, using defaults")
            return

        if not isinstance(loaded_settings, dict):
            logger.error(f"Config file {self.config_file} must hold a JSON object, using defaults")
            return

        self._deep_update(self._settings, loaded_settings)
        logger.info(f"Loaded settings from {self.config_file}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get setting value.

        Supports nested keys with dot notation: "short_name.min"

        Args:
            key: Setting key (use dots for nested values)
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        keys = key.split('.')
        value = self._settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set setting value.

        Supports nested keys with dot notation: "storage.sku"
        """
        keys = key.split('.')
        target = self._settings

        for k in keys[:-1]:
            if k not in target or not isinstance(target[k], dict):
                target[k] = {}
            target = target[k]

        target[keys[-1]] = value

    @staticmethod
    def _deep_update(base: dict, updates: dict):
        """
        Recursively update base dict with values from updates dict.

        Args:
            base: Dictionary to update
            updates: Dictionary with new values
        """
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                Settings._deep_update(base[key], value)
            else:
                base[key] = value
