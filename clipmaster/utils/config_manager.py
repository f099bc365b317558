"""Configuration management module"""

import os
import sys
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from loguru import logger

APP_NAME = 'ClipMaster'


def get_app_data_dir() -> Path:
    """Per-user application data directory, created on first use"""
    if sys.platform == 'win32':
        base = Path(os.environ.get('APPDATA', '.'))
    elif sys.platform == 'darwin':
        base = Path.home() / 'Library' / 'Application Support'
    else:
        base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))

    app_data = base / APP_NAME
    app_data.mkdir(parents=True, exist_ok=True)
    return app_data


DEFAULT_CONFIG: Dict[str, Any] = {
    'clipboard': {
        'idle_interval': 5000,
        'active_interval': 200,
        'auto_start': True
    },
    'history': {
        'max_history': 30,
        'max_characters': 5000
    },
    'storage': {
        'database_path': None
    },
    'ui': {
        'show_notifications': True,
        'theme': 'dark'
    },
    'logging': {
        'level': 'INFO',
        'file_logging': True,
        'rotation': '1 day',
        'retention': '7 days'
    }
}


class ConfigManager:
    """Manages application configuration"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            config_path: Path to configuration file
        """
        if config_path is None:
            config_path = str(get_app_data_dir() / 'settings.yaml')

        self.config_path = config_path
        self.config: Dict[str, Any] = {}
        self._load_defaults()
        self._load_config()

    def _load_defaults(self):
        """Load default configuration"""
        default_path = Path(__file__).parent.parent.parent / 'config' / 'default_settings.yaml'
        self.config = copy.deepcopy(DEFAULT_CONFIG)

        try:
            if default_path.exists():
                with open(default_path, 'r', encoding='utf-8') as f:
                    self._merge_config(self.config, yaml.safe_load(f) or {})
                logger.info("Loaded default configuration")
            else:
                logger.debug(f"Default config not found: {default_path}")

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load defaults: {e}")

    def _load_config(self):
        """Load user configuration"""
        try:
            if os.path.exists(self.config_path):
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    user_config = yaml.safe_load(f) or {}

                # Merge with defaults
                self._merge_config(self.config, user_config)
                logger.info(f"Loaded user configuration from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load user config: {e}")

    def _merge_config(self, base: Dict, updates: Dict):
        """
        Recursively merge configuration dictionaries

        Args:
            base: Base configuration
            updates: Updates to apply
        """
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def save(self) -> bool:
        """Save current configuration to file"""
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.config_path)), exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.dump(self.config, f, default_flow_style=False)

            logger.info(f"Configuration saved to {self.config_path}")
            return True

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save configuration: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key (dot notation supported)
            default: Default value if not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set configuration value

        Args:
            key: Configuration key (dot notation supported)
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        # Navigate to the parent
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        logger.debug(f"Set config: {key} = {value}")

    def reset(self):
        """Reset to default configuration"""
        self._load_defaults()
        logger.info("Configuration reset to defaults")

    def state_defaults(self) -> Dict[str, Any]:
        """Defaults for persisted state keys that were never written"""
        return {
            'theme': self.get('ui.theme', 'dark'),
            'maxHistory': self.get('history.max_history', 30),
            'maxCharacters': self.get('history.max_characters', 5000),
        }

    def validate(self) -> bool:
        """
        Validate configuration

        Returns:
            True if valid
        """
        required = [
            'clipboard.idle_interval',
            'clipboard.active_interval',
            'history.max_history',
            'history.max_characters'
        ]

        for key in required:
            if not isinstance(self.get(key), int):
                logger.error(f"Missing or non-integer config: {key}")
                return False

        idle = self.get('clipboard.idle_interval')
        active = self.get('clipboard.active_interval')

        if active < 50 or idle < 50:
            logger.error("Polling interval too small (min 50ms)")
            return False

        if active > idle:
            logger.error("Active polling interval must not exceed idle interval")
            return False

        if self.get('history.max_history') < 1:
            logger.error("History size too small (min 1)")
            return False

        if self.get('history.max_characters') < 1:
            logger.error("Character limit too small (min 1)")
            return False

        if self.get('ui.theme') not in ('dark', 'light'):
            logger.error(f"Unknown theme: {self.get('ui.theme')}")
            return False

        return True
