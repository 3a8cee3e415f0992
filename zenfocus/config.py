"""
Configuration management for ZenFocus.
Loads the YAML configuration file and fills in defaults.
"""

import copy
import yaml
import os
from typing import Any, Dict, Optional
import logging


DEFAULTS: Dict[str, Any] = {
    'storage': {
        'directory': '~/.zenfocus',
        'slot': 'zenFocusTasks',
    },
    'display': {
        'width': 800,
        'height': 480,
        'font_size': 22,
    },
    'notifications': {
        'timeout': 5,
    },
    'web': {
        'host': '0.0.0.0',
        'port': 5000,
    },
    'logging': {
        'level': 'INFO',
        'console': True,
        'file': None,
    },
}


def _merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """
    Application configuration manager
    """

    def __init__(self, config_path: Optional[str] = None, overrides: Optional[Dict] = None):
        """
        Load configuration from YAML file

        Args:
            config_path: Path to config.yaml (None uses built-in defaults only)
            overrides: Extra values merged over the file contents

        Raises:
            FileNotFoundError: if config_path is given but does not exist
        """
        self.logger = logging.getLogger(__name__)
        loaded: Dict = {}

        if config_path is not None:
            if not os.path.exists(config_path):
                raise FileNotFoundError(f"Configuration file not found: {config_path}")

            with open(config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}

            if not isinstance(loaded, dict):
                raise ValueError(f"Configuration file must contain a mapping: {config_path}")

        self._config = _merge(DEFAULTS, loaded)
        if overrides:
            self._config = _merge(self._config, overrides)

        # Expand environment variables in paths
        self._expand_paths(self._config)

        self.logger.info(f"Configuration loaded from {config_path or 'defaults'}")

    def _expand_paths(self, config: Dict):
        """Recursively expand environment variables in path strings"""
        for key, value in config.items():
            if isinstance(value, dict):
                self._expand_paths(value)
            elif isinstance(value, str) and ('$' in value or '~' in value):
                config[key] = os.path.expandvars(os.path.expanduser(value))

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation

        Args:
            path: Configuration path (e.g., 'storage.slot')
            default: Default value if path doesn't exist

        Returns:
            Configuration value
        """
        value = self._config

        for key in path.split('.'):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, path: str, value: Any):
        """
        Set configuration value using dot notation

        Args:
            path: Configuration path (e.g., 'web.port')
            value: Value to set
        """
        keys = path.split('.')
        config = self._config

        for key in keys[:-1]:
            if not isinstance(config.get(key), dict):
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value
        self.logger.debug(f"Config set: {path} = {value}")

    def save(self, config_path: str):
        """
        Save configuration to YAML file

        Args:
            config_path: Path to save config file
        """
        with open(config_path, 'w') as f:
            yaml.safe_dump(self._config, f, default_flow_style=False)

        self.logger.info(f"Configuration saved to {config_path}")

    def get_all(self) -> Dict:
        """Get entire configuration dictionary"""
        return copy.deepcopy(self._config)
