#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Configuration parser — YAML config loading, merging, and validation.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..errors import ConfigurationError
from .schema import default_config, validate_config


class ConfigValidationError(ConfigurationError):
    """Raised when configuration validation fails."""
    pass


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user values)

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


class ConfigParser:
    """
    Parse and validate CrispAlign configuration files.

    Features:
    - Load YAML configuration files over DEFAULT_CONFIG
    - Environment variable substitution (${VAR} and ${VAR:-default})
    - CLI parameter overrides
    - Schema validation
    - Dotted notation access (e.g., config.get('alignment.numcols'))
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration parser.

        Args:
            config_file: Path to YAML configuration file (optional)
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Dict[str, Any] = default_config()

        if self.config_file:
            self._load_user_config()

    def _load_user_config(self):
        """Load and merge user configuration file."""
        if not self.config_file.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_file}"
            )

        try:
            with open(self.config_file, 'r') as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Invalid YAML in config file {self.config_file}: {e}"
            )

        if user_config:
            if not isinstance(user_config, dict):
                raise ConfigValidationError(
                    f"Config file {self.config_file} must contain a mapping"
                )
            self._config = deep_merge(self._config, self._substitute_env_vars(user_config))

    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in configuration.

        Supports:
        - ${VAR}: Replace with environment variable VAR
        - ${VAR:-default}: Replace with VAR, or 'default' if not set
        """
        if isinstance(config, dict):
            return {k: self._substitute_env_vars(v) for k, v in config.items()}

        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]

        elif isinstance(config, str):
            pattern = r'\$\{([^}:]+)(?::-(.*?))?\}'

            def replace_var(match):
                return os.environ.get(match.group(1), match.group(2) or '')

            return re.sub(pattern, replace_var, config)

        else:
            return config

    def merge_cli_overrides(self, overrides: Dict[str, Any]):
        """
        Merge command-line overrides into configuration.

        None values are ignored so unset CLI options keep config values.

        Args:
            overrides: Keys in dotted notation (e.g., 'alignment.numcols')
        """
        for key, value in overrides.items():
            if value is None:
                continue
            keys = key.split('.')

            target = self._config
            for k in keys[:-1]:
                target = target.setdefault(k, {})

            target[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Supports dotted notation for nested access.

        Args:
            key: Configuration key (e.g., 'output.colwidth')
            default: Default value if key not found
        """
        value = self._config

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return self._config.copy()

    def validate(self) -> bool:
        """
        Validate configuration against the schema.

        Returns:
            True if valid

        Raises:
            ConfigValidationError: If validation fails
        """
        errors = validate_config(self._config)
        if errors:
            raise ConfigValidationError("; ".join(errors))
        return True

    def __repr__(self) -> str:
        return f"ConfigParser(config_file={self.config_file})"

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
