# ============================================================================
# FILE: config.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/config.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: JSON configuration manager with dotted-key access
# ============================================================================

"""
Configuration Manager for the Indexed File Analyzer.

Holds the settings that are not part of a single invocation: where session
logs go, whether they are written at all, and the header used by implode
when none is given.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from fileanalyzer.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError
)


class ConfigManager:
    """
    Manages analyzer configuration.

    With a ``config_file`` the configuration is loaded from it, or the file is
    created with defaults when it does not exist yet.  Without one the
    defaults are used in memory and nothing is written.
    """

    DEFAULT_CONFIG = {
        "global_settings": {
            "log_dir": "logs",
            "session_log": False
        },
        "app_defaults": {
            "default_header": ""
        }
    }

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = Path(config_file) if config_file else None
        self.config: Dict = {}
        self._load_or_create()

    def _load_or_create(self) -> None:
        if self.config_file is None:
            self.config = self._deep_copy(self.DEFAULT_CONFIG)
        elif self.config_file.exists():
            self.load()
        else:
            self.config = self._deep_copy(self.DEFAULT_CONFIG)
            self.save()

    def load(self) -> Dict:
        """
        Load configuration from file.

        Sections or keys missing from the file are filled in from the
        defaults, so older files keep working when new settings appear.

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigLoadError: If file cannot be loaded or parsed
        """
        if self.config_file is None:
            raise ConfigLoadError("<memory>", "No configuration file set")
        try:
            text = self.config_file.read_text(encoding='utf-8')
            data = json.loads(text)
        except FileNotFoundError:
            raise ConfigLoadError(str(self.config_file), "File not found")
        except json.JSONDecodeError as e:
            raise ConfigLoadError(str(self.config_file), f"Invalid JSON: {str(e)}")
        except OSError as e:
            raise ConfigLoadError(str(self.config_file), str(e))

        if not isinstance(data, dict):
            raise ConfigLoadError(str(self.config_file), "Top level must be a JSON object")

        self.config = self._merge_defaults(data)
        return self.config

    def save(self) -> None:
        """
        Save configuration to file.

        Raises:
            ConfigError: If file cannot be written
        """
        if self.config_file is None:
            return
        try:
            text = json.dumps(self.config, indent=2, ensure_ascii=False)
            self.config_file.write_text(text, encoding='utf-8')
        except OSError as e:
            raise ConfigError(f"Failed to save config: {str(e)}")

    def _merge_defaults(self, data: Dict) -> Dict:
        merged = self._deep_copy(self.DEFAULT_CONFIG)
        for section, values in data.items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values
        return merged

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot-notation path.

        Args:
            key_path: Dot-separated path (e.g., 'global_settings.log_dir')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config
        for key in key_path.split('.'):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot-notation path."""
        keys = key_path.split('.')
        target = self.config
        for key in keys[:-1]:
            if key not in target:
                target[key] = {}
            target = target[key]
        target[keys[-1]] = value

    def validate(self) -> bool:
        """
        Validate configuration against schema.

        Returns:
            True if valid

        Raises:
            ConfigValidationError: If validation fails
        """
        for section in ("global_settings", "app_defaults"):
            if not isinstance(self.config.get(section), dict):
                raise ConfigValidationError(
                    section,
                    None,
                    f"Required section '{section}' missing"
                )

        self._validate_log_dir()
        self._validate_session_log()
        self._validate_default_header()
        return True

    def _validate_log_dir(self) -> None:
        value = self.get('global_settings.log_dir')
        if not isinstance(value, str) or not value.strip():
            raise ConfigValidationError(
                'global_settings.log_dir',
                value,
                "Must be a non-empty string"
            )

    def _validate_session_log(self) -> None:
        value = self.get('global_settings.session_log')
        if not isinstance(value, bool):
            raise ConfigValidationError(
                'global_settings.session_log',
                value,
                "Must be true or false"
            )

    def _validate_default_header(self) -> None:
        value = self.get('app_defaults.default_header')
        if not isinstance(value, str) or '\x00' in value:
            raise ConfigValidationError(
                'app_defaults.default_header',
                value,
                "Must be a string without NUL characters"
            )

    def _deep_copy(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._deep_copy(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._deep_copy(item) for item in obj]
        else:
            return obj


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: exceptions.py
# TESTS: tests/unit/test_config.py
# ============================================================================
