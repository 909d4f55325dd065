#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration management module
Handles configuration file loading and management for haloguide
"""

import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict, fields, Field

from .constants import (
    HINT_SETTLE_DELAY_SECONDS, DEFAULT_ROUTE, DEFAULT_DATA_DIRECTORY,
    DEFAULT_PROFILE, STORAGE_BACKENDS, REQUIRED_VALUE_COUNT,
    SQLITE_DATABASE_NAME, PROFILES_DIRECTORY_NAME
)
from .helpers import normalize_route


@dataclass
class HintsConfig:
    """Route-triggered hint configuration"""
    settle_delay_seconds: float = HINT_SETTLE_DELAY_SECONDS
    auto_trigger: bool = True
    default_route: str = DEFAULT_ROUTE


@dataclass
class StorageConfig:
    """Storage configuration"""
    backend: str = "json"  # memory, json, sqlite
    profile: str = DEFAULT_PROFILE
    data_directory: str = DEFAULT_DATA_DIRECTORY


@dataclass
class OnboardingConfig:
    """Onboarding wizard configuration"""
    required_values: int = REQUIRED_VALUE_COUNT


class Config:
    """Main configuration class"""

    def __init__(self, config_path: Optional[str] = None, create_default: bool = True):
        """
        Initialize configuration

        Args:
            config_path: Configuration file path, if None use default path
            create_default: Write a default config file when none exists
        """
        self.logger = logging.getLogger('haloguide.config')
        self.config_path = self._resolve_config_path(config_path)
        self.create_default = create_default

        # Load configuration
        self._load_config()

    def _resolve_config_path(self, config_path: Optional[str]) -> Path:
        """Resolve configuration file path"""
        if config_path:
            return Path(config_path).expanduser()
        return Path(DEFAULT_DATA_DIRECTORY).expanduser() / 'config.yaml'

    @staticmethod
    def default_config() -> Dict[str, Any]:
        """Default configuration as a plain dictionary"""
        return {
            'hints': asdict(HintsConfig()),
            'storage': asdict(StorageConfig()),
            'onboarding': asdict(OnboardingConfig()),
        }

    def _load_config(self):
        """Load configuration file"""
        default_config = self.default_config()

        # If config file exists, load and merge
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    user_config = yaml.safe_load(f) or {}
                if not isinstance(user_config, dict):
                    raise yaml.YAMLError("top level of configuration must be a mapping")
                # Deep merge configuration
                self._config_data = self._deep_merge(default_config, user_config)
            except (OSError, yaml.YAMLError) as e:
                self.logger.warning(f"Failed to load configuration file {self.config_path}: {e}")
                self._config_data = default_config
        else:
            # Use default configuration and create config file
            self._config_data = default_config
            if self.create_default:
                self._create_default_config()

        # Create configuration objects
        self.hints = self._build_section(HintsConfig, 'hints')
        self.storage = self._build_section(StorageConfig, 'storage')
        self.onboarding = self._build_section(OnboardingConfig, 'onboarding')
        self._validate()

    def _build_section(self, section_cls, name: str):
        """Build a config dataclass, ignoring keys it does not declare"""
        data = self._config_data.get(name)
        if not isinstance(data, dict):
            self.logger.warning(f"Config section '{name}' is not a mapping, using defaults")
            return section_cls()

        known = {f.name: f for f in fields(section_cls)}
        unknown = set(data) - set(known)
        if unknown:
            self.logger.warning(f"Ignoring unknown keys in '{name}': {sorted(map(str, unknown))}")

        values = {}
        for key, value in data.items():
            if key in known:
                values[key] = self._coerce_value(name, known[key], value)
        return section_cls(**values)

    def _coerce_value(self, section: str, field_def: Field, value: Any) -> Any:
        """
        Convert a YAML value to the field's declared type

        Numeric strings are accepted for numeric fields. Anything that cannot
        be converted falls back to the field default with a warning.

        Args:
            section: Config section name, for the log message
            field_def: Dataclass field being populated
            value: Raw value from the YAML document

        Returns:
            Value of the default's type
        """
        default = field_def.default
        expected = type(default)

        # bool is an int subclass, so it is only accepted for bool fields
        if isinstance(value, bool) == (expected is bool) and isinstance(value, expected):
            return value

        if expected in (int, float) and not isinstance(value, bool):
            if isinstance(value, (int, float)):
                return expected(value)
            if isinstance(value, str):
                try:
                    return expected(value.strip())
                except ValueError:
                    pass

        self.logger.warning(
            f"Invalid value for '{section}.{field_def.name}': {value!r} "
            f"(expected {expected.__name__}), using default {default!r}"
        )
        return default

    def _validate(self):
        """Fall back to defaults for values the engine cannot honour"""
        if self.storage.backend not in STORAGE_BACKENDS:
            self.logger.warning(
                f"Unknown storage backend '{self.storage.backend}', using 'json'"
            )
            self.storage.backend = 'json'

        route = self.hints.default_route.strip()
        if not route:
            self.logger.warning(f"Empty default route, using '{DEFAULT_ROUTE}'")
            route = DEFAULT_ROUTE
        self.hints.default_route = normalize_route(route, DEFAULT_ROUTE)

        if not self.hints.settle_delay_seconds >= 0:
            self.logger.warning(
                f"Invalid hint settle delay {self.hints.settle_delay_seconds}, using 0"
            )
            self.hints.settle_delay_seconds = 0.0

        # The value gate is a product rule, not a tunable
        if self.onboarding.required_values != REQUIRED_VALUE_COUNT:
            self.logger.warning(
                f"onboarding.required_values={self.onboarding.required_values} ignored, "
                f"wizard requires exactly {REQUIRED_VALUE_COUNT}"
            )
            self.onboarding.required_values = REQUIRED_VALUE_COUNT

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _create_default_config(self):
        """Create default configuration file"""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.dump(self._config_data, f, default_flow_style=False,
                          allow_unicode=True, indent=2)
            self.logger.info(f"Created default configuration file: {self.config_path}")
        except OSError as e:
            self.logger.warning(f"Failed to create configuration file: {e}")

    @property
    def data_directory(self) -> Path:
        """Get data directory"""
        return Path(self.storage.data_directory).expanduser()

    @data_directory.setter
    def data_directory(self, value: str):
        """Set data directory"""
        self.storage.data_directory = str(value)

    def get_database_path(self) -> Path:
        """Get SQLite database file path"""
        return self.data_directory / SQLITE_DATABASE_NAME

    def get_profiles_dir(self) -> Path:
        """Get directory holding JSON profile files"""
        return self.data_directory / PROFILES_DIRECTORY_NAME

    def save(self):
        """Save current configuration to file"""
        config_data = {
            'hints': asdict(self.hints),
            'storage': asdict(self.storage),
            'onboarding': asdict(self.onboarding),
        }

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.dump(config_data, f, default_flow_style=False,
                          allow_unicode=True, indent=2)
        except OSError as e:
            raise Exception(f"Failed to save configuration: {e}")
