"""Configuration Management for ChatCal

Handles loading, validation, and management of application configuration.
Supports hierarchical YAML files with environment variable overrides:

    default_config.yaml < <environment>.yaml < user_preferences.yaml < local.yaml < CHATCAL_* env
"""

import os
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .error_handler import ConfigurationError
from .logging_manager import LoggingManager
from ..processors.timezones import DEFAULT_TIMEZONE, is_valid_timezone


class EventDefaults(BaseModel):
    """Defaults applied when a message does not say otherwise."""
    default_timezone: str = Field(default=DEFAULT_TIMEZONE)
    fallback_timezone: str = Field(default=DEFAULT_TIMEZONE)
    default_duration_minutes: int = Field(default=60, ge=1, le=7 * 24 * 60)

    @field_validator('default_timezone', 'fallback_timezone')
    @classmethod
    def validate_timezone(cls, v):
        """Validate IANA timezone name"""
        if not is_valid_timezone(v):
            raise ValueError(f"Unknown timezone: {v}")
        return v


class FilterConfig(BaseModel):
    """Word filters applied to incoming text before extraction."""
    blacklist: List[str] = Field(default_factory=lambda: ["now"])
    whitelist: List[str] = Field(default_factory=list)

    @field_validator('blacklist', 'whitelist', mode='before')
    @classmethod
    def normalize_words(cls, v):
        """Accept a comma separated string and lowercase every word"""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(',')
        return [str(word).strip().lower() for word in v if str(word).strip()]


class ExportConfig(BaseModel):
    """Configuration for calendar exports."""
    calendar_base_url: str = Field(default="https://calendar.google.com/calendar/render")
    product_id: str = Field(default="-//ChatCal//ChatCal//EN")
    uid_domain: str = Field(default="chatcal.local")
    output_dir: str = Field(default="exports")


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_dir: Optional[str] = Field(default=None)
    max_file_size: str = Field(default="10MB")
    backup_count: int = Field(default=5, ge=1, le=20)
    log_to_console: bool = Field(default=True)

    @field_validator('level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('max_file_size')
    @classmethod
    def validate_file_size(cls, v):
        """Validate file size format"""
        import re
        if not re.match(r'^\d+[KMG]B$', v.upper()):
            raise ValueError("File size must be in format: 10KB, 10MB, or 1GB")
        return v.upper()

    @property
    def max_bytes(self) -> int:
        units = {'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}
        return int(self.max_file_size[:-2]) * units[self.max_file_size[-2:]]


class AppConfig(BaseModel):
    """Main application configuration."""
    model_config = ConfigDict(validate_assignment=True)

    app_name: str = Field(default="ChatCal")
    version: str = Field(default="1.0.0")
    environment: str = Field(default="development", pattern="^(development|testing|staging|production)$")
    debug_mode: bool = Field(default=False)

    events: EventDefaults = Field(default_factory=EventDefaults)
    filters: FilterConfig = Field(default_factory=FilterConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages application configuration loading and validation."""

    ENV_PREFIX = "CHATCAL_"
    SECTIONS = ('events', 'filters', 'export', 'logging')

    def __init__(self, config_path: Optional[Path] = None, environment: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional configuration directory
            environment: Environment name (development, testing, staging, production)
        """
        self.config_base_path = Path(config_path) if config_path else self._get_default_config_path()
        self.environment = environment or os.getenv('CHATCAL_ENV', 'development')
        self._config: Optional[AppConfig] = None
        self._lock = threading.RLock()
        self.logger = LoggingManager.get_logger(__name__)

        self.config_files = self._get_config_files()

    def _get_default_config_path(self) -> Path:
        """Get the default configuration directory."""
        config_locations = [
            Path("config"),
            Path.home() / ".chatcal",
            Path("/etc/chatcal"),
        ]

        for location in config_locations:
            if location.exists() and location.is_dir():
                return location

        return Path("config")

    def _get_config_files(self) -> Dict[str, Path]:
        """Get configuration file paths for hierarchical loading."""
        base_dir = self.config_base_path

        return {
            'default': base_dir / 'default_config.yaml',
            'environment': base_dir / f'{self.environment}.yaml',
            'user': base_dir / 'user_preferences.yaml',
            'local': base_dir / 'local.yaml'
        }

    @property
    def config(self) -> AppConfig:
        return self.load_config()

    def load_config(self) -> AppConfig:
        """Load and validate configuration with hierarchical overrides.

        Returns:
            Validated application configuration

        Raises:
            ConfigurationError: If a file is unreadable or validation fails
        """
        with self._lock:
            if self._config:
                return self._config

            config_data: Dict[str, Any] = {}

            for config_type, config_file in self.config_files.items():
                if config_file.exists():
                    self.logger.info(f"Loading {config_type} config from {config_file}")
                    self._deep_merge(config_data, self._load_yaml_file(config_file))

            env_overrides = self._get_env_overrides()
            if env_overrides:
                self.logger.info(f"Applying environment overrides: {list(env_overrides.keys())}")
                self._deep_merge(config_data, env_overrides)

            self._config = self._build_config(config_data)
            return self._config

    def reload_config(self) -> AppConfig:
        """Drop the cached configuration and load it again."""
        with self._lock:
            self._config = None
            return self.load_config()

    def _build_config(self, config_data: Dict[str, Any]) -> AppConfig:
        try:
            return AppConfig(**config_data)
        except ValidationError as e:
            self.logger.error(f"Configuration validation failed: {e}")
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file.

        Returns:
            Configuration dictionary
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"Failed to parse YAML file {file_path}: {e}")
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {file_path} must contain a mapping")
        return data

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Get configuration overrides from environment variables.

        Environment variables follow pattern: CHATCAL_<SECTION>_<KEY>
        Example: CHATCAL_EVENTS_DEFAULT_TIMEZONE -> events.default_timezone
        """
        overrides: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == 'CHATCAL_ENV':
                continue

            parts = key[len(self.ENV_PREFIX):].lower().split('_')
            if parts[0] in self.SECTIONS and len(parts) > 1:
                section = overrides.setdefault(parts[0], {})
                section['_'.join(parts[1:])] = self._convert_env_value(value)
            else:
                overrides['_'.join(parts)] = self._convert_env_value(value)

        return overrides

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool, List[str]]:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        # Comma separated lists
        if ',' in value:
            return [v.strip() for v in value.split(',')]

        return value

    def _deep_merge(self, base_dict: Dict[str, Any], update_dict: Dict[str, Any]):
        """Recursively merge nested dictionaries."""
        for key, value in update_dict.items():
            if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
                self._deep_merge(base_dict[key], value)
            else:
                base_dict[key] = value

    def update_config(self, updates: Dict[str, Any], save_to_user: bool = True) -> AppConfig:
        """Update configuration with new values.

        Args:
            updates: Dictionary of configuration updates
            save_to_user: Whether to save updates to user preferences file

        Returns:
            Updated configuration
        """
        with self._lock:
            current = self.load_config()

            config_dict = current.model_dump()
            self._deep_merge(config_dict, updates)
            new_config = self._build_config(config_dict)

            if save_to_user:
                self._save_user_preferences(updates)

            self._config = new_config
            self.logger.info(f"Configuration updated: {sorted(updates.keys())}")
            return self._config

    def save_config(self, target: str = "user"):
        """Save current configuration to file.

        Args:
            target: Which config file to save to ('default', 'environment', 'user', 'local')
        """
        with self._lock:
            if target not in self.config_files:
                raise ConfigurationError(f"Invalid target: {target}")

            config_dict = self.load_config().model_dump()
            target_file = self.config_files[target]
            target_file.parent.mkdir(parents=True, exist_ok=True)

            with open(target_file, 'w', encoding='utf-8') as f:
                yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

            self.logger.info(f"Configuration saved to {target_file}")

    def _save_user_preferences(self, updates: Dict[str, Any]):
        """Save user preference updates to user config file."""
        user_file = self.config_files['user']

        user_prefs: Dict[str, Any] = {}
        if user_file.exists():
            user_prefs = self._load_yaml_file(user_file)

        self._deep_merge(user_prefs, updates)

        user_file.parent.mkdir(parents=True, exist_ok=True)
        with open(user_file, 'w', encoding='utf-8') as f:
            yaml.dump(user_prefs, f, default_flow_style=False, sort_keys=False)

    def validate_config(self, config_data: Dict[str, Any]) -> List[str]:
        """Validate configuration data without applying it.

        Returns:
            List of validation error messages, empty when valid
        """
        try:
            AppConfig(**config_data)
            return []
        except ValidationError as e:
            return [
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
