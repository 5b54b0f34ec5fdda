"""
Configuration management for signed URL generation

Provides environment-specific settings (base URL, default validity window,
logging) loaded from a JSON document, with environment variable overrides.
"""

import os
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union
from dataclasses import dataclass, replace
from datetime import timedelta
from pathlib import Path

from ..signing.signing_config import (
    DEFAULT_BASE_URL,
    DEFAULT_EXPIRATION,
    URLSignerConfig,
)

CONFIG_FORMAT_VERSION = "1.0"
DEFAULT_ENVIRONMENT = "production"

ENV_BASE_URL = "GSTORAGE_BASE_URL"
ENV_DEFAULT_EXPIRATION = "GSTORAGE_DEFAULT_EXPIRATION"
ENV_CREDENTIALS = "GSTORAGE_CREDENTIALS"
ENV_ENVIRONMENT = "GSTORAGE_ENVIRONMENT"

DEFAULT_CONFIG_PATHS = [
    Path("gstorage.json"),
    Path("config/gstorage.json"),
    Path.home() / ".config" / "gstorage" / "gstorage.json",
]


class ConfigError(Exception):
    """Configuration loading and validation error"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


@dataclass
class SigningSettings:
    """Signing settings for one environment"""
    base_url: str = DEFAULT_BASE_URL
    default_expiration_seconds: int = int(DEFAULT_EXPIRATION.total_seconds())
    credentials_file: Optional[str] = None

    @property
    def default_expiration(self) -> timedelta:
        return timedelta(seconds=self.default_expiration_seconds)


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"
    log_canonical_strings: bool = False

    def apply(self) -> None:
        """Configure root logging from these settings."""
        logging.basicConfig(
            level=getattr(logging, self.level.upper(), logging.WARNING),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@dataclass
class EnvironmentConfig:
    """Environment-specific configuration"""
    signing: SigningSettings
    logging: LoggingConfig


@dataclass
class SignedUrlConfig:
    """Configuration document"""
    config_format_version: str
    default_environment: str
    environments: Dict[str, EnvironmentConfig]


def default_config() -> SignedUrlConfig:
    """Configuration used when no document is supplied"""
    return SignedUrlConfig(
        config_format_version=CONFIG_FORMAT_VERSION,
        default_environment=DEFAULT_ENVIRONMENT,
        environments={
            DEFAULT_ENVIRONMENT: EnvironmentConfig(
                signing=SigningSettings(),
                logging=LoggingConfig(),
            )
        },
    )


class SignedUrlConfigManager:
    """Configuration manager for signed URL generation"""

    def __init__(self, config: SignedUrlConfig, environment: Optional[str] = None):
        self.config = config
        self.current_environment = environment or config.default_environment
        self._validate()

    @classmethod
    def from_dict(cls, data: Dict[str, Any], environment: Optional[str] = None) -> 'SignedUrlConfigManager':
        """Load configuration from a parsed JSON document"""
        try:
            config = cls._parse_config_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid configuration format: {e}", "INVALID_FORMAT") from e
        return cls(config, environment)

    @classmethod
    def from_json(cls, json_string: str, environment: Optional[str] = None) -> 'SignedUrlConfigManager':
        """Load configuration from JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR") from e
        return cls.from_dict(data, environment)

    @classmethod
    def from_file(cls, file_path: Union[str, Path], environment: Optional[str] = None) -> 'SignedUrlConfigManager':
        """Load configuration from file"""
        try:
            with open(Path(file_path), 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigError(f"Failed to read configuration file: {e}", "FILE_ERROR") from e
        return cls.from_json(json_string, environment)

    @classmethod
    def load_default(cls, environment: Optional[str] = None,
                     search_paths: Optional[List[Path]] = None) -> 'SignedUrlConfigManager':
        """
        Load configuration from the first existing default location.

        Falls back to built-in defaults when no file exists. The environment
        defaults to GSTORAGE_ENVIRONMENT when set.
        """
        environment = environment or os.environ.get(ENV_ENVIRONMENT) or None
        for path in search_paths if search_paths is not None else DEFAULT_CONFIG_PATHS:
            if Path(path).exists():
                return cls.from_file(path, environment)
        return cls(default_config(), environment)

    def set_environment(self, environment: str) -> None:
        """Set current environment"""
        if environment not in self.config.environments:
            raise ConfigError(f"Environment '{environment}' not found", "ENVIRONMENT_NOT_FOUND")
        self.current_environment = environment

    def get_current_environment_config(self) -> EnvironmentConfig:
        """Get current environment configuration"""
        env_config = self.config.environments.get(self.current_environment)
        if not env_config:
            raise ConfigError(f"Environment '{self.current_environment}' not found", "ENVIRONMENT_NOT_FOUND")
        return env_config

    def get_signing_settings(self) -> SigningSettings:
        return self.get_current_environment_config().signing

    def get_logging_config(self) -> LoggingConfig:
        return self.get_current_environment_config().logging

    def list_environments(self) -> List[str]:
        """List available environments"""
        return list(self.config.environments.keys())

    def apply_env_overrides(self, env: Optional[Mapping[str, str]] = None) -> None:
        """
        Override the current environment's signing settings from variables.

        Reads GSTORAGE_BASE_URL, GSTORAGE_DEFAULT_EXPIRATION (seconds) and
        GSTORAGE_CREDENTIALS (service account file path).
        """
        env = os.environ if env is None else env
        env_config = self.get_current_environment_config()
        signing = env_config.signing

        if env.get(ENV_BASE_URL):
            signing = replace(signing, base_url=env[ENV_BASE_URL])

        if env.get(ENV_DEFAULT_EXPIRATION):
            try:
                seconds = int(env[ENV_DEFAULT_EXPIRATION])
            except ValueError as e:
                raise ConfigError(
                    f"{ENV_DEFAULT_EXPIRATION} must be an integer number of seconds",
                    "INVALID_SIGNING_CONFIG"
                ) from e
            signing = replace(signing, default_expiration_seconds=seconds)

        if env.get(ENV_CREDENTIALS):
            signing = replace(signing, credentials_file=env[ENV_CREDENTIALS])

        self._validate_signing(self.current_environment, signing)
        env_config.signing = signing

    def to_signer_config(self, private_key: Any, client_email: str) -> URLSignerConfig:
        """Convert to a URLSigner configuration"""
        env_config = self.get_current_environment_config()
        return URLSignerConfig(
            private_key=private_key,
            client_email=client_email,
            base_url=env_config.signing.base_url,
            default_expiration=env_config.signing.default_expiration,
            log_canonical_strings=env_config.logging.log_canonical_strings,
        )

    def _validate(self) -> None:
        """Validate the configuration"""
        default_environment = self.config.default_environment
        if not isinstance(default_environment, str) or default_environment not in self.config.environments:
            raise ConfigError(
                f"Default environment '{self.config.default_environment}' not found",
                "INVALID_DEFAULT_ENVIRONMENT"
            )

        if self.current_environment not in self.config.environments:
            raise ConfigError(
                f"Environment '{self.current_environment}' not found",
                "ENVIRONMENT_NOT_FOUND"
            )

        for env_name, env_config in self.config.environments.items():
            self._validate_signing(env_name, env_config.signing)
            self._validate_logging(env_name, env_config.logging)

    @staticmethod
    def _validate_signing(env_name: str, signing: SigningSettings) -> None:
        """Validate one environment's signing settings"""
        if not isinstance(signing.base_url, str) or not signing.base_url:
            raise ConfigError(
                f"Environment '{env_name}' has invalid base_url",
                "INVALID_SIGNING_CONFIG"
            )

        expiration = signing.default_expiration_seconds
        if isinstance(expiration, bool) or not isinstance(expiration, int) or expiration <= 0:
            raise ConfigError(
                f"Environment '{env_name}' has invalid default_expiration_seconds: {expiration!r}",
                "INVALID_SIGNING_CONFIG"
            )

        if signing.credentials_file is not None and not isinstance(signing.credentials_file, str):
            raise ConfigError(
                f"Environment '{env_name}' has invalid credentials_file",
                "INVALID_SIGNING_CONFIG"
            )

    @staticmethod
    def _validate_logging(env_name: str, logging_config: LoggingConfig) -> None:
        """Validate one environment's logging settings"""
        if not isinstance(logging_config.level, str):
            raise ConfigError(
                f"Environment '{env_name}' has invalid logging level",
                "INVALID_LOGGING_CONFIG"
            )

        if not isinstance(logging_config.log_canonical_strings, bool):
            raise ConfigError(
                f"Environment '{env_name}' has invalid log_canonical_strings",
                "INVALID_LOGGING_CONFIG"
            )

    @staticmethod
    def _parse_config_dict(data: Dict[str, Any]) -> SignedUrlConfig:
        """Parse configuration dictionary into structured objects"""
        environments = {}
        for env_name, env_data in data['environments'].items():
            environments[env_name] = EnvironmentConfig(
                signing=SigningSettings(**env_data.get('signing', {})),
                logging=LoggingConfig(**env_data.get('logging', {})),
            )

        defaults = data.get('defaults', {})

        return SignedUrlConfig(
            config_format_version=data.get('config_format_version', CONFIG_FORMAT_VERSION),
            default_environment=defaults.get('environment', DEFAULT_ENVIRONMENT),
            environments=environments,
        )


def load_config_from_json(json_string: str, environment: Optional[str] = None) -> SignedUrlConfigManager:
    """Load configuration from JSON string"""
    return SignedUrlConfigManager.from_json(json_string, environment)


def load_config_from_file(file_path: Union[str, Path], environment: Optional[str] = None) -> SignedUrlConfigManager:
    """Load configuration from file"""
    return SignedUrlConfigManager.from_file(file_path, environment)


def load_default_config(environment: Optional[str] = None) -> SignedUrlConfigManager:
    """Load default configuration"""
    return SignedUrlConfigManager.load_default(environment)
