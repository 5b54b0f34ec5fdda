"""
Configuration management for the gstorage Python SDK
"""

from .signed_url_config import (
    SignedUrlConfig,
    SignedUrlConfigManager,
    EnvironmentConfig,
    SigningSettings,
    LoggingConfig,
    ConfigError,
    default_config,
    load_config_from_json,
    load_config_from_file,
    load_default_config,
)

__all__ = [
    'SignedUrlConfig',
    'SignedUrlConfigManager',
    'EnvironmentConfig',
    'SigningSettings',
    'LoggingConfig',
    'ConfigError',
    'default_config',
    'load_config_from_json',
    'load_config_from_file',
    'load_default_config',
]
