"""
Configuration management for signed URL generation

This module provides the signer configuration record, its validation, and a
fluent builder that can pull key material from PEM data or service account
credentials.
"""

import time
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from ..crypto.credentials import (
    ServiceAccountCredentials,
    load_private_key_pem,
    load_private_key_file,
    load_service_account_info,
    load_service_account_json,
    load_service_account_file,
)
from .types import SigningError, SigningErrorCodes
from .utils import Duration, duration_seconds

# Base Google Cloud Storage URL.
DEFAULT_BASE_URL = "https://storage.googleapis.com"

# Default validity window for signed URLs.
DEFAULT_EXPIRATION = timedelta(hours=1)

Clock = Callable[[], float]


@dataclass(frozen=True)
class URLSignerConfig:
    """
    Configuration for a URLSigner

    Attributes:
        private_key: Private key object exposing
            ``sign(data, padding, algorithm)``, normally an RSAPrivateKey
        client_email: Identity embedded in URLs as GoogleAccessId
        base_url: Base URL used when a request does not supply one
        default_expiration: Validity window for the download/upload/delete
            shorthands
        clock: Callable returning the current Unix time
        log_canonical_strings: Log canonical strings at DEBUG level
    """
    private_key: Any
    client_email: str
    base_url: str = DEFAULT_BASE_URL
    default_expiration: Union[timedelta, int, float] = DEFAULT_EXPIRATION
    clock: Clock = field(default=time.time, compare=False)
    log_canonical_strings: bool = False

    def __post_init__(self):
        validate_signer_config(self)


def validate_signer_config(config: URLSignerConfig) -> None:
    """
    Validate signer configuration.

    Args:
        config: Signer configuration to validate

    Raises:
        SigningError: If configuration is invalid
    """
    if config.private_key is None:
        raise SigningError(
            "Private key is required",
            SigningErrorCodes.INVALID_PRIVATE_KEY
        )

    if not callable(getattr(config.private_key, 'sign', None)):
        raise SigningError(
            "Private key must support signing",
            SigningErrorCodes.INVALID_PRIVATE_KEY,
            {"key_type": type(config.private_key).__name__}
        )

    if not config.client_email or not isinstance(config.client_email, str):
        raise SigningError(
            "Client email must be non-empty string",
            SigningErrorCodes.INVALID_CLIENT_EMAIL
        )

    if not config.base_url or not isinstance(config.base_url, str):
        raise SigningError(
            "Base URL must be non-empty string",
            SigningErrorCodes.INVALID_CONFIG
        )

    if duration_seconds(config.default_expiration) <= 0:
        raise SigningError(
            "Default expiration must be positive",
            SigningErrorCodes.INVALID_CONFIG,
            {"default_expiration": str(config.default_expiration)}
        )

    if not callable(config.clock):
        raise SigningError(
            "Clock must be callable",
            SigningErrorCodes.INVALID_CONFIG
        )


class URLSignerConfigBuilder:
    """
    Builder for creating signer configurations with fluent API
    """

    def __init__(self):
        self._private_key: Any = None
        self._client_email: Optional[str] = None
        self._base_url: str = DEFAULT_BASE_URL
        self._default_expiration: Duration = DEFAULT_EXPIRATION
        self._clock: Clock = time.time
        self._log_canonical_strings: bool = False

    def private_key(self, private_key: Any) -> 'URLSignerConfigBuilder':
        """
        Set private key for signing.

        Args:
            private_key: RSA private key object

        Returns:
            URLSignerConfigBuilder: Self for method chaining
        """
        self._private_key = private_key
        return self

    def pem(self, data: Union[str, bytes], password: Optional[bytes] = None) -> 'URLSignerConfigBuilder':
        """
        Set private key from PEM encoded data.

        Raises:
            CredentialsError: If the PEM data cannot be parsed
        """
        self._private_key = load_private_key_pem(data, password)
        return self

    def private_key_file(self, file_path: Union[str, Path],
                         password: Optional[bytes] = None) -> 'URLSignerConfigBuilder':
        """
        Set private key from a PEM or DER file.

        Raises:
            CredentialsError: If the file cannot be read or parsed
        """
        self._private_key = load_private_key_file(file_path, password)
        return self

    def client_email(self, client_email: str) -> 'URLSignerConfigBuilder':
        """
        Set the identity embedded as GoogleAccessId.

        Returns:
            URLSignerConfigBuilder: Self for method chaining
        """
        self._client_email = client_email
        return self

    def credentials(self, credentials: ServiceAccountCredentials) -> 'URLSignerConfigBuilder':
        """Set private key and client email from loaded service account credentials."""
        self._private_key = credentials.private_key
        self._client_email = credentials.client_email
        return self

    def service_account_info(self, info: Dict[str, Any]) -> 'URLSignerConfigBuilder':
        """Set private key and client email from a parsed service account document."""
        return self.credentials(load_service_account_info(info))

    def service_account_json(self, json_data: Union[str, bytes]) -> 'URLSignerConfigBuilder':
        """Set private key and client email from service account JSON."""
        return self.credentials(load_service_account_json(json_data))

    def service_account_file(self, file_path: Union[str, Path]) -> 'URLSignerConfigBuilder':
        """Set private key and client email from a service account key file."""
        return self.credentials(load_service_account_file(file_path))

    def base_url(self, base_url: str) -> 'URLSignerConfigBuilder':
        """
        Set the base URL used when a request does not supply one.

        Returns:
            URLSignerConfigBuilder: Self for method chaining
        """
        self._base_url = base_url
        return self

    def default_expiration(self, expiration: Union[timedelta, int, float]) -> 'URLSignerConfigBuilder':
        """
        Set the validity window used by the download/upload/delete shorthands.

        Args:
            expiration: timedelta or number of seconds

        Returns:
            URLSignerConfigBuilder: Self for method chaining
        """
        self._default_expiration = expiration
        return self

    def clock(self, clock: Clock) -> 'URLSignerConfigBuilder':
        """Set the time source used to compute expirations."""
        self._clock = clock
        return self

    def log_canonical_strings(self, enabled: bool = True) -> 'URLSignerConfigBuilder':
        self._log_canonical_strings = enabled
        return self

    def build(self) -> URLSignerConfig:
        """
        Build the signer configuration.

        Returns:
            URLSignerConfig: Complete signer configuration

        Raises:
            SigningError: If configuration is invalid
        """
        if self._private_key is None:
            raise SigningError(
                "Private key is required",
                SigningErrorCodes.INVALID_CONFIG
            )

        if self._client_email is None:
            raise SigningError(
                "Client email is required",
                SigningErrorCodes.INVALID_CONFIG
            )

        return URLSignerConfig(
            private_key=self._private_key,
            client_email=self._client_email,
            base_url=self._base_url,
            default_expiration=self._default_expiration,
            clock=self._clock,
            log_canonical_strings=self._log_canonical_strings,
        )


def create_signer_config() -> URLSignerConfigBuilder:
    """
    Create a new signer configuration builder.

    Returns:
        URLSignerConfigBuilder: New configuration builder
    """
    return URLSignerConfigBuilder()
