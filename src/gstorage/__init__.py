"""
gstorage Python SDK
Signed URL generation for Google Cloud Storage
"""

from .version import __version__
from .exceptions import (
    GStorageError,
    ValidationError,
    CredentialsError,
    TransferError,
)
from .crypto import (
    ServiceAccountCredentials,
    load_private_key_pem,
    load_private_key_der,
    load_private_key_file,
    load_service_account_info,
    load_service_account_json,
    load_service_account_file,
    generate_rsa_private_key,
    verify_signature,
)
from .signing import (
    # Core signing functionality
    URLSigner,
    create_url_signer,
    make_signed_url,
    # Types
    HttpMethod,
    SignParams,
    SignedURL,
    SigningError,
    SigningErrorCodes,
    # Canonical string
    build_canonical_string,
    canonical_headers,
    object_path,
    # Configuration
    DEFAULT_BASE_URL,
    DEFAULT_EXPIRATION,
    URLSignerConfig,
    URLSignerConfigBuilder,
    create_signer_config,
    # Utilities
    calculate_content_md5,
)
from .config import (
    SignedUrlConfigManager,
    ConfigError,
    load_default_config,
)
from .http_client import (
    SignedUrlHttpClient,
    TransferConfig,
)


def create_signer_from_service_account(file_path, **overrides) -> URLSigner:
    """
    Create a URLSigner from a service account key file.

    Args:
        file_path: Path to the JSON key file
        **overrides: URLSignerConfig fields to override (base_url,
            default_expiration, clock, log_canonical_strings)

    Returns:
        URLSigner: Configured signer
    """
    credentials = load_service_account_file(file_path)
    config = URLSignerConfig(
        private_key=credentials.private_key,
        client_email=credentials.client_email,
        **overrides
    )
    return URLSigner(config)


# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'GStorageError',
    'ValidationError',
    'CredentialsError',
    'TransferError',
    # Credentials
    'ServiceAccountCredentials',
    'load_private_key_pem',
    'load_private_key_der',
    'load_private_key_file',
    'load_service_account_info',
    'load_service_account_json',
    'load_service_account_file',
    'generate_rsa_private_key',
    'verify_signature',
    # Signing - Core
    'URLSigner',
    'create_url_signer',
    'make_signed_url',
    'create_signer_from_service_account',
    # Signing - Types
    'HttpMethod',
    'SignParams',
    'SignedURL',
    'SigningError',
    'SigningErrorCodes',
    # Signing - Canonical string
    'build_canonical_string',
    'canonical_headers',
    'object_path',
    # Signing - Configuration
    'DEFAULT_BASE_URL',
    'DEFAULT_EXPIRATION',
    'URLSignerConfig',
    'URLSignerConfigBuilder',
    'create_signer_config',
    # Utilities
    'calculate_content_md5',
    # Configuration
    'SignedUrlConfigManager',
    'ConfigError',
    'load_default_config',
    # HTTP transfer
    'SignedUrlHttpClient',
    'TransferConfig',
]
