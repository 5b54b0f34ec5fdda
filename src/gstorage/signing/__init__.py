"""
gstorage Python SDK - Signed URL Module

Canonical string construction and RSA signing for time-limited Google Cloud
Storage URLs.
"""

from .types import (
    HttpMethod,
    SignParams,
    SignedURL,
    SigningError,
    SigningErrorCodes,
)

from .canonical_message import (
    EXCLUDED_HEADERS,
    CanonicalRequestBuilder,
    build_canonical_string,
    canonical_headers,
    normalize_headers,
    object_path,
)

from .url_signer import (
    URLSigner,
    create_url_signer,
    make_signed_url,
)

from .signing_config import (
    DEFAULT_BASE_URL,
    DEFAULT_EXPIRATION,
    URLSignerConfig,
    URLSignerConfigBuilder,
    create_signer_config,
    validate_signer_config,
)

from .utils import (
    calculate_content_md5,
    duration_seconds,
    expiration_from_now,
    normalize_header_name,
    to_unix_seconds,
)

# Public API exports
__all__ = [
    # Types
    'HttpMethod',
    'SignParams',
    'SignedURL',
    'SigningError',
    'SigningErrorCodes',
    # Canonical string
    'EXCLUDED_HEADERS',
    'CanonicalRequestBuilder',
    'build_canonical_string',
    'canonical_headers',
    'normalize_headers',
    'object_path',
    # Signer
    'URLSigner',
    'create_url_signer',
    'make_signed_url',
    # Configuration
    'DEFAULT_BASE_URL',
    'DEFAULT_EXPIRATION',
    'URLSignerConfig',
    'URLSignerConfigBuilder',
    'create_signer_config',
    'validate_signer_config',
    # Utilities
    'calculate_content_md5',
    'duration_seconds',
    'expiration_from_now',
    'normalize_header_name',
    'to_unix_seconds',
]
