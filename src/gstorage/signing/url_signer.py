"""
Signed URL generation for Google Cloud Storage

This module provides the URLSigner, which hashes and signs canonical strings
with an RSA private key (SHA-256, PKCS#1 v1.5) and assembles signed URLs
carrying GoogleAccessId, Expires and Signature query parameters.
"""

import base64
import dataclasses
import logging
from typing import Dict, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from .types import (
    HttpMethod,
    SignParams,
    SignedURL,
    SigningError,
    SigningErrorCodes,
)
from .utils import (
    Duration,
    duration_seconds,
    encode_query,
    expiration_from_now,
    format_unix_timestamp,
    to_unix_seconds,
)
from .canonical_message import build_canonical_string, object_path
from .signing_config import URLSignerConfig, validate_signer_config

logger = logging.getLogger(__name__)

ACCESS_ID_PARAM = "GoogleAccessId"
EXPIRES_PARAM = "Expires"
SIGNATURE_PARAM = "Signature"


class URLSigner:
    """
    Signed URL generator for Google Cloud Storage

    A URLSigner holds only its immutable configuration, so one instance can be
    shared by any number of threads without locking.
    """

    def __init__(self, config: URLSignerConfig):
        """
        Initialize the signer with configuration.

        Args:
            config: Signer configuration

        Raises:
            SigningError: If configuration is invalid
        """
        if not isinstance(config, URLSignerConfig):
            raise SigningError(
                "Configuration must be URLSignerConfig instance",
                SigningErrorCodes.INVALID_CONFIG
            )
        validate_signer_config(config)
        self.config = config

    @property
    def client_email(self) -> str:
        return self.config.client_email

    def sign_string(self, canonical_string: str) -> str:
        """
        Sign a canonical string.

        The SHA-256 digest of the UTF-8 encoded string is signed with
        PKCS#1 v1.5 padding and the raw signature is base64 encoded.

        Args:
            canonical_string: String to sign

        Returns:
            str: Standard base64 signature

        Raises:
            SigningError: If the key cannot produce a signature
        """
        try:
            digest = hashes.Hash(hashes.SHA256())
            digest.update(canonical_string.encode('utf-8'))
            signature = self.config.private_key.sign(
                digest.finalize(),
                padding.PKCS1v15(),
                Prehashed(hashes.SHA256())
            )
        except Exception as e:
            raise SigningError(
                f"Message signing failed: {e}",
                SigningErrorCodes.SIGNING_FAILED,
                {"original_error": str(e), "key_type": type(self.config.private_key).__name__}
            ) from e

        return base64.b64encode(signature).decode('ascii')

    def sign_params(self, params: SignParams) -> str:
        """
        Sign a request description.

        Args:
            params: Request to sign

        Returns:
            str: Base64 signature of the canonical string

        Raises:
            SigningError: If signing fails
        """
        return self.sign_string(self._canonical_string(params))

    def sign(
        self,
        method: str,
        content_hash: str,
        content_type: str,
        bucket: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        expiration: int = 0,
    ) -> str:
        """
        Create the signature for a method, hash, content type, bucket and path.

        Returns:
            str: Base64 signature

        Raises:
            SigningError: If signing fails
        """
        return self.sign_params(SignParams(
            method=method,
            content_hash=content_hash,
            content_type=content_type,
            expiration=expiration,
            headers=headers or {},
            bucket=bucket,
            object_name=path,
        ))

    def sign_url(self, params: SignParams, duration: Duration = None) -> SignedURL:
        """
        Sign a request and build its URL without modifying the caller's params.

        Args:
            params: Request to sign
            duration: When non-zero, the expiration becomes now + duration;
                otherwise the expiration already set on params is used

        Returns:
            SignedURL: URL with the signature, expiration and canonical string

        Raises:
            SigningError: If signing fails
        """
        params = dataclasses.replace(params)
        if duration_seconds(duration):
            params.expiration = expiration_from_now(duration, self.config.clock)
        return self._build_signed_url(params)

    def make(self, params: SignParams, duration: Duration = None) -> str:
        """
        Make a signed URL for the given params.

        When ``duration`` is non-zero, ``params.expiration`` is OVERWRITTEN in
        place with now + duration (truncated to whole seconds) before signing.
        Pass a zero or None duration to keep an explicitly set expiration, or
        use :meth:`sign_url` to leave params untouched.

        Args:
            params: Request to sign, possibly updated in place
            duration: Validity window

        Returns:
            str: Signed URL

        Raises:
            SigningError: If signing fails
        """
        if duration_seconds(duration):
            params.expiration = expiration_from_now(duration, self.config.clock)
        return self._build_signed_url(params).url

    def make_url(
        self,
        method: str,
        bucket: str,
        path: str,
        duration: Duration,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Create a signed URL for the method.

        Raises:
            SigningError: If signing fails
        """
        return self.make(SignParams(
            method=method,
            headers=headers or {},
            bucket=bucket,
            object_name=path,
        ), duration)

    def download_path(self, bucket: str, path: str) -> str:
        """Generate a signed URL for downloading an object."""
        return self.make_url(HttpMethod.GET.value, bucket, path, self.config.default_expiration)

    def upload_path(self, bucket: str, path: str) -> str:
        """Generate a signed URL for uploading an object."""
        return self.make_url(HttpMethod.PUT.value, bucket, path, self.config.default_expiration)

    def delete_path(self, bucket: str, path: str) -> str:
        """Generate a signed URL for deleting an object."""
        return self.make_url(HttpMethod.DELETE.value, bucket, path, self.config.default_expiration)

    def _canonical_string(self, params: SignParams) -> str:
        canonical_string = build_canonical_string(params)
        if self.config.log_canonical_strings:
            logger.debug(f"Canonical string: {canonical_string!r}")
        return canonical_string

    def _build_signed_url(self, params: SignParams) -> SignedURL:
        expiration = to_unix_seconds(params.expiration)
        canonical_string = self._canonical_string(params)
        signature = self.sign_string(canonical_string)

        query = encode_query([
            (ACCESS_ID_PARAM, self.config.client_email),
            (EXPIRES_PARAM, format_unix_timestamp(expiration)),
            (SIGNATURE_PARAM, signature),
        ])
        base_url = params.base_url or self.config.base_url
        url = base_url + object_path(params.bucket, params.object_name) + "?" + query

        logger.debug(
            f"Signed {params.method or '<no method>'} URL for "
            f"{params.bucket}/{params.object_name} expiring at {expiration}"
        )

        return SignedURL(
            url=url,
            expiration=expiration,
            signature=signature,
            canonical_string=canonical_string,
        )


def create_url_signer(config: URLSignerConfig) -> URLSigner:
    """
    Create a new URL signer.

    Args:
        config: Signer configuration

    Returns:
        URLSigner: Configured signer instance
    """
    return URLSigner(config)


def make_signed_url(
    params: SignParams,
    config: URLSignerConfig,
    duration: Duration = None
) -> SignedURL:
    """
    Sign a request with the given configuration without mutating it.

    Args:
        params: Request to sign
        config: Signer configuration
        duration: Optional validity window

    Returns:
        SignedURL: Signing result
    """
    return create_url_signer(config).sign_url(params, duration)
