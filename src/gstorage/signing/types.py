"""
Type definitions for signed URL generation

This module provides the data classes shared by the canonical request builder
and the URL signer, along with the signing error type and its error codes.
"""

import dataclasses
from datetime import datetime
from typing import Dict, Optional, Union, Any
from dataclasses import dataclass, field
from enum import Enum

from .utils import to_unix_seconds


class HttpMethod(str, Enum):
    """HTTP methods commonly used with signed URLs"""
    GET = "GET"
    HEAD = "HEAD"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"


@dataclass
class SignParams:
    """
    Signable description of a request against an object.

    Attributes:
        method: HTTP method (GET, PUT, ...). Not checked against a whitelist.
        content_hash: MD5 hash of the uploaded content, empty when irrelevant
        content_type: Content type of the uploaded content, empty when irrelevant
        expiration: Expiration of the signature as Unix seconds. A datetime is
            accepted and converted on construction; one assigned later is
            converted when the canonical string and URL are rendered.
        headers: Extra headers to sign; names are case-insensitive
        bucket: Storage bucket
        object_name: Object path inside the bucket
        base_url: URL to build the signed URL on; the signer's base URL is
            used when not supplied
    """
    method: Union[HttpMethod, str] = ""
    content_hash: str = ""
    content_type: str = ""
    expiration: Union[int, datetime] = 0
    headers: Dict[str, str] = field(default_factory=dict)
    bucket: str = ""
    object_name: str = ""
    base_url: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.method, HttpMethod):
            self.method = self.method.value
        self.method = self.method or ""
        self.content_hash = self.content_hash or ""
        self.content_type = self.content_type or ""
        self.expiration = to_unix_seconds(self.expiration)
        self.headers = dict(self.headers or {})

    def with_expiration(self, expiration: Union[int, datetime]) -> 'SignParams':
        """Return a copy of these params with a different expiration."""
        return dataclasses.replace(self, expiration=expiration)


@dataclass(frozen=True)
class SignedURL:
    """
    Result of signing a request.

    Attributes:
        url: Complete signed URL
        expiration: Unix seconds embedded in both the URL and the signature
        signature: Base64 encoded signature
        canonical_string: Exact string that was signed
    """
    url: str
    expiration: int
    signature: str
    canonical_string: str

    def __str__(self) -> str:
        return self.url


class SigningError(Exception):
    """
    Error class for signing operations

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"SigningError(message='{self.message}', code='{self.code}', details={self.details})"


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_PRIVATE_KEY = "INVALID_PRIVATE_KEY"
    INVALID_CLIENT_EMAIL = "INVALID_CLIENT_EMAIL"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"
