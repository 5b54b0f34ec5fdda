"""
HTTP client for transferring objects through signed URLs

This module provides a small requests-based client that downloads, uploads
and deletes objects using URLs produced by the URLSigner. The request
headers sent on upload must match the ones that were signed, so uploads can
take the SignParams used to sign the URL.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from requests.packages.urllib3.util.retry import Retry

from .exceptions import TransferError, ValidationError
from .signing.types import SignParams
from .version import __version__

logger = logging.getLogger(__name__)


@dataclass
class TransferConfig:
    """Configuration for signed URL transfers."""
    timeout: float = 30.0
    verify_ssl: bool = True
    retry_attempts: int = 3
    retry_backoff_factor: float = 0.3

    def __post_init__(self):
        """Validate transfer configuration."""
        if self.timeout <= 0:
            raise ValidationError("Timeout must be positive")

        if self.retry_attempts < 0:
            raise ValidationError("Retry attempts must be non-negative")

        if self.retry_backoff_factor < 0:
            raise ValidationError("Retry backoff factor must be non-negative")


class SignedUrlHttpClient:
    """
    HTTP client for signed URL transfers.

    Retries idempotent requests on throttling and server errors.
    """

    def __init__(self, config: Optional[TransferConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize the HTTP client.

        Args:
            config: Transfer settings
            session: Pre-built session, mainly for tests
        """
        self.config = config or TransferConfig()
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create HTTP session with retry logic."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.config.retry_attempts,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "PUT", "DELETE"],
            backoff_factor=self.config.retry_backoff_factor,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'User-Agent': f'gstorage-python-sdk/{__version__}'
        })

        return session

    def _make_request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make HTTP request with error handling.

        Raises:
            TransferError: On HTTP or network errors
        """
        kwargs.setdefault('timeout', self.config.timeout)
        kwargs.setdefault('verify', self.config.verify_ssl)

        # Signed URLs are bearer credentials; log without the query string.
        safe_url = url.split('?', 1)[0]

        try:
            logger.debug(f"Making {method} request to {safe_url}")
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.Timeout as e:
            raise TransferError(f"Request timeout after {self.config.timeout} seconds", "TIMEOUT") from e
        except requests.exceptions.ConnectionError as e:
            raise TransferError(f"Connection error: {e}", "CONNECTION_ERROR") from e
        except requests.exceptions.RequestException as e:
            raise TransferError(f"Request failed: {e}", "REQUEST_FAILED") from e

        if not response.ok:
            raise TransferError(
                f"{method} {safe_url} failed: HTTP {response.status_code}: {response.reason}",
                "HTTP_ERROR",
                http_status=response.status_code,
                details={'body': response.text[:500]}
            )

        return response

    def download(self, url: str) -> bytes:
        """
        Download an object through a signed GET URL.

        Returns:
            bytes: Object content

        Raises:
            TransferError: On failure
        """
        return self._make_request('GET', url).content

    def upload(self, url: str, data: Union[str, bytes], params: Optional[SignParams] = None) -> None:
        """
        Upload an object through a signed PUT URL.

        Args:
            url: Signed URL
            data: Object content
            params: Params the URL was signed with; their content type, MD5
                and extra headers are sent so they match the signature

        Raises:
            TransferError: On failure
        """
        headers = self._request_headers(params) if params is not None else {}
        if isinstance(data, str):
            data = data.encode('utf-8')
        self._make_request('PUT', url, data=data, headers=headers)
        logger.info(f"Uploaded {len(data)} bytes to {url.split('?', 1)[0]}")

    def delete(self, url: str) -> None:
        """
        Delete an object through a signed DELETE URL.

        Raises:
            TransferError: On failure
        """
        self._make_request('DELETE', url)

    def close(self) -> None:
        """Close HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @staticmethod
    def _request_headers(params: SignParams) -> Dict[str, str]:
        headers = {name.strip(): value.strip() for name, value in params.headers.items()}
        if params.content_type:
            headers['Content-Type'] = params.content_type
        if params.content_hash:
            headers['Content-MD5'] = params.content_hash
        return headers
