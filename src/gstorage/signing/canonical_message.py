"""
Canonical string construction for signed URLs

This module renders a SignParams into the exact string that the storage
service reconstructs when checking a signature. Field order, separators and
header normalization must match the service byte for byte; any deviation
produces a signature that is rejected without a local error.
"""

from typing import Dict, List, Optional, Tuple

from .types import SignParams
from .utils import normalize_header_name, format_unix_timestamp

# Headers the service strips before checking the signature.
EXCLUDED_HEADERS = frozenset({
    'x-goog-encryption-key',
    'x-goog-encryption-key-sha256',
})


def normalize_headers(headers: Optional[Dict[str, str]]) -> List[Tuple[str, str]]:
    """
    Normalize, filter and sort extra headers.

    Names are trimmed and lower-cased, excluded headers are dropped and the
    remaining pairs are sorted by name. When several names normalize to the
    same value, the one inserted last in the mapping wins.

    Args:
        headers: Extra headers as supplied by the caller

    Returns:
        list: Sorted (name, trimmed value) pairs
    """
    normalized: Dict[str, str] = {}
    for name, value in (headers or {}).items():
        key = normalize_header_name(name)
        if key in EXCLUDED_HEADERS:
            continue
        normalized[key] = value.strip()

    return sorted(normalized.items(), key=lambda pair: pair[0].encode('utf-8'))


def canonical_headers(headers: Optional[Dict[str, str]]) -> str:
    """
    Render the canonical header block.

    Returns:
        str: ``name:value`` lines joined by newlines with one trailing
        newline, or the empty string when no headers remain
    """
    pairs = normalize_headers(headers)
    if not pairs:
        return ""
    return "\n".join(f"{name}:{value}" for name, value in pairs) + "\n"


def object_path(bucket: str, object_name: str) -> str:
    """
    Build the canonical resource path.

    All slashes are trimmed from both ends of the bucket and a single leading
    slash is removed from the object. Nothing is escaped.

    Args:
        bucket: Storage bucket
        object_name: Object path

    Returns:
        str: ``/bucket/object``
    """
    if object_name.startswith("/"):
        object_name = object_name[1:]
    return "/" + bucket.strip("/") + "/" + object_name


class CanonicalRequestBuilder:
    """
    Canonical string builder for signed URLs
    """

    def __init__(self, params: SignParams):
        """
        Initialize canonical request builder.

        Args:
            params: Request description to render
        """
        self.params = params

    def build(self) -> str:
        """
        Build the canonical string for signing.

        The layout is::

            METHOD
            CONTENT-HASH
            CONTENT-TYPE
            EXPIRATION
            [header block]RESOURCE-PATH

        Empty fields keep their line and the resource path carries no
        trailing newline.

        Returns:
            str: Canonical string
        """
        return (
            self.params.method + "\n" +
            self.params.content_hash + "\n" +
            self.params.content_type + "\n" +
            format_unix_timestamp(self.params.expiration) + "\n" +
            self.header_string() +
            self.object_path()
        )

    def header_string(self) -> str:
        return canonical_headers(self.params.headers)

    def object_path(self) -> str:
        return object_path(self.params.bucket, self.params.object_name)


def build_canonical_string(params: SignParams) -> str:
    """
    Build canonical string for signing.

    Args:
        params: Request description

    Returns:
        str: Canonical string
    """
    return CanonicalRequestBuilder(params).build()
