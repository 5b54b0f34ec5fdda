"""
Key material and service account credential loading

This module turns PEM/DER private keys and Google service account JSON
documents into the RSA private key and client email a URLSigner needs. It
uses the cryptography package and never stores or rotates keys.
"""

import json
import base64
import binascii
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..exceptions import CredentialsError

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_TYPE = "service_account"
DEFAULT_RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


@dataclass(frozen=True)
class ServiceAccountCredentials:
    """
    Signing material extracted from a service account key file.

    Attributes:
        client_email: Service account email, used as GoogleAccessId
        private_key: RSA private key
        private_key_id: Identifier of the key inside the service account
        project_id: Project owning the service account
    """
    client_email: str
    private_key: rsa.RSAPrivateKey
    private_key_id: Optional[str] = None
    project_id: Optional[str] = None


def _ensure_bytes(data: Union[str, bytes]) -> bytes:
    if isinstance(data, str):
        return data.encode('utf-8')
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    raise CredentialsError(
        f"Key data must be str or bytes, got {type(data).__name__}",
        "INVALID_KEY_DATA_TYPE"
    )


def _require_rsa(key: Any) -> rsa.RSAPrivateKey:
    if not isinstance(key, rsa.RSAPrivateKey):
        raise CredentialsError(
            f"Expected an RSA private key, got {type(key).__name__}",
            "UNSUPPORTED_KEY_TYPE"
        )
    return key


def load_private_key_pem(data: Union[str, bytes], password: Optional[bytes] = None) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key from PEM data (PKCS#1 or PKCS#8).

    Args:
        data: PEM encoded key
        password: Optional password for encrypted keys

    Returns:
        RSAPrivateKey: Loaded key

    Raises:
        CredentialsError: If the data cannot be parsed or is not an RSA key
    """
    try:
        key = serialization.load_pem_private_key(_ensure_bytes(data), password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise CredentialsError(
            f"Failed to parse PEM private key: {e}",
            "INVALID_PEM",
            {"original_error": str(e)}
        ) from e

    return _require_rsa(key)


def load_private_key_der(data: bytes, password: Optional[bytes] = None) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key from DER data.

    Raises:
        CredentialsError: If the data cannot be parsed or is not an RSA key
    """
    try:
        key = serialization.load_der_private_key(_ensure_bytes(data), password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise CredentialsError(
            f"Failed to parse DER private key: {e}",
            "INVALID_DER",
            {"original_error": str(e)}
        ) from e

    return _require_rsa(key)


def load_private_key_file(file_path: Union[str, Path], password: Optional[bytes] = None) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key from a PEM or DER file.

    Raises:
        CredentialsError: If the file cannot be read or parsed
    """
    try:
        data = Path(file_path).read_bytes()
    except OSError as e:
        raise CredentialsError(
            f"Failed to read private key file: {e}",
            "FILE_ERROR",
            {"path": str(file_path)}
        ) from e

    if b"-----BEGIN" in data:
        return load_private_key_pem(data, password)
    return load_private_key_der(data, password)


def load_service_account_info(info: Dict[str, Any]) -> ServiceAccountCredentials:
    """
    Build credentials from a parsed service account key document.

    Args:
        info: Parsed JSON key file contents

    Returns:
        ServiceAccountCredentials: Client email and private key

    Raises:
        CredentialsError: If required fields are missing or invalid
    """
    if not isinstance(info, dict):
        raise CredentialsError("Service account info must be a JSON object", "INVALID_FORMAT")

    account_type = info.get('type')
    if account_type is not None and account_type != SERVICE_ACCOUNT_TYPE:
        raise CredentialsError(
            f"Unsupported credentials type: {account_type}",
            "INVALID_CREDENTIALS_TYPE",
            {"type": account_type}
        )

    missing = [name for name in ('client_email', 'private_key') if not info.get(name)]
    if missing:
        raise CredentialsError(
            f"Service account info missing fields: {', '.join(missing)}",
            "MISSING_FIELDS",
            {"missing_fields": missing}
        )

    credentials = ServiceAccountCredentials(
        client_email=info['client_email'],
        private_key=load_private_key_pem(info['private_key']),
        private_key_id=info.get('private_key_id'),
        project_id=info.get('project_id'),
    )
    logger.debug(f"Loaded service account credentials for {credentials.client_email}")
    return credentials


def load_service_account_json(json_data: Union[str, bytes]) -> ServiceAccountCredentials:
    """
    Build credentials from a service account key JSON document.

    Raises:
        CredentialsError: If the JSON is malformed or incomplete
    """
    try:
        info = json.loads(json_data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CredentialsError(
            f"Failed to parse service account JSON: {e}",
            "PARSE_ERROR"
        ) from e

    return load_service_account_info(info)


def load_service_account_file(file_path: Union[str, Path]) -> ServiceAccountCredentials:
    """
    Build credentials from a service account key file on disk.

    Raises:
        CredentialsError: If the file cannot be read, parsed or is incomplete
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            json_data = f.read()
    except OSError as e:
        raise CredentialsError(
            f"Failed to read service account file: {e}",
            "FILE_ERROR",
            {"path": str(file_path)}
        ) from e

    return load_service_account_json(json_data)


def generate_rsa_private_key(key_size: int = DEFAULT_RSA_KEY_SIZE) -> rsa.RSAPrivateKey:
    """
    Generate a fresh RSA private key, for tests and local experiments.

    Args:
        key_size: Modulus size in bits

    Returns:
        RSAPrivateKey: New key
    """
    return rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=key_size)


def private_key_pem(private_key: rsa.RSAPrivateKey) -> str:
    """Serialize a private key as unencrypted PKCS#8 PEM."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode('ascii')


def public_key_pem(private_key: rsa.RSAPrivateKey) -> str:
    """Serialize the public half of a private key as PEM."""
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode('ascii')


def verify_signature(public_key: rsa.RSAPublicKey, message: Union[str, bytes], signature: str) -> bool:
    """
    Check a base64 SHA-256/PKCS#1 v1.5 signature against a public key.

    Used to self-check locally generated signatures; it is not a verifier for
    incoming signed URLs.

    Args:
        public_key: RSA public key
        message: Canonical string that was signed
        signature: Base64 encoded signature

    Returns:
        bool: True if the signature is valid
    """
    try:
        raw = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError):
        return False

    try:
        public_key.verify(raw, _ensure_bytes(message), padding.PKCS1v15(), hashes.SHA256())
    except InvalidSignature:
        return False
    return True
