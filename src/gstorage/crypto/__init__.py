"""
Key material loading for the gstorage Python SDK
"""

from .credentials import (
    ServiceAccountCredentials,
    load_private_key_pem,
    load_private_key_der,
    load_private_key_file,
    load_service_account_info,
    load_service_account_json,
    load_service_account_file,
    generate_rsa_private_key,
    private_key_pem,
    public_key_pem,
    verify_signature,
)

__all__ = [
    'ServiceAccountCredentials',
    'load_private_key_pem',
    'load_private_key_der',
    'load_private_key_file',
    'load_service_account_info',
    'load_service_account_json',
    'load_service_account_file',
    'generate_rsa_private_key',
    'private_key_pem',
    'public_key_pem',
    'verify_signature',
]
