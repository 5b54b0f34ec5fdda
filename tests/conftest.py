"""
Shared fixtures for the gstorage test suite
"""

import pytest

from gstorage.crypto.credentials import generate_rsa_private_key, private_key_pem
from gstorage.signing import URLSigner, URLSignerConfig

FIXED_NOW = 1700000000.0
TEST_CLIENT_EMAIL = "svc@example.com"


@pytest.fixture(scope="session")
def rsa_private_key():
    """One RSA key for the whole run; generation is slow."""
    return generate_rsa_private_key(2048)


@pytest.fixture(scope="session")
def rsa_private_key_pem(rsa_private_key):
    return private_key_pem(rsa_private_key)


@pytest.fixture
def signer(rsa_private_key):
    """Signer with a frozen clock"""
    return URLSigner(URLSignerConfig(
        private_key=rsa_private_key,
        client_email=TEST_CLIENT_EMAIL,
        clock=lambda: FIXED_NOW,
    ))
