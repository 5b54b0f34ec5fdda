#!/usr/bin/env python3
"""
gstorage Python SDK - Signed URL Example

This example demonstrates how to generate signed Google Cloud Storage URLs
with an RSA service account key, inspect the canonical string that gets
signed, and handle the errors the SDK raises.
"""

import sys
import os
import time
from datetime import timedelta

# Add src to path for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from gstorage import (
    # Keys
    generate_rsa_private_key,
    verify_signature,
    # Signing
    create_signer_config,
    URLSigner,
    SignParams,
    HttpMethod,
    build_canonical_string,
    calculate_content_md5,
    SigningError,
)


def basic_signing_example():
    """Demonstrate basic signed URL workflow"""
    print("=== Basic Signed URL Example ===")

    # A local key stands in for a service account key file
    print("1. Generating RSA key...")
    private_key = generate_rsa_private_key()
    print(f"   Key size: {private_key.key_size} bits")

    print("\n2. Creating signer configuration...")
    config = (create_signer_config()
              .private_key(private_key)
              .client_email("uploader@example-project.iam.gserviceaccount.com")
              .default_expiration(timedelta(minutes=15))
              .build())
    signer = URLSigner(config)
    print(f"   Client email: {config.client_email}")
    print(f"   Base URL: {config.base_url}")

    print("\n3. Signing a download URL...")
    print(f"   {signer.download_path('example-bucket', 'reports/2023/summary.pdf')}")

    print("\n4. Signing an upload with content headers...")
    body = b"hello, storage"
    params = SignParams(
        method=HttpMethod.PUT,
        content_hash=calculate_content_md5(body),
        content_type="text/plain",
        headers={"x-goog-meta-owner": "example"},
        bucket="example-bucket",
        object_name="uploads/hello.txt",
    )
    result = signer.sign_url(params, timedelta(minutes=5))
    print(f"   URL: {result.url}")
    print(f"   Expires: {result.expiration}")

    print("\n5. Verifying the signature...")
    valid = verify_signature(private_key.public_key(), result.canonical_string, result.signature)
    print(f"   Valid: {valid}")


def canonical_string_example():
    """Show the string that actually gets signed"""
    print("\n\n=== Canonical String Example ===")

    params = SignParams(
        method="GET",
        expiration=int(time.time()) + 3600,
        headers={"X-Goog-Meta-B": "2", "x-goog-meta-a": "1", "x-goog-encryption-key": "hidden"},
        bucket="/example-bucket/",
        object_name="/file.txt",
    )
    for line in build_canonical_string(params).split("\n"):
        print(f"   | {line}")


def error_handling_example():
    """Demonstrate error handling"""
    print("\n\n=== Error Handling Example ===")

    try:
        # Missing client email
        create_signer_config().private_key(generate_rsa_private_key()).build()
    except SigningError as e:
        print(f"   Missing client email: {e.code}: {e.message}")

    try:
        # Not a key at all
        create_signer_config().private_key(b"invalid").client_email("a@b").build()
    except SigningError as e:
        print(f"   Invalid private key: {e.code}: {e.message}")


def main():
    """Run all examples"""
    print("gstorage Python SDK - Signed URL Examples")
    print("=" * 50)

    basic_signing_example()
    canonical_string_example()
    error_handling_example()

    print("\n\n=== All Examples Completed Successfully! ===")


if __name__ == "__main__":
    main()
