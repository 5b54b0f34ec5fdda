"""
Command-line interface for the gstorage Python SDK
Generates signed Google Cloud Storage URLs from service account credentials
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

from .version import __version__
from .config import ConfigError, SignedUrlConfigManager
from .crypto.credentials import (
    generate_rsa_private_key,
    load_private_key_file,
    load_service_account_file,
    private_key_pem,
    public_key_pem,
    verify_signature,
)
from .exceptions import GStorageError
from .signing import (
    SignParams,
    SigningError,
    URLSigner,
    build_canonical_string,
    calculate_content_md5,
)

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='gstorage-sign',
        description='Generate signed Google Cloud Storage URLs'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'gstorage Python SDK {__version__}'
    )
    parser.add_argument('--config', help='Path to a gstorage JSON configuration file')
    parser.add_argument('--environment', help='Configuration environment to use')
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: from configuration)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_url_parser(subparsers)
    setup_canonical_parser(subparsers)
    setup_shorthand_parsers(subparsers)
    setup_keygen_parser(subparsers)

    return parser


def positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of seconds, got {number}")
    return number


def _add_credentials_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--credentials', help='Service account JSON key file')
    parser.add_argument('--pem', help='RSA private key file (PEM or DER)')
    parser.add_argument('--client-email', help='Identity to embed as GoogleAccessId (with --pem)')


def _add_request_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--method', default='GET', help='HTTP method (default: GET)')
    parser.add_argument('--bucket', required=True, help='Storage bucket')
    parser.add_argument('--object', required=True, dest='object_name', help='Object path')
    parser.add_argument('--content-type', default='', help='Content type the request will send')
    md5_group = parser.add_mutually_exclusive_group()
    md5_group.add_argument('--md5', default='', help='Base64 Content-MD5 the request will send')
    md5_group.add_argument('--md5-of', help='Compute Content-MD5 from this file')
    parser.add_argument(
        '--header',
        action='append',
        default=[],
        metavar='NAME:VALUE',
        help='Extra header to sign (repeatable)'
    )
    expiry_group = parser.add_mutually_exclusive_group()
    expiry_group.add_argument('--expires-in', type=positive_int, help='Validity window in seconds')
    expiry_group.add_argument('--expires-at', type=int, help='Absolute expiration as Unix seconds')
    parser.add_argument('--base-url', help='Override the storage base URL')


def setup_url_parser(subparsers):
    """Setup signed URL subcommand."""
    url_parser = subparsers.add_parser('url', help='Generate a signed URL')
    _add_request_arguments(url_parser)
    _add_credentials_arguments(url_parser)
    url_parser.add_argument(
        '--self-check',
        action='store_true',
        help='Verify the signature against the public key before printing'
    )
    url_parser.add_argument(
        '--show-canonical',
        action='store_true',
        help='Print the canonical string to stderr'
    )


def setup_canonical_parser(subparsers):
    """Setup canonical string subcommand."""
    canonical_parser = subparsers.add_parser('canonical', help='Print the canonical string without signing')
    _add_request_arguments(canonical_parser)


def setup_shorthand_parsers(subparsers):
    """Setup download/upload/delete shorthand subcommands."""
    for command, method in (('download', 'GET'), ('upload', 'PUT'), ('delete', 'DELETE')):
        shorthand_parser = subparsers.add_parser(
            command,
            help=f'Generate a signed {method} URL with the default expiration'
        )
        shorthand_parser.add_argument('bucket', help='Storage bucket')
        shorthand_parser.add_argument('object_name', metavar='object', help='Object path')
        _add_credentials_arguments(shorthand_parser)


def setup_keygen_parser(subparsers):
    """Setup key generation subcommand."""
    keygen_parser = subparsers.add_parser('keygen', help='Generate an RSA private key for local testing')
    keygen_parser.add_argument('--key-size', type=int, default=2048, help='Key size in bits (default: 2048)')
    keygen_parser.add_argument('--public', action='store_true', help='Also print the public key')


def parse_headers(values: List[str]) -> Dict[str, str]:
    """
    Parse NAME:VALUE header arguments.

    Raises:
        ValueError: If an argument has no colon
    """
    headers = {}
    for value in values:
        name, sep, header_value = value.partition(':')
        if not sep or not name.strip():
            raise ValueError(f"Invalid header '{value}', expected NAME:VALUE")
        headers[name] = header_value
    return headers


def load_config_manager(args) -> SignedUrlConfigManager:
    """Load configuration from --config or the default locations."""
    if args.config:
        manager = SignedUrlConfigManager.from_file(args.config, args.environment)
    else:
        manager = SignedUrlConfigManager.load_default(args.environment)
    manager.apply_env_overrides()
    return manager


def build_signer(args, manager: SignedUrlConfigManager) -> URLSigner:
    """Create a URLSigner from the credential arguments or configuration."""
    credentials_file = args.credentials or manager.get_signing_settings().credentials_file

    if credentials_file:
        credentials = load_service_account_file(credentials_file)
        private_key = credentials.private_key
        client_email = args.client_email or credentials.client_email
    elif args.pem:
        if not args.client_email:
            raise ValueError("--client-email is required with --pem")
        private_key = load_private_key_file(args.pem)
        client_email = args.client_email
    else:
        raise ValueError("Credentials required: use --credentials or --pem with --client-email")

    return URLSigner(manager.to_signer_config(private_key, client_email))


def build_sign_params(args) -> SignParams:
    """Create SignParams from the request arguments."""
    content_hash = args.md5
    if args.md5_of:
        content_hash = calculate_content_md5(Path(args.md5_of).read_bytes())

    return SignParams(
        method=args.method.upper(),
        content_hash=content_hash,
        content_type=args.content_type,
        expiration=args.expires_at or 0,
        headers=parse_headers(args.header),
        bucket=args.bucket,
        object_name=args.object_name,
        base_url=args.base_url,
    )


def handle_url_command(args, manager: SignedUrlConfigManager) -> int:
    """Handle signed URL command."""
    signer = build_signer(args, manager)
    params = build_sign_params(args)

    duration = None
    if args.expires_at is None:
        duration = args.expires_in
        if duration is None:
            duration = manager.get_signing_settings().default_expiration

    result = signer.sign_url(params, duration)

    if args.show_canonical:
        print(result.canonical_string, file=sys.stderr)

    if args.self_check:
        public_key = signer.config.private_key.public_key()
        if not verify_signature(public_key, result.canonical_string, result.signature):
            print("Error: signature self-check failed", file=sys.stderr)
            return 1
        logger.info("Signature self-check passed")

    print(result.url)
    return 0


def handle_canonical_command(args, manager: SignedUrlConfigManager) -> int:
    """Handle canonical string command."""
    params = build_sign_params(args)
    if args.expires_at is None:
        expires_in = args.expires_in
        if expires_in is None:
            expires_in = manager.get_signing_settings().default_expiration_seconds
        params.expiration = int(time.time() + expires_in)

    print(build_canonical_string(params))
    return 0


def handle_shorthand_command(args, manager: SignedUrlConfigManager) -> int:
    """Handle download/upload/delete commands."""
    signer = build_signer(args, manager)
    make_path = {
        'download': signer.download_path,
        'upload': signer.upload_path,
        'delete': signer.delete_path,
    }[args.command]

    print(make_path(args.bucket, args.object_name))
    return 0


def handle_keygen_command(args) -> int:
    """Handle key generation command."""
    if args.key_size < 1024:
        print("Error: Key size must be at least 1024 bits", file=sys.stderr)
        return 1

    private_key = generate_rsa_private_key(args.key_size)
    print(private_key_pem(private_key), end='')
    if args.public:
        print(public_key_pem(private_key), end='')
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == 'keygen':
            return handle_keygen_command(args)

        manager = load_config_manager(args)
        logging_config = manager.get_logging_config()
        if args.log_level:
            logging_config.level = args.log_level
        logging_config.apply()

        if args.command == 'url':
            return handle_url_command(args, manager)
        elif args.command == 'canonical':
            return handle_canonical_command(args, manager)
        else:
            return handle_shorthand_command(args, manager)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except (GStorageError, SigningError, ConfigError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
