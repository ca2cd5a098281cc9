"""
Command-line interface for the OCI Signer Python SDK
Checks credential configuration and prints signed headers for debugging
"""

import argparse
import sys
from typing import Optional

from .version import __version__
from .auth.config import OciConfig, OciConfigBuilder
from .auth.config_loader import DEFAULT_PROFILE
from .exceptions import OciSDKError, CredentialError, AuthError
from .signing.signer import OciRequestSigner
from .signing.types import SignableRequest, HttpMethod


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='oci-signer',
        description='Resolve OCI credentials and sign OCI REST API requests'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'OCI Signer Python SDK {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_check_config_parser(subparsers)
    setup_sign_parser(subparsers)

    return parser


def add_credential_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the credential source options shared by all commands."""
    parser.add_argument(
        '--config',
        help='OCI config file path or INI content (default: OCI_CONFIG)'
    )
    parser.add_argument(
        '--profile',
        default=DEFAULT_PROFILE,
        help=f'Profile in the OCI config (default: {DEFAULT_PROFILE})'
    )
    parser.add_argument(
        '--no-env',
        action='store_true',
        help='Ignore OCI_* environment variable overrides'
    )


def setup_check_config_parser(subparsers):
    """Setup credential check subcommand."""
    check_parser = subparsers.add_parser('check-config', help='Resolve and display credentials')
    add_credential_arguments(check_parser)


def setup_sign_parser(subparsers):
    """Setup request signing subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Print signed headers for a request')
    sign_parser.add_argument(
        'method',
        type=str.upper,
        choices=[m.value for m in HttpMethod],
        help='HTTP method'
    )
    sign_parser.add_argument('url', help='Full request URL')
    sign_parser.add_argument('--body', help='Request body text')
    sign_parser.add_argument(
        '--content-type',
        default='application/json',
        help='Content type for body methods (default: application/json)'
    )
    sign_parser.add_argument('--date', help='Fixed HTTP date to sign (default: now)')
    add_credential_arguments(sign_parser)


def load_config(args) -> OciConfig:
    """Resolve a credential from command line options."""
    builder = OciConfigBuilder().profile(args.profile)
    if args.config:
        builder.config(args.config, args.profile)
    if not args.no_env:
        builder.with_env()
    return builder.build()


def handle_check_config_command(args) -> int:
    """Handle credential resolution check."""
    config = load_config(args)

    print("✓ OCI credentials resolved")
    print(f"  User: {config.user_id}")
    print(f"  Tenancy: {config.tenancy_id}")
    print(f"  Region: {config.region}")
    print(f"  Fingerprint: {config.fingerprint}")
    print(f"  Compartment: {config.compartment_id}")
    print(f"  Key Size: {config.private_key.key_size} bits")
    return 0


def handle_sign_command(args) -> int:
    """Handle request signing."""
    config = load_config(args)

    method = HttpMethod(args.method)
    headers = {}
    if method.has_body:
        headers['content-type'] = args.content_type

    request = SignableRequest(
        method=method,
        url=args.url,
        headers=headers,
        body=args.body
    )

    result = OciRequestSigner(config).sign_request(request, args.date)

    for name, value in sorted(result.headers.items()):
        print(f"{name}: {value}")
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

    try:
        if args.command == 'check-config':
            return handle_check_config_command(args)
        elif args.command == 'sign':
            return handle_sign_command(args)
        else:
            parser.print_help()
            return 1

    except CredentialError as e:
        print(f"Credential error: {e}", file=sys.stderr)
        return 1
    except AuthError as e:
        print(f"Signing error: {e}", file=sys.stderr)
        return 1
    except OciSDKError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
