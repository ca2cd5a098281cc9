"""
Private key loading for OCI request signing

This module turns a key reference (a filesystem path or inline PEM text) into
an RSA private key object usable for RSA-SHA256 signing.
"""

import os
import logging
from pathlib import Path
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..exceptions import PrivateKeyError

logger = logging.getLogger(__name__)

PEM_BEGIN_MARKER = "-----BEGIN"
PEM_END_MARKER = "-----END"

# OCI API signing keys must be RSA with at least a 2048-bit modulus
MIN_RSA_KEY_SIZE = 2048


def is_pem_content(reference: str) -> bool:
    """
    Check whether a key reference is inline PEM text rather than a path.

    Args:
        reference: File path or PEM content

    Returns:
        bool: True if the reference contains a PEM boundary marker
    """
    return PEM_BEGIN_MARKER in reference


def validate_pem(content: str) -> None:
    """
    Check that text carries both PEM boundary markers.

    Raises:
        PrivateKeyError: If either marker is missing
    """
    if PEM_BEGIN_MARKER not in content or PEM_END_MARKER not in content:
        raise PrivateKeyError("Not a valid PEM format", "INVALID_PEM")


def expand_path(path: str) -> Path:
    """Expand ``~`` and environment variables in a configured path."""
    return Path(os.path.expandvars(os.path.expanduser(path.strip())))


def read_key_file(path: Union[str, Path]) -> str:
    """
    Read PEM text from a private key file.

    Args:
        path: Private key file path

    Returns:
        str: File content

    Raises:
        PrivateKeyError: If the file does not exist or cannot be read
    """
    key_path = expand_path(str(path))

    if not key_path.is_file():
        raise PrivateKeyError(
            f"Private key file not found: {path}",
            "KEY_FILE_NOT_FOUND",
            {"path": str(path)}
        )

    try:
        with open(key_path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise PrivateKeyError(
            f"Failed to read private key file: {e}",
            "KEY_FILE_UNREADABLE",
            {"path": str(path)}
        ) from e


def parse_private_key(pem_content: str, passphrase: Optional[str] = None) -> RSAPrivateKey:
    """
    Parse PEM text into an RSA private key.

    Both PKCS#1 (``BEGIN RSA PRIVATE KEY``) and PKCS#8 (``BEGIN PRIVATE KEY``,
    ``BEGIN ENCRYPTED PRIVATE KEY``) encodings are accepted.

    Args:
        pem_content: PEM encoded private key
        passphrase: Passphrase for encrypted keys

    Returns:
        RSAPrivateKey: Loaded key

    Raises:
        PrivateKeyError: If the content is not a usable RSA signing key
    """
    validate_pem(pem_content)

    password = passphrase.encode('utf-8') if passphrase else None

    try:
        key = serialization.load_pem_private_key(
            pem_content.strip().encode('utf-8'),
            password=password
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise PrivateKeyError(
            f"Failed to parse private key: {e}",
            "INVALID_KEY_DATA"
        ) from e

    if not isinstance(key, RSAPrivateKey):
        raise PrivateKeyError(
            f"Unsupported key type {type(key).__name__}: OCI request signing requires an RSA key",
            "UNSUPPORTED_KEY_TYPE",
            {"key_type": type(key).__name__}
        )

    if key.key_size < MIN_RSA_KEY_SIZE:
        raise PrivateKeyError(
            f"RSA key is {key.key_size} bits, at least {MIN_RSA_KEY_SIZE} bits are required",
            "KEY_TOO_SMALL",
            {"key_size": key.key_size}
        )

    return key


def load_private_key(reference: str, passphrase: Optional[str] = None) -> RSAPrivateKey:
    """
    Load a private key from a file path or inline PEM content.

    A reference containing a PEM ``-----BEGIN`` marker is parsed as inline
    content; anything else is treated as a path.

    Args:
        reference: File path or PEM content
        passphrase: Passphrase for encrypted keys

    Returns:
        RSAPrivateKey: Loaded key

    Raises:
        PrivateKeyError: If the key cannot be found, parsed or used
    """
    if not isinstance(reference, str) or not reference.strip():
        raise PrivateKeyError("Private key reference cannot be empty", "EMPTY_KEY_REFERENCE")

    if is_pem_content(reference):
        logger.debug("Loading private key from inline PEM content")
        return parse_private_key(reference, passphrase)

    logger.debug(f"Loading private key from file: {reference}")
    return parse_private_key(read_key_file(reference), passphrase)
