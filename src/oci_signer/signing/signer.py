"""
OCI HTTP request signer

This module signs the canonical signing string with RSA-SHA256 (PKCS#1 v1.5)
and assembles the ``Authorization`` header expected by OCI:

    Signature version="1",keyId="<tenancy>/<user>/<fingerprint>",
    algorithm="rsa-sha256",headers="<names>",signature="<base64>"
"""

import base64
import logging
from typing import List, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from ..auth.config import OciConfig
from ..exceptions import AuthError
from .types import (
    SignableRequest,
    SigningResult,
    SigningErrorCodes,
    SIGNATURE_VERSION,
    SIGNATURE_ALGORITHM,
)
from .canonical_message import build_signing_string
from .utils import PerformanceTimer

logger = logging.getLogger(__name__)

SLOW_SIGNING_THRESHOLD_MS = 10


def sign_string(private_key: RSAPrivateKey, signing_string: str) -> str:
    """
    Sign a string with RSA-SHA256 and PKCS#1 v1.5 padding.

    Args:
        private_key: RSA private key
        signing_string: Text to sign (UTF-8 encoded before signing)

    Returns:
        str: Base64 encoded signature

    Raises:
        AuthError: If the crypto backend rejects the key or fails to sign
    """
    try:
        signature = private_key.sign(
            signing_string.encode('utf-8'),
            padding.PKCS1v15(),
            hashes.SHA256()
        )
    except Exception as e:
        raise AuthError(
            f"Failed to sign request: {e}",
            SigningErrorCodes.SIGNING_FAILED,
            {"original_error": str(e)}
        ) from e

    return base64.b64encode(signature).decode('ascii')


def build_authorization_header(key_id: str, signed_headers: List[str], signature: str) -> str:
    """
    Build the Authorization header value.

    Args:
        key_id: ``<tenancy>/<user>/<fingerprint>``
        signed_headers: Signed header names in signing order
        signature: Base64 encoded signature

    Returns:
        str: Authorization header value
    """
    return (
        f'Signature version="{SIGNATURE_VERSION}",'
        f'keyId="{key_id}",'
        f'algorithm="{SIGNATURE_ALGORITHM}",'
        f'headers="{" ".join(signed_headers)}",'
        f'signature="{signature}"'
    )


class OciRequestSigner:
    """
    Signs outgoing requests with a resolved OCI credential

    The credential is only read, so one signer can be used from any number of
    threads. Every call derives its own date and signing string.
    """

    def __init__(self, config: OciConfig):
        """
        Initialize the signer with a credential.

        Args:
            config: Resolved OCI credential
        """
        if not isinstance(config, OciConfig):
            raise AuthError(
                "Signer requires a resolved OciConfig",
                SigningErrorCodes.INVALID_REQUEST
            )
        self.config = config

    def sign_request(self, request: SignableRequest, date: Optional[str] = None) -> SigningResult:
        """
        Sign an HTTP request.

        Args:
            request: Request to sign
            date: HTTP date to sign (generated now if None)

        Returns:
            SigningResult: Authorization header and derived headers

        Raises:
            AuthError: If signing fails
        """
        timer = PerformanceTimer()

        canonical = build_signing_string(request, date)
        signature = sign_string(self.config.private_key, canonical.signing_string)
        authorization = build_authorization_header(
            self.config.key_id,
            canonical.signed_headers,
            signature
        )

        headers = dict(canonical.headers)
        headers['authorization'] = authorization

        elapsed_ms = timer.elapsed_ms()
        if elapsed_ms > SLOW_SIGNING_THRESHOLD_MS:
            logger.warning(f"Signing operation took {elapsed_ms:.2f}ms (target: <{SLOW_SIGNING_THRESHOLD_MS}ms)")
        logger.debug(f"Signed {request.method.value} request to {request.url}")

        return SigningResult(
            authorization=authorization,
            headers=headers,
            signed_headers=canonical.signed_headers,
            signing_string=canonical.signing_string
        )

    def attach_auth(self, request: SignableRequest, date: Optional[str] = None) -> SignableRequest:
        """
        Add the derived and authorization headers to a request.

        Args:
            request: Request to sign; its headers are updated in place
            date: HTTP date to sign (generated now if None)

        Returns:
            SignableRequest: The same request, ready to send
        """
        result = self.sign_request(request, date)
        request.headers.update(result.headers)
        return request


def create_signer(config: OciConfig) -> OciRequestSigner:
    """
    Create a new request signer.

    Args:
        config: Resolved OCI credential

    Returns:
        OciRequestSigner: Configured signer instance
    """
    return OciRequestSigner(config)


def sign_request(request: SignableRequest, config: OciConfig,
                 date: Optional[str] = None) -> SigningResult:
    """
    Sign a request with the given credential.

    Args:
        request: Request to sign
        config: Resolved OCI credential
        date: HTTP date to sign (generated now if None)

    Returns:
        SigningResult: Signing result
    """
    return create_signer(config).sign_request(request, date)


def attach_auth(config: OciConfig, request: SignableRequest,
                date: Optional[str] = None) -> SignableRequest:
    """
    Sign a request and inject the resulting headers.

    Args:
        config: Resolved OCI credential
        request: Request to sign; its headers are updated in place
        date: HTTP date to sign (generated now if None)

    Returns:
        SignableRequest: The same request, ready to send
    """
    return create_signer(config).attach_auth(request, date)
