"""
requests integration for OCI request signing

``OciSigningAuth`` plugs into ``requests`` as an auth handler so every
prepared request is signed right before it is sent.
"""

import logging
from typing import Optional

from requests.auth import AuthBase
from requests.models import PreparedRequest
from requests.structures import CaseInsensitiveDict

from ..auth.config import OciConfig
from ..exceptions import AuthError
from .types import SignableRequest, HttpMethod, SigningErrorCodes
from .signer import OciRequestSigner

logger = logging.getLogger(__name__)


def to_signable_request(prepared_request: PreparedRequest) -> SignableRequest:
    """
    Convert a prepared request into a SignableRequest.

    Args:
        prepared_request: Prepared request from requests

    Returns:
        SignableRequest: Request view used for signing

    Raises:
        AuthError: If the method or body cannot be signed
    """
    try:
        method = HttpMethod(prepared_request.method.upper())
    except (ValueError, AttributeError) as e:
        raise AuthError(
            f"Unsupported HTTP method for signing: {prepared_request.method}",
            SigningErrorCodes.INVALID_METHOD,
            {"method": prepared_request.method}
        ) from e

    body = prepared_request.body
    if body is not None and not isinstance(body, (str, bytes)):
        # Streams and generators cannot be hashed without consuming them
        raise AuthError(
            f"Cannot sign streaming request body of type {type(body).__name__}",
            SigningErrorCodes.INVALID_BODY,
            {"body_type": type(body).__name__}
        )

    return SignableRequest(
        method=method,
        url=prepared_request.url,
        headers=dict(prepared_request.headers or {}),
        body=body
    )


def sign_prepared_request(prepared_request: PreparedRequest, config: OciConfig,
                          date: Optional[str] = None) -> PreparedRequest:
    """
    Sign a prepared request.

    Args:
        prepared_request: Prepared request to sign
        config: Resolved OCI credential
        date: HTTP date to sign (generated now if None)

    Returns:
        PreparedRequest: Request with signature headers added

    Raises:
        AuthError: If signing fails
    """
    signable_request = to_signable_request(prepared_request)
    result = OciRequestSigner(config).sign_request(signable_request, date)

    if prepared_request.headers is None:
        prepared_request.headers = CaseInsensitiveDict()

    prepared_request.headers.update(result.headers)
    return prepared_request


class OciSigningAuth(AuthBase):
    """
    requests auth handler that signs requests with an OCI credential

    Example:
        session.auth = OciSigningAuth(OciConfig.from_env())
    """

    def __init__(self, config: OciConfig):
        """
        Initialize the auth handler.

        Args:
            config: Resolved OCI credential
        """
        self.config = config
        self.signer = OciRequestSigner(config)
        logger.info(f"Configured request signing for key ID: {config.key_id}")

    def __call__(self, prepared_request: PreparedRequest) -> PreparedRequest:
        signable_request = to_signable_request(prepared_request)
        result = self.signer.sign_request(signable_request)
        prepared_request.headers.update(result.headers)
        return prepared_request
