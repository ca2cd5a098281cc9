"""
OCI Signer Python SDK - Request Signing Module

OCI HTTP request signatures (draft-cavage HTTP signatures with RSA-SHA256).
This module builds the signing string, signs it and produces the
Authorization header for OCI REST API calls.
"""

from .types import (
    SignableRequest,
    CanonicalMessage,
    SigningResult,
    SigningErrorCodes,
    HttpMethod,
    SIGNATURE_ALGORITHM,
    GENERIC_SIGNED_HEADERS,
    BODY_SIGNED_HEADERS,
)

from .canonical_message import (
    CanonicalMessageBuilder,
    build_signing_string,
)

from .signer import (
    OciRequestSigner,
    create_signer,
    sign_request,
    sign_string,
    attach_auth,
    build_authorization_header,
)

from .utils import (
    format_http_date,
    calculate_content_sha256,
    parse_url,
)

from .integration import (
    OciSigningAuth,
    sign_prepared_request,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'OciRequestSigner',
    'create_signer',
    'sign_request',
    'sign_string',
    'attach_auth',
    'build_authorization_header',
    'CanonicalMessageBuilder',
    'build_signing_string',
    # Types
    'SignableRequest',
    'CanonicalMessage',
    'SigningResult',
    'SigningErrorCodes',
    'HttpMethod',
    'SIGNATURE_ALGORITHM',
    'GENERIC_SIGNED_HEADERS',
    'BODY_SIGNED_HEADERS',
    # Utilities
    'format_http_date',
    'calculate_content_sha256',
    'parse_url',
    # HTTP Integration
    'OciSigningAuth',
    'sign_prepared_request',
]
