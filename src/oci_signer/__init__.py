"""
OCI Signer Python SDK
Credential resolution and request signing for Oracle Cloud Infrastructure REST APIs
"""

from .version import __version__
from .exceptions import (
    OciSDKError,
    CredentialError,
    ConfigError,
    EnvError,
    IniError,
    PrivateKeyError,
    AuthError,
    TransportError,
    ApiError,
    NetworkError,
)
from .auth import (
    CredentialOverrides,
    OciConfig,
    OciConfigBuilder,
    resolve_credential,
    overrides_from_env,
    load_private_key,
    load_ini_source,
)
from .signing import (
    # Core signing functionality
    OciRequestSigner,
    create_signer,
    sign_request,
    sign_string,
    attach_auth,
    build_signing_string,
    build_authorization_header,
    # Types
    SignableRequest,
    SigningResult,
    HttpMethod,
    # Utilities
    format_http_date,
    calculate_content_sha256,
    # HTTP Integration
    OciSigningAuth,
    sign_prepared_request,
)
from .http_client import (
    OciHttpClient,
    ClientConfig,
    create_client,
)

# Public API exports
__all__ = [
    '__version__',
    # Exceptions
    'OciSDKError',
    'CredentialError',
    'ConfigError',
    'EnvError',
    'IniError',
    'PrivateKeyError',
    'AuthError',
    'TransportError',
    'ApiError',
    'NetworkError',
    # Credentials
    'CredentialOverrides',
    'OciConfig',
    'OciConfigBuilder',
    'resolve_credential',
    'overrides_from_env',
    'load_private_key',
    'load_ini_source',
    # Request Signing
    'OciRequestSigner',
    'create_signer',
    'sign_request',
    'sign_string',
    'attach_auth',
    'build_signing_string',
    'build_authorization_header',
    'SignableRequest',
    'SigningResult',
    'HttpMethod',
    'format_http_date',
    'calculate_content_sha256',
    'OciSigningAuth',
    'sign_prepared_request',
    # HTTP Client
    'OciHttpClient',
    'ClientConfig',
    'create_client',
]
