"""
Exception classes for the OCI Signer Python SDK

Errors are grouped so callers can tell apart "could not build your
credentials" (CredentialError), "could not authenticate your request"
(AuthError) and "the provider rejected the call" (TransportError).
"""

from typing import Optional, Dict, Any


class OciSDKError(Exception):
    """Base exception for all OCI Signer SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class CredentialError(OciSDKError):
    """Base class for failures while resolving credentials"""
    pass


class ConfigError(CredentialError):
    """Exception raised when a merged credential field is missing or invalid"""

    def __init__(self, message: str, error_code: str = "CONFIG_ERROR",
                 missing_fields: Optional[list] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.missing_fields = missing_fields or []


class EnvError(CredentialError):
    """Exception raised for an override that is present but empty or malformed"""

    def __init__(self, message: str, error_code: str = "INVALID_OVERRIDE",
                 field_name: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.field_name = field_name


class IniError(CredentialError):
    """Exception raised when an INI configuration source cannot be parsed"""
    pass


class PrivateKeyError(CredentialError):
    """Exception raised when a private key cannot be found, parsed or used"""
    pass


class AuthError(OciSDKError):
    """Exception raised when a request cannot be signed"""
    pass


class TransportError(OciSDKError):
    """Base class for failures talking to the provider"""
    pass


class ApiError(TransportError):
    """Exception raised for a non-2xx response from the provider"""

    def __init__(self, message: str, status: int = 0, body: str = "",
                 error_code: str = "API_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.status = status
        self.body = body


class NetworkError(TransportError):
    """Exception raised for transport level failures (timeouts, connection errors)"""

    def __init__(self, message: str, error_code: str = "NETWORK_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
