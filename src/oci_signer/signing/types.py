"""
Type definitions for OCI request signing

This module provides the data classes shared by the canonical signing string
builder, the signature engine and the HTTP integration.
"""

from typing import Dict, List, Optional, Union
from dataclasses import dataclass
from enum import Enum


class HttpMethod(str, Enum):
    """HTTP methods supported for signing"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @property
    def has_body(self) -> bool:
        """Whether body headers are signed for this method."""
        return self in BODY_METHODS


BODY_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH})

SIGNATURE_VERSION = "1"
SIGNATURE_ALGORITHM = "rsa-sha256"

REQUEST_TARGET = "(request-target)"

# Signed headers in the order they appear in the signing string
GENERIC_SIGNED_HEADERS = ("date", REQUEST_TARGET, "host")
BODY_SIGNED_HEADERS = ("content-length", "content-type", "x-content-sha256")


@dataclass
class SignableRequest:
    """
    Outgoing request to be signed

    Attributes:
        method: HTTP method (GET, POST, etc.)
        url: Complete request URL
        headers: Request headers as key-value pairs
        body: Optional request body (string or bytes)
    """
    method: HttpMethod
    url: str
    headers: Dict[str, str]
    body: Optional[Union[str, bytes]] = None

    def __post_init__(self):
        """Validate request after initialization"""
        if not self.url:
            raise ValueError("Request URL cannot be empty")

        if not isinstance(self.headers, dict):
            raise ValueError("Headers must be a dictionary")

        if not isinstance(self.method, HttpMethod):
            self.method = HttpMethod(str(self.method).upper())

        # Header names are case-insensitive
        self.headers = {k.lower(): v for k, v in self.headers.items()}


@dataclass
class CanonicalMessage:
    """
    Signing string and the headers derived while building it

    Attributes:
        signing_string: Exact text that is signed
        signed_headers: Signed header names in signing order
        headers: Derived headers to inject into the request
    """
    signing_string: str
    signed_headers: List[str]
    headers: Dict[str, str]


@dataclass
class SigningResult:
    """
    Result of signing one request

    Attributes:
        authorization: Authorization header value
        headers: All headers to add to the request, authorization included
        signed_headers: Signed header names in signing order
        signing_string: The signed text, for verification in tests
    """
    authorization: str
    headers: Dict[str, str]
    signed_headers: List[str]
    signing_string: str

    def __post_init__(self):
        """Validate signing result"""
        if not self.authorization:
            raise ValueError("Authorization header cannot be empty")

        if not isinstance(self.headers, dict):
            raise ValueError("Headers must be a dictionary")


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_URL = "INVALID_URL"
    INVALID_METHOD = "INVALID_METHOD"
    INVALID_BODY = "INVALID_BODY"
    MISSING_REQUIRED_HEADER = "MISSING_REQUIRED_HEADER"
    SIGNING_FAILED = "SIGNING_FAILED"


HeaderDict = Dict[str, str]
RequestBody = Union[str, bytes, None]
