"""
Signing string construction for OCI HTTP request signatures

OCI signs a fixed list of headers per method. GET, DELETE and HEAD requests
sign ``date (request-target) host``; POST, PUT and PATCH additionally sign
``content-length content-type x-content-sha256``. Each signed header becomes a
``"<name>: <value>"`` line and lines are joined with a single newline.
"""

from typing import Dict, List, Optional

from ..exceptions import AuthError
from .types import (
    SignableRequest,
    CanonicalMessage,
    SigningErrorCodes,
    GENERIC_SIGNED_HEADERS,
    BODY_SIGNED_HEADERS,
    REQUEST_TARGET,
)
from .utils import (
    parse_url,
    format_http_date,
    body_to_bytes,
    calculate_content_sha256,
)


class CanonicalMessageBuilder:
    """
    Signing string builder for one request
    """

    def __init__(self, request: SignableRequest, date: Optional[str] = None):
        """
        Initialize signing string builder.

        Args:
            request: Request to sign
            date: HTTP date to sign (generated now if None)
        """
        self.request = request
        self.date = date or format_http_date()
        self.url_parts = parse_url(request.url)

    def signed_header_names(self) -> List[str]:
        """
        Get the signed header names for the request method.

        Returns:
            list: Header names in signing order
        """
        names = list(GENERIC_SIGNED_HEADERS)
        if self.request.method.has_body:
            names.extend(BODY_SIGNED_HEADERS)
        return names

    def derived_headers(self) -> Dict[str, str]:
        """
        Compute the headers the signer adds to the request.

        Returns:
            dict: date, host and, for body methods, content-length and
                  x-content-sha256

        Raises:
            AuthError: If a body method has no content-type header
        """
        headers = {
            'date': self.date,
            'host': self.url_parts['host'],
        }

        if self.request.method.has_body:
            if not self.request.headers.get('content-type'):
                raise AuthError(
                    f"content-type header is required to sign a {self.request.method.value} request",
                    SigningErrorCodes.MISSING_REQUIRED_HEADER,
                    {"method": self.request.method.value, "header": "content-type"}
                )

            body = body_to_bytes(self.request.body)
            headers['content-length'] = str(len(body))
            headers['x-content-sha256'] = calculate_content_sha256(body)

        return headers

    def build(self) -> CanonicalMessage:
        """
        Build the signing string.

        Returns:
            CanonicalMessage: Signing string, signed header names and derived headers

        Raises:
            AuthError: If the request cannot be signed
        """
        derived = self.derived_headers()
        values = dict(self.request.headers)
        values.update(derived)

        names = self.signed_header_names()
        lines = []
        for name in names:
            if name == REQUEST_TARGET:
                lines.append(self._build_request_target_line())
            else:
                lines.append(f"{name}: {values[name]}")

        return CanonicalMessage(
            signing_string='\n'.join(lines),
            signed_headers=names,
            headers=derived
        )

    def _build_request_target_line(self) -> str:
        method = self.request.method.value.lower()
        return f"{REQUEST_TARGET}: {method} {self.url_parts['target']}"


def build_signing_string(request: SignableRequest, date: Optional[str] = None) -> CanonicalMessage:
    """
    Build the signing string for a request.

    Args:
        request: Request to sign
        date: HTTP date to sign (generated now if None)

    Returns:
        CanonicalMessage: Signing string, signed header names and derived headers

    Raises:
        AuthError: If the request cannot be signed
    """
    return CanonicalMessageBuilder(request, date).build()
