"""
HTTP client for OCI REST APIs

This module provides a thin requests based client that signs every call with
an OCI credential and maps failures onto the SDK error types. Payload
construction and response parsing belong to the service specific callers.
"""

import json as jsonlib
import logging
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass

import requests

from .auth.config import OciConfig
from .exceptions import ApiError, NetworkError
from .signing.integration import OciSigningAuth
from .version import __version__

logger = logging.getLogger(__name__)

USER_AGENT = f"OCI-Signer-Python-SDK/{__version__}"


@dataclass
class ClientConfig:
    """Transport settings for OciHttpClient."""
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = USER_AGENT

    def __post_init__(self):
        """Validate client configuration."""
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")


class OciHttpClient:
    """
    Signed HTTP client for OCI REST APIs.

    Non-2xx responses raise ApiError and transport failures raise
    NetworkError. Requests are never retried.
    """

    def __init__(self, config: OciConfig, client_config: Optional[ClientConfig] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize the HTTP client.

        Args:
            config: Resolved OCI credential
            client_config: Transport settings
            session: Optional existing requests session to use
        """
        self.config = config
        self.client_config = client_config or ClientConfig()
        self.session = session or requests.Session()
        self.session.auth = OciSigningAuth(config)
        self.session.headers.update({
            'Accept': 'application/json',
            'User-Agent': self.client_config.user_agent,
        })

        logger.info(f"Initialized OCI HTTP client for region: {config.region}")

    @property
    def region(self) -> str:
        return self.config.region

    @property
    def compartment_id(self) -> str:
        return self.config.compartment_id

    def request(self, method: str, url: str, *,
                json: Optional[Any] = None,
                data: Optional[Union[str, bytes]] = None,
                headers: Optional[Dict[str, str]] = None,
                **kwargs) -> requests.Response:
        """
        Send a signed request.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Full request URL
            json: JSON serializable body, sent as application/json
            data: Raw body; the caller must supply content-type
            headers: Extra request headers
            **kwargs: Additional arguments for requests

        Returns:
            requests.Response: Successful response

        Raises:
            AuthError: If the request cannot be signed
            ApiError: On non-2xx responses
            NetworkError: On timeouts and connection failures
        """
        request_headers = dict(headers or {})

        if json is not None:
            data = jsonlib.dumps(json)
            if 'content-type' not in {k.lower() for k in request_headers}:
                request_headers['Content-Type'] = 'application/json'

        kwargs.setdefault('timeout', self.client_config.timeout)
        kwargs.setdefault('verify', self.client_config.verify_ssl)

        try:
            logger.debug(f"Making {method} request to {url}")
            response = self.session.request(method, url, data=data, headers=request_headers, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error(f"Request to {url} timed out after {kwargs['timeout']} seconds")
            raise NetworkError(
                f"Request timeout after {kwargs['timeout']} seconds",
                "TIMEOUT",
                {"url": url}
            ) from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection to {url} failed: {e}")
            raise NetworkError(f"Connection error: {e}", "CONNECTION_ERROR", {"url": url}) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise NetworkError(f"Request failed: {e}", details={"url": url}) from e

        if not response.ok:
            raise ApiError(
                f"OCI API request failed: HTTP {response.status_code}: {response.reason}",
                status=response.status_code,
                body=response.text,
                details={
                    "url": url,
                    "method": method,
                    "opc_request_id": response.headers.get('opc-request-id'),
                }
            )

        return response

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def create_client(config: Optional[OciConfig] = None, timeout: float = 30.0,
                  verify_ssl: bool = True) -> OciHttpClient:
    """
    Create an OCI HTTP client.

    Args:
        config: Resolved credential (read from the environment if None)
        timeout: Request timeout in seconds
        verify_ssl: Whether to verify TLS certificates

    Returns:
        OciHttpClient: Configured client
    """
    if config is None:
        config = OciConfig.from_env()
    return OciHttpClient(config, ClientConfig(timeout=timeout, verify_ssl=verify_ssl))
