"""HTTP transport to the vault API.

Wraps an hvac ``RawAdapter`` so that every call returns parsed JSON or
raises one of the typed errors from ``vaulthunter.vault.base``. The
adapter carries the session token and sends it only when one is set.
Nothing here retries; callers decide what to do on failure.
"""

from __future__ import annotations

import logging
import ssl
from collections.abc import Iterable
from typing import Any

import requests
from hvac.adapters import RawAdapter
from requests.adapters import HTTPAdapter

from vaulthunter.vault.base import (
    AuthenticationError,
    CertificateError,
    MalformedResponseError,
    SecretNotFoundError,
    StoreError,
    TransportError,
)

logger = logging.getLogger(__name__)


def build_ssl_context(ca_certs: Iterable[str]) -> ssl.SSLContext:
    """Create a TLS context trusting the system roots plus ``ca_certs``.

    Args:
        ca_certs: Paths to PEM encoded CA certificates

    Returns:
        A client-side SSL context

    Raises:
        CertificateError: If any certificate cannot be read or parsed
    """
    context = ssl.create_default_context()
    for cert_file in ca_certs:
        try:
            context.load_verify_locations(cafile=cert_file)
        except ssl.SSLError as e:
            raise CertificateError(f"Invalid CA cert {cert_file}: {e}") from e
        except OSError as e:
            raise CertificateError(f"Failed to read CA cert {cert_file}: {e}") from e
    return context


class TrustStoreAdapter(HTTPAdapter):
    """requests adapter that verifies servers against a given SSL context."""

    def __init__(self, ssl_context: ssl.SSLContext, **kwargs):
        # HTTPAdapter.__init__ builds the pool manager right away.
        self._ssl_context = ssl_context
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context
        return super().init_poolmanager(*args, **kwargs)


def _store_error(status: int, message: str) -> StoreError:
    if status in (401, 403):
        return AuthenticationError(message, status_code=status)
    if status == 404:
        return SecretNotFoundError(message, status_code=status)
    return StoreError(message, status_code=status)


class VaultTransport:
    """Send single requests to vault and decode the answers."""

    def __init__(
        self,
        end_point: str,
        ca_certs: Iterable[str] = (),
        timeout: float = 30.0,
        adapter: Any = None,
    ):
        """Initialize the transport.

        Args:
            end_point: Base URL of the vault HTTP API
            ca_certs: Extra CA certificate files to trust
            timeout: Network timeout in seconds for every request
            adapter: Pre-built hvac adapter (mostly for tests)

        Raises:
            CertificateError: If a CA certificate cannot be loaded
        """
        self.end_point = end_point
        if adapter is None:
            session = requests.Session()
            ca_certs = list(ca_certs)
            if ca_certs:
                session.mount("https://", TrustStoreAdapter(build_ssl_context(ca_certs)))
            adapter = RawAdapter(base_uri=end_point, timeout=timeout, session=session)
        self._adapter = adapter

    @property
    def token(self) -> str | None:
        """Token sent with every request, or None when unauthenticated."""
        return self._adapter.token or None

    @token.setter
    def token(self, value: str | None) -> None:
        self._adapter.token = value or None

    def _send(self, method: str, path: str, json: Any = None) -> requests.Response:
        kwargs = {}
        if json is not None:
            kwargs["json"] = json
        logger.debug("%s %s", method, path)
        try:
            return self._adapter.request(method, path, raise_exception=False, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"Failed to send {method} request to {path}: {e}") from e

    def request(self, method: str, path: str, json: Any = None) -> Any:
        """Send one request and return the decoded JSON body.

        Args:
            method: HTTP method, including vault's ``LIST``
            path: API path relative to the end point, e.g. ``v1/sys/mounts``
            json: Optional JSON request body

        Returns:
            The parsed JSON body (an empty dict for 204 responses)

        Raises:
            TransportError: If the server could not be reached
            StoreError: If the server answered with an error
            MalformedResponseError: If a successful answer is not JSON
        """
        response = self._send(method, path, json=json)
        status = response.status_code
        if status == 204:
            return {}

        try:
            body = response.json()
        except ValueError:
            body = None

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            raise _store_error(status, str(errors[0]))
        if status >= 400:
            raise _store_error(status, f"{method} {path} returned HTTP {status}")
        if body is None:
            raise MalformedResponseError(f"Failed to parse JSON from {method} {path}")
        return body

    def status(self, method: str, path: str) -> int:
        """Send one request and return only its HTTP status code."""
        return self._send(method, path).status_code

    def close(self) -> None:
        self._adapter.close()

    def __enter__(self) -> VaultTransport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
