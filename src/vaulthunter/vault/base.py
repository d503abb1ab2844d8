"""Error taxonomy for vault operations."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Broad category of a vault failure."""

    TRANSPORT = "transport"  # could not reach the server
    STORE = "store"  # the server answered with an error
    LOCAL = "local"  # something on this machine went wrong


_KIND_LABELS = {
    ErrorKind.TRANSPORT: "HTTP error",
    ErrorKind.STORE: "Vault error",
    ErrorKind.LOCAL: "Runtime error",
}


class VaultError(Exception):
    """Base exception for vault operations."""

    kind: ErrorKind = ErrorKind.STORE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{_KIND_LABELS[self.kind]}: {self.message}"


class TransportError(VaultError):
    """Connection, TLS or timeout failure while talking to vault."""

    kind = ErrorKind.TRANSPORT


class StoreError(VaultError):
    """Vault answered, but the answer is an error."""

    kind = ErrorKind.STORE

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(StoreError):
    """Authentication to vault failed."""

    pass


class SecretNotFoundError(StoreError):
    """Secret not found in vault."""

    pass


class LocalError(VaultError):
    """Failure on the client side, before or after the HTTP exchange."""

    kind = ErrorKind.LOCAL


class MalformedResponseError(LocalError):
    """Response body is not JSON or does not have the expected shape."""

    pass


class NoCredentialSourceError(LocalError):
    """No cached token and no way to ask for a password."""

    pass


class TokenCacheError(LocalError):
    """Runtime info file is unreadable or corrupt."""

    pass


class CertificateError(LocalError):
    """A configured CA certificate cannot be loaded."""

    pass
