"""Vault client: session handling and secret tree navigation."""

from __future__ import annotations

from vaulthunter.vault.base import (
    AuthenticationError,
    CertificateError,
    ErrorKind,
    LocalError,
    MalformedResponseError,
    NoCredentialSourceError,
    SecretNotFoundError,
    StoreError,
    TokenCacheError,
    TransportError,
    VaultError,
)
from vaulthunter.vault.client import VaultHunterClient, get_client
from vaulthunter.vault.models import (
    PASSWORD_FIELD,
    EntryKind,
    HealthStatus,
    SecretPath,
    SecretRecord,
    SessionState,
    TreeEntry,
)

__all__ = [
    "PASSWORD_FIELD",
    "AuthenticationError",
    "CertificateError",
    "EntryKind",
    "ErrorKind",
    "HealthStatus",
    "LocalError",
    "MalformedResponseError",
    "NoCredentialSourceError",
    "SecretNotFoundError",
    "SecretPath",
    "SecretRecord",
    "SessionState",
    "StoreError",
    "TokenCacheError",
    "TransportError",
    "TreeEntry",
    "VaultError",
    "VaultHunterClient",
    "get_client",
]
