"""Client facade combining the session and the tree navigator."""

from __future__ import annotations

from typing import Any

from vaulthunter.config import AppPaths, HunterSettings
from vaulthunter.vault.models import HealthStatus, SecretPath, SecretRecord, TreeEntry
from vaulthunter.vault.navigator import SecretTreeNavigator
from vaulthunter.vault.session import PasswordPrompt, SessionManager
from vaulthunter.vault.token_cache import TokenCache
from vaulthunter.vault.transport import VaultTransport


def _as_path(path: SecretPath | str) -> SecretPath:
    return path if isinstance(path, SecretPath) else SecretPath.parse(path)


class VaultHunterClient:
    """Everything a caller does against vault, through one session.

    Tree operations assume ``login()`` (or ``load_cached_token()``) has
    been called; the same token is reused for the client's lifetime.
    """

    def __init__(
        self,
        settings: HunterSettings,
        paths: AppPaths,
        prompt: PasswordPrompt | None = None,
        transport: VaultTransport | None = None,
    ):
        """Initialize the client.

        Args:
            settings: User settings
            paths: Resolved application paths (for the token cache)
            prompt: Masked password prompt for interactive login
            transport: Pre-built transport (mostly for tests)

        Raises:
            CertificateError: If a configured CA certificate cannot be loaded
        """
        self.settings = settings
        self.transport = transport or VaultTransport(
            settings.end_point,
            ca_certs=settings.ca_certs,
            timeout=settings.timeout,
        )
        self.cache = TokenCache(paths.runtime_info)
        self.session = SessionManager(
            self.transport,
            self.cache,
            settings.username,
            prompt=prompt,
            token_max_ttl=settings.token_max_ttl,
        )
        self.navigator = SecretTreeNavigator(
            self.transport,
            settings.username,
            mount=settings.mount,
            max_workers=settings.max_workers,
        )

    def login(self) -> None:
        self.session.login()

    def logout(self) -> None:
        self.session.logout()

    def load_cached_token(self) -> bool:
        return self.session.load_cached_token()

    def token_info(self) -> dict[str, Any]:
        return self.session.lookup_token()

    def list(self, path: SecretPath | str = "") -> list[TreeEntry]:
        return self.navigator.list(_as_path(path))

    def get(self, path: SecretPath | str) -> SecretRecord:
        return self.navigator.get(_as_path(path))

    def search(self, pattern: str) -> list[SecretPath]:
        return self.navigator.search(pattern)

    def export_all(self) -> list[tuple[SecretPath, SecretRecord]]:
        return self.navigator.export_all()

    def health(self) -> HealthStatus:
        """Report the server state; needs no token."""
        return HealthStatus.from_status_code(self.transport.status("GET", "v1/sys/health"))

    def list_mounts(self) -> Any:
        """Return the raw ``sys/mounts`` answer for display."""
        return self.transport.request("GET", "v1/sys/mounts")

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> VaultHunterClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def get_client(
    settings: HunterSettings,
    paths: AppPaths,
    prompt: PasswordPrompt | None = None,
) -> VaultHunterClient:
    """Factory to create a client from settings."""
    return VaultHunterClient(settings, paths, prompt=prompt)
