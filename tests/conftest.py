"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from vaulthunter.config import AppPaths, HunterSettings
from vaulthunter.vault.base import AuthenticationError, SecretNotFoundError, StoreError
from vaulthunter.vault.client import VaultHunterClient


class FakeVault:
    """In-memory stand-in for VaultTransport serving one user's tree.

    ``secrets`` maps slash-separated leaf paths to their records; the
    directory structure is derived from those paths. Paths in ``deleted``
    are still listed but their data reads 404, like a soft-deleted KV v2
    version.
    """

    def __init__(
        self,
        secrets: dict[str, dict[str, str]] | None = None,
        username: str = "alice",
        mount: str = "passwords",
        passwords: dict[str, str] | None = None,
        valid_tokens: set[str] | None = None,
    ):
        self.secrets = dict(secrets or {})
        self.username = username
        self.mount = mount
        self.passwords = passwords or {}
        self.valid_tokens = set(valid_tokens or ())
        self.token: str | None = None
        self.calls: list[tuple[str, str, Any, str | None]] = []
        self.issued = 0
        self.health_code = 200
        self.mounts = {"passwords/": {"type": "kv", "options": {"version": "2"}}}
        self.closed = False
        self.deleted: set[str] = set()

    @property
    def listed(self) -> list[str]:
        """Paths of every LIST request, in order."""
        return [path for method, path, _, _ in self.calls if method == "LIST"]

    @property
    def logins(self) -> list[tuple[str, Any]]:
        return [(path, body) for _, path, body, _ in self.calls if "/userpass/login/" in path]

    def _children(self, rel: str) -> list[str]:
        prefix = f"{rel}/" if rel else ""
        names: list[str] = []
        for key in self.secrets:
            if not key.startswith(prefix):
                continue
            head, sep, _ = key[len(prefix) :].partition("/")
            name = f"{head}/" if sep else head
            if name not in names:
                names.append(name)
        if not names:
            raise SecretNotFoundError("GET returned HTTP 404", status_code=404)
        return names

    def request(self, method: str, path: str, json: Any = None) -> Any:
        self.calls.append((method, path, json, self.token))

        if path == "v1/auth/token/lookup-self":
            if self.token in self.valid_tokens:
                return {"data": {"id": self.token, "policies": ["default"]}}
            raise AuthenticationError("permission denied", status_code=403)

        if path.startswith("v1/auth/userpass/login/"):
            user = path.rsplit("/", 1)[1]
            if user in self.passwords and self.passwords[user] == json["password"]:
                self.issued += 1
                token = f"hvs.issued{self.issued}"
                self.valid_tokens.add(token)
                return {"auth": {"client_token": token, "lease_duration": json["token_max_ttl"]}}
            raise StoreError("invalid username or password", status_code=400)

        if path == "v1/auth/token/revoke-self":
            if self.token not in self.valid_tokens:
                raise AuthenticationError("permission denied", status_code=403)
            self.valid_tokens.discard(self.token)
            return {}

        if self.token not in self.valid_tokens:
            raise AuthenticationError("permission denied", status_code=403)

        if path == "v1/sys/mounts":
            return self.mounts

        meta = f"v1/{self.mount}/metadata/{self.username}"
        if method == "LIST" and (path == meta or path.startswith(meta + "/")):
            return {"data": {"keys": self._children(path[len(meta) :].strip("/"))}}

        data = f"v1/{self.mount}/data/{self.username}/"
        if method == "GET" and path.startswith(data):
            rel = path[len(data) :]
            if rel in self.secrets and rel not in self.deleted:
                return {"data": {"data": dict(self.secrets[rel]), "metadata": {"version": 1}}}
            raise SecretNotFoundError(f"GET {path} returned HTTP 404", status_code=404)

        raise StoreError(f"unsupported path {path}", status_code=405)

    def status(self, method: str, path: str) -> int:
        self.calls.append((method, path, None, self.token))
        return self.health_code

    def close(self) -> None:
        self.closed = True


SAMPLE_TREE = {
    "web/github": {"Username": "alice", "Password": "gh-secret", "URL": "https://github.com"},
    "web/mail/Email": {"Username": "alice@example.com", "Password": "mail-secret"},
    "bank": {"Account": "12345", "Password": "bank-secret"},
}


@pytest.fixture
def fake_vault():
    """Fake vault with a small tree and one known user."""
    return FakeVault(secrets=SAMPLE_TREE, passwords={"alice": "hunter2"})


@pytest.fixture
def app_paths(tmp_path):
    """Application paths inside a temporary directory."""
    return AppPaths(
        config_file=tmp_path / "config" / "config.toml",
        runtime_info=tmp_path / "cache" / "runtime-info.json",
    )


@pytest.fixture
def settings():
    """Settings for user Alice (mixed case on purpose)."""
    return HunterSettings(username="Alice", end_point="https://vault.test")


@pytest.fixture
def make_client(settings, app_paths, fake_vault):
    """Build a client wired to the fake vault."""

    def _make(prompt=None, transport=None):
        return VaultHunterClient(
            settings, app_paths, prompt=prompt, transport=transport or fake_vault
        )

    return _make
