"""Session token lifecycle: reuse, validate, re-authenticate, revoke."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from vaulthunter.vault.base import (
    AuthenticationError,
    MalformedResponseError,
    NoCredentialSourceError,
    StoreError,
    TokenCacheError,
    VaultError,
)
from vaulthunter.vault.models import SessionState
from vaulthunter.vault.token_cache import TOKEN_KEY, TokenCache
from vaulthunter.vault.transport import VaultTransport

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_MAX_TTL = 3600 * 24

PasswordPrompt = Callable[[str], str]


class SessionManager:
    """Own the one token a process uses.

    The token lives on the transport (which signs requests with it) and
    in the token cache (so the next invocation can reuse it). This class
    is the only writer of both.
    """

    def __init__(
        self,
        transport: VaultTransport,
        cache: TokenCache,
        username: str,
        prompt: PasswordPrompt | None = None,
        token_max_ttl: int = DEFAULT_TOKEN_MAX_TTL,
    ):
        """Initialize the session manager.

        Args:
            transport: Transport used for every request
            cache: Persistent store for the token
            username: Vault userpass username. Lower-cased here because
                userpass folds case while storage paths do not.
            prompt: Callable asking for the password without echo, or
                None when there is no interactive input
            token_max_ttl: Requested maximum token lifetime in seconds
        """
        self.transport = transport
        self.cache = cache
        self.username = username.lower()
        self.prompt = prompt
        self.token_max_ttl = token_max_ttl
        self._state = SessionState.NO_TOKEN
        # Set when bootstrap found the cache file unreadable
        self._cache_unreadable = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def token(self) -> str | None:
        return self.transport.token

    def load_cached_token(self) -> bool:
        """Install the cached token on the transport, if there is one.

        Returns:
            True if a token was found in the cache

        Raises:
            TokenCacheError: If the cache file exists but cannot be read
        """
        token = self.cache.get(TOKEN_KEY, missing_ok=True)
        self.transport.token = token
        return token is not None

    def lookup_token(self) -> dict[str, Any]:
        """Ask vault about the current token.

        Any answer that is not an error counts as proof the token works;
        the payload is not checked any further.
        """
        return self.transport.request("GET", "v1/auth/token/lookup-self")

    def login_with_password(self, password: str) -> None:
        """Log in with the userpass method and cache the new token.

        Raises:
            AuthenticationError: If vault rejects the credentials
            MalformedResponseError: If the answer carries no token
            TransportError: If vault cannot be reached
        """
        self.transport.token = None
        try:
            res = self.transport.request(
                "POST",
                f"v1/auth/userpass/login/{self.username}",
                json={"password": password, "token_max_ttl": self.token_max_ttl},
            )
        except AuthenticationError:
            raise
        except StoreError as e:
            raise AuthenticationError(f"Failed to login: {e.message}", e.status_code) from e

        try:
            token = res["auth"]["client_token"]
        except (KeyError, TypeError):
            token = None
        if not isinstance(token, str) or not token:
            raise MalformedResponseError("Login response does not contain a client token")

        self.transport.token = token
        self.cache.set(TOKEN_KEY, token, replace_corrupt=self._cache_unreadable)
        self._cache_unreadable = False
        logger.debug("Logged in as %s", self.username)

    def login_interactive(self) -> None:
        """Prompt for the password and log in with it.

        Raises:
            NoCredentialSourceError: If no password can be asked for
        """
        if self.prompt is None:
            raise NoCredentialSourceError("No cached token and no way to prompt for a password")
        try:
            password = self.prompt("Password: ")
        except EOFError as e:
            raise NoCredentialSourceError("Failed to read password") from e
        self.login_with_password(password)

    def login(self) -> None:
        """Make sure the session holds a working token.

        A cached token is reused when vault accepts it. Otherwise the
        user is asked for a password exactly once; if that fails the
        error propagates and the session is left in the FAILED state.
        An unreadable cache file is skipped and overwritten by the new
        token.
        """
        self._state = SessionState.PROBING
        try:
            if self.load_cached_token():
                self.lookup_token()
                self._state = SessionState.AUTHENTICATED
                return
        except TokenCacheError as e:
            logger.warning("Ignoring unreadable token cache: %s", e)
            self._cache_unreadable = True
        except VaultError as e:
            logger.info("Cached token rejected: %s", e)

        try:
            self.login_interactive()
        except VaultError:
            self._state = SessionState.FAILED
            raise
        self._state = SessionState.AUTHENTICATED

    def logout(self) -> None:
        """Revoke the token and forget it locally.

        A token vault already considers invalid (403) is not an error:
        the end state is the same.
        """
        if self.transport.token is None:
            return

        try:
            self.transport.request("POST", "v1/auth/token/revoke-self")
        except AuthenticationError as e:
            if e.status_code != 403:
                raise
            logger.warning("Invalid token. Maybe it has expired. Clearing token cache...")

        self.transport.token = None
        self.cache.set(TOKEN_KEY, None)
        self._state = SessionState.NO_TOKEN
