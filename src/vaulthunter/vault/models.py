"""Value types shared by the session and the tree navigator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from vaulthunter.vault.base import StoreError

SEPARATOR = "/"

# Field shown through the clipboard instead of the terminal.
PASSWORD_FIELD = "Password"

SecretRecord = dict[str, str]


@dataclass(frozen=True)
class SecretPath:
    """Location in the secret tree.

    Paths are values: ``pushed`` returns a new path and leaves the
    original untouched. The root path has no components.
    """

    components: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for comp in self.components:
            _check_component(comp)

    @classmethod
    def parse(cls, text: str) -> SecretPath:
        """Build a path from ``a/b/c``, ignoring empty components."""
        return cls(tuple(part for part in text.split(SEPARATOR) if part))

    def pushed(self, component: str) -> SecretPath:
        """Return a copy of this path with ``component`` appended."""
        return SecretPath((*self.components, component))

    @property
    def name(self) -> str:
        """Last component, or an empty string for the root."""
        return self.components[-1] if self.components else ""

    @property
    def is_root(self) -> bool:
        return not self.components

    def __str__(self) -> str:
        return SEPARATOR.join(self.components)


def _check_component(comp: str) -> None:
    if not comp:
        raise ValueError("Path component must not be empty")
    if SEPARATOR in comp:
        raise ValueError(f"Path component must not contain '{SEPARATOR}': {comp!r}")


class EntryKind(Enum):
    """Kind of an item returned by a directory listing."""

    KEY = "key"
    DIR = "dir"


@dataclass(frozen=True)
class TreeEntry:
    """One child of a listed directory."""

    kind: EntryKind
    name: str

    @classmethod
    def from_raw(cls, raw: str) -> TreeEntry:
        """Classify a raw listing name.

        Vault marks sub-directories with a trailing separator; there is
        no other way to tell them apart from keys.
        """
        if raw.endswith(SEPARATOR):
            return cls(EntryKind.DIR, raw[: -len(SEPARATOR)])
        return cls(EntryKind.KEY, raw)

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIR

    @property
    def is_key(self) -> bool:
        return self.kind == EntryKind.KEY


class HealthStatus(Enum):
    """Server state reported by ``sys/health``."""

    ACTIVE = "active"
    STANDBY = "standby"
    RECOVERY = "recovery"
    PERFORMANCE = "performance"
    UNINITIALIZED = "uninitialized"
    SEALED = "sealed"

    @classmethod
    def from_status_code(cls, code: int) -> HealthStatus:
        """Map the HTTP status of a health request to a server state.

        Raises:
            StoreError: If the code is not one vault documents for health
        """
        try:
            return _HEALTH_CODES[code]
        except KeyError:
            raise StoreError(f"Invalid status code from health: {code}", code) from None

    def __str__(self) -> str:
        return self.value


_HEALTH_CODES = {
    200: HealthStatus.ACTIVE,
    429: HealthStatus.STANDBY,
    472: HealthStatus.RECOVERY,
    473: HealthStatus.PERFORMANCE,
    501: HealthStatus.UNINITIALIZED,
    503: HealthStatus.SEALED,
}


class SessionState(Enum):
    """Authentication state of a session."""

    NO_TOKEN = "no_token"
    PROBING = "probing"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"
