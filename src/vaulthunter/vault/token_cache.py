"""Runtime info file holding the cached token between invocations."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from vaulthunter.vault.base import TokenCacheError

TOKEN_KEY = "token"
LAST_EXPORT_KEY = "last_export"


class TokenCache:
    """Tiny persistent key-value store backed by a single JSON object.

    Not safe under concurrent writers; every CLI run is its own process
    and only one is expected at a time.
    """

    def __init__(self, path: Path | None):
        """Initialize the cache.

        Args:
            path: Location of the JSON file. ``None`` disables persistence.
        """
        self.path = path

    def _read(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise TokenCacheError(f"Failed to read JSON from runtime info file: {e}") from e
        except OSError as e:
            raise TokenCacheError(f"Failed to open runtime info file: {e}") from e
        if not isinstance(data, dict):
            raise TokenCacheError("Runtime info file does not hold a JSON object")
        return data

    def get(self, key: str, missing_ok: bool = False) -> str | None:
        """Read one value.

        Args:
            key: Entry to read
            missing_ok: Treat an absent file as "no value" instead of an error

        Returns:
            The stored string, or None if the key is unset

        Raises:
            TokenCacheError: If the file is absent (and ``missing_ok`` is
                false), unreadable, corrupt, or holds a non-string value
        """
        if self.path is None:
            return None
        if not self.path.exists():
            if missing_ok:
                return None
            raise TokenCacheError("No runtime info available")

        value = self._read().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise TokenCacheError(f"Invalid runtime info for '{key}'")
        return value

    def set(self, key: str, value: str | None, replace_corrupt: bool = False) -> None:
        """Write one value; ``None`` removes the key.

        Args:
            key: Entry to write
            value: New value, or None to remove the key
            replace_corrupt: Start from an empty object when the existing
                file cannot be read, dropping its other entries

        Raises:
            TokenCacheError: If the existing file is corrupt (and
                ``replace_corrupt`` is false) or the new content cannot
                be written
        """
        if self.path is None:
            return

        data: dict[str, Any] = {}
        if self.path.exists():
            try:
                data = self._read()
            except TokenCacheError:
                if not replace_corrupt:
                    raise
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise TokenCacheError(f"Failed to write runtime info: {e}") from e
