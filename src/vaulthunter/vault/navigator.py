"""Breadth-first navigation of the per-user secret tree."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor

from vaulthunter.vault.base import MalformedResponseError, SecretNotFoundError
from vaulthunter.vault.models import SEPARATOR, SecretPath, SecretRecord, TreeEntry
from vaulthunter.vault.transport import VaultTransport

logger = logging.getLogger(__name__)

DEFAULT_MOUNT = "passwords"


class SecretTreeNavigator:
    """List, read, search and export entries under one user's subtree.

    The only primitive vault offers for discovery is "list the children
    of a directory", so search and export both walk the tree level by
    level from the root.
    """

    def __init__(
        self,
        transport: VaultTransport,
        username: str,
        mount: str = DEFAULT_MOUNT,
        max_workers: int = 1,
    ):
        """Initialize the navigator.

        Args:
            transport: Authenticated transport
            username: Owner of the subtree; lower-cased like everywhere else
            mount: Mount point of the KV v2 engine
            max_workers: Directories of one level listed concurrently
        """
        self.transport = transport
        self.username = username.lower()
        self.mount = mount
        self.max_workers = max(1, max_workers)

    def _api_path(self, kind: str, path: SecretPath) -> str:
        parts = ["v1", self.mount, kind, self.username, *path.components]
        return SEPARATOR.join(parts)

    def list(self, path: SecretPath) -> list[TreeEntry]:
        """List the immediate children of a directory.

        Vault answers 404 when a user has no entries at all, so a missing
        root is an empty tree.

        Raises:
            StoreError: If vault reports an error for this path
            MalformedResponseError: If the listing has an unexpected shape
        """
        try:
            res = self.transport.request("LIST", self._api_path("metadata", path))
        except SecretNotFoundError:
            if path.is_root:
                logger.debug("No entries under the root yet")
                return []
            raise
        try:
            keys = res["data"]["keys"]
        except (KeyError, TypeError):
            keys = None
        if not isinstance(keys, list):
            raise MalformedResponseError(f"List result for '{path}' is not a list")

        entries = []
        for item in keys:
            if not isinstance(item, str):
                raise MalformedResponseError(f"List item under '{path}' is not a string")
            entry = TreeEntry.from_raw(item)
            if not entry.name or SEPARATOR in entry.name:
                raise MalformedResponseError(f"Invalid list item under '{path}': {item!r}")
            entries.append(entry)
        return entries

    def get(self, path: SecretPath) -> SecretRecord:
        """Retrieve the key-value pairs stored at a leaf.

        KV v2 wraps the payload twice (``data.data``); exactly those two
        levels are removed.
        """
        if path.is_root:
            raise ValueError("The root of the tree is not a secret")

        res = self.transport.request("GET", self._api_path("data", path))
        try:
            record = res["data"]["data"]
        except (KeyError, TypeError):
            record = None
        if not isinstance(record, dict):
            raise MalformedResponseError(f"Get result for '{path}' is not a dict")
        return {str(k): str(v) for k, v in record.items()}

    def _list_level(
        self, frontier: list[SecretPath]
    ) -> Iterable[tuple[SecretPath, list[TreeEntry]]]:
        if self.max_workers == 1 or len(frontier) == 1:
            return ((path, self.list(path)) for path in frontier)

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(frontier))) as executor:
            return list(zip(frontier, executor.map(self.list, frontier)))

    def walk(self) -> Iterator[tuple[SecretPath, TreeEntry]]:
        """Yield every entry of the tree, breadth first.

        Each directory is listed once; keys are never listed. Order is
        only guaranteed between levels, not between siblings.
        """
        frontier = [SecretPath()]
        depth = 0
        while frontier:
            logger.debug("Listing %d directories at depth %d", len(frontier), depth)
            next_frontier = []
            for path, entries in self._list_level(frontier):
                for entry in entries:
                    child = path.pushed(entry.name)
                    yield child, entry
                    if entry.is_dir:
                        next_frontier.append(child)
            frontier = next_frontier
            depth += 1

    def search(self, pattern: str) -> list[SecretPath]:
        """Find every key whose name contains ``pattern``, ignoring case.

        An empty pattern matches every key.
        """
        needle = pattern.lower()
        return [path for path, entry in self.walk() if entry.is_key and needle in entry.name.lower()]

    def export_all(self) -> list[tuple[SecretPath, SecretRecord]]:
        """Fetch the record of every key in the tree."""
        return [(path, self.get(path)) for path, entry in self.walk() if entry.is_key]
