"""Periodic export of the whole tree to a local file."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from vaulthunter.config import HunterSettings
from vaulthunter.export.gpg import ExportError, GpgEncryptor
from vaulthunter.export.xml import entries_to_xml
from vaulthunter.vault.base import VaultError
from vaulthunter.vault.client import VaultHunterClient
from vaulthunter.vault.token_cache import LAST_EXPORT_KEY, TokenCache

logger = logging.getLogger(__name__)


def write_export(data: bytes, output: Path, recipient: str | None) -> None:
    """Write export data, encrypted for ``recipient`` when one is given."""
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"Cannot create {output.parent}: {e}") from e

    if recipient:
        GpgEncryptor(recipient).encrypt(data, output)
        return
    try:
        output.write_bytes(data)
    except OSError as e:
        raise ExportError(f"Cannot write {output}: {e}") from e


def export_due(cache: TokenCache, interval: timedelta, now: datetime) -> bool:
    """Check whether the last export is older than ``interval``."""
    last = cache.get(LAST_EXPORT_KEY, missing_ok=True)
    if last is None:
        return True
    try:
        last_time = datetime.fromisoformat(last)
    except ValueError:
        logger.warning("Ignoring invalid last export time: %s", last)
        return True
    if last_time.tzinfo is None:
        last_time = last_time.replace(tzinfo=timezone.utc)
    return now - last_time >= interval


def export_passwords(
    client: VaultHunterClient,
    settings: HunterSettings,
    now: datetime | None = None,
) -> Path | None:
    """Refresh the local export if one is configured and it is stale.

    Returns:
        The path written, or None if nothing was exported

    Raises:
        ExportError: If an entry cannot be read or the file cannot be written
    """
    if settings.local_xml is None:
        return None

    now = now or datetime.now(timezone.utc)
    interval = timedelta(hours=settings.export_interval_hours)
    if not export_due(client.cache, interval, now):
        logger.debug("Local export is recent, skipping")
        return None

    try:
        entries = client.export_all()
    except VaultError as e:
        raise ExportError(f"Cannot read entries for export: {e}") from e
    write_export(entries_to_xml(entries), settings.local_xml, settings.gpg_recipient)
    client.cache.set(LAST_EXPORT_KEY, now.isoformat())
    logger.info("Exported %d entries to %s", len(entries), settings.local_xml)
    return settings.local_xml
