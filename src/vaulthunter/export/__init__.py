"""Local export of every entry as (optionally encrypted) XML."""

from __future__ import annotations

from vaulthunter.export.gpg import ExportError, GpgEncryptor
from vaulthunter.export.local import export_due, export_passwords, write_export
from vaulthunter.export.xml import entries_to_xml

__all__ = [
    "ExportError",
    "GpgEncryptor",
    "entries_to_xml",
    "export_due",
    "export_passwords",
    "write_export",
]
