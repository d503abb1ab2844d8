"""Serialize exported entries to XML."""

from __future__ import annotations

from collections.abc import Iterable

from lxml import etree

from vaulthunter.export.gpg import ExportError
from vaulthunter.vault.models import SecretPath, SecretRecord


def entries_to_xml(entries: Iterable[tuple[SecretPath, SecretRecord]]) -> bytes:
    """Render entries as ``<passwords><entry path=...><field name=...>``.

    Entries are written in the order given; fields are sorted by name.

    Raises:
        ExportError: If a path or value cannot be represented in XML
    """
    root = etree.Element("passwords")
    try:
        for path, record in entries:
            entry = etree.SubElement(root, "entry", path=str(path))
            for name in sorted(record):
                field = etree.SubElement(entry, "field", name=name)
                field.text = record[name]
    except ValueError as e:
        raise ExportError(f"Entry cannot be written as XML: {e}") from e
    return etree.tostring(root, pretty_print=True, xml_declaration=True, encoding="UTF-8")
