"""Search for an entry and reveal it the way a person wants to see it."""

from __future__ import annotations

from collections.abc import Callable

from vaulthunter.integrations.clipboard import ClipboardCopier
from vaulthunter.output.rich import console
from vaulthunter.vault.client import VaultHunterClient
from vaulthunter.vault.models import PASSWORD_FIELD, SecretPath, SecretRecord

InputPrompt = Callable[[str], str]


def reveal(record: SecretRecord, clipboard: ClipboardCopier) -> None:
    """Print every field; the password goes to the clipboard when possible."""
    for key, value in record.items():
        if key != PASSWORD_FIELD:
            console.print(f"{key}: {value}", markup=False, highlight=False)

    password = record.get(PASSWORD_FIELD)
    if password is None:
        return
    if clipboard.copy(password):
        console.print("Password copied to clipboard.")
    else:
        console.print(f"Password: {password}", markup=False, highlight=False)


def choose_path(paths: list[SecretPath], ask: InputPrompt) -> SecretPath:
    """Show numbered paths and ask until a valid index is entered."""
    for i, path in enumerate(paths):
        console.print(f"{i}. {path}", markup=False, highlight=False)
    console.print()
    while True:
        answer = ask("Which entry? ").strip()
        if answer.isdigit() and int(answer) < len(paths):
            return paths[int(answer)]
        console.print("Invalid input")


def search_reveal(
    client: VaultHunterClient,
    pattern: str,
    clipboard: ClipboardCopier,
    ask: InputPrompt,
) -> SecretPath | None:
    """Search for ``pattern`` and reveal the entry the user picks.

    Returns:
        The revealed path, or None if nothing matched
    """
    paths = client.search(pattern)
    if not paths:
        console.print(f"No entry matches '{pattern}'.", markup=False)
        return None

    path = paths[0] if len(paths) == 1 else choose_path(paths, ask)
    reveal(client.get(path), clipboard)
    return path
