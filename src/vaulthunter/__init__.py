"""Personal password manager on top of HashiCorp Vault.

vaulthunter keeps one vault session per invocation and helps you:
- Find entries by name anywhere in your secret tree
- Reveal an entry, copying its password to the clipboard
- Keep a GPG-encrypted local XML copy of every entry
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
