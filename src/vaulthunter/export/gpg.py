"""Encrypt export data with the gpg binary."""

from __future__ import annotations

import subprocess  # nosec B404
from pathlib import Path


class ExportError(Exception):
    """Export could not be written."""

    pass


class GpgEncryptor:
    """Encrypt bytes to a file for one gpg recipient."""

    def __init__(self, recipient: str, gpg_path: str = "gpg", timeout: float = 60):
        self.recipient = recipient
        self.gpg_path = gpg_path
        self.timeout = timeout

    def encrypt(self, data: bytes, output: Path) -> None:
        """
        Encrypt data and write the ciphertext to output.

        Parameters:
            data: Plaintext to encrypt.
            output: Destination file; overwritten if it exists.

        Raises:
            ExportError: If gpg is missing, times out, or exits with an error.
        """
        cmd = [
            self.gpg_path,
            "--batch",
            "--yes",
            "--encrypt",
            "--recipient",
            self.recipient,
            "--output",
            str(output),
        ]
        try:
            result = subprocess.run(  # nosec B603
                cmd,
                input=data,
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ExportError(f"gpg not found: {self.gpg_path}") from e
        except subprocess.TimeoutExpired as e:
            raise ExportError(f"gpg timed out after {self.timeout}s") from e

        if result.returncode != 0:
            stderr = result.stderr.decode(errors="replace").strip()
            raise ExportError(f"gpg failed with code {result.returncode}: {stderr}")
