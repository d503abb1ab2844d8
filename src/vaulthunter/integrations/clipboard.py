"""Copy text to the OS clipboard through an external program."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess  # nosec B404

logger = logging.getLogger(__name__)


class ClipboardError(Exception):
    """Clipboard program ran but failed."""

    pass


class ClipboardCopier:
    """Pipe text into a clipboard program such as ``xclip`` or ``pbcopy``."""

    def __init__(self, program: str | None, timeout: float = 10):
        """Initialize the copier.

        Args:
            program: Command line of the clipboard program, or None to
                disable clipboard support
            timeout: Seconds to wait for the program
        """
        self.command = shlex.split(program) if program else []
        self.timeout = timeout

    def is_available(self) -> bool:
        """Check if the clipboard program can be found."""
        return bool(self.command) and shutil.which(self.command[0]) is not None

    def copy(self, text: str) -> bool:
        """
        Copy text to the clipboard.

        Parameters:
            text: Content to copy.

        Returns:
            True if the text was copied, False if no clipboard program is available.

        Raises:
            ClipboardError: If the program exits with a non-zero code or times out.
        """
        if not self.is_available():
            logger.debug("No clipboard program available")
            return False

        try:
            # xclip keeps running to own the selection, so its output
            # streams must not be pipes we wait on.
            result = subprocess.run(  # nosec B603
                self.command,
                input=text,
                text=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            return False
        except subprocess.TimeoutExpired as e:
            raise ClipboardError(f"Clipboard program timed out after {self.timeout}s") from e

        if result.returncode != 0:
            raise ClipboardError(f"Clipboard program failed with code: {result.returncode}")
        return True
