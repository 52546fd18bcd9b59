"""System clipboard staging through the platform copy utilities.

Text is written to a temporary UTF-8 file that becomes the copy tool's
stdin. Nothing is passed through a shell or the argument list, so the
content cannot be mangled by quoting.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from pathlib import Path

from docpaste.automation.base import AutomationError, detect_platform, run_command

logger = logging.getLogger(__name__)

_MACOS_COMMANDS = (["pbcopy"], ["pbpaste"])
_X11_COMMANDS = (["xclip", "-selection", "clipboard"], ["xclip", "-selection", "clipboard", "-o"])
_WAYLAND_COMMANDS = (["wl-copy"], ["wl-paste", "--no-newline"])


class ClipboardStager:
    """Writes text to the system clipboard and reads it back."""

    def __init__(
        self,
        copy_command: list[str],
        paste_command: list[str],
        timeout: float = 10.0,
    ) -> None:
        self._copy_command = list(copy_command)
        self._paste_command = list(paste_command)
        self._timeout = timeout

    @classmethod
    def for_platform(cls, platform: str = "auto", timeout: float = 10.0) -> ClipboardStager:
        resolved = detect_platform(platform)
        if resolved == "macos":
            copy, paste = _MACOS_COMMANDS
        elif os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-copy"):
            copy, paste = _WAYLAND_COMMANDS
        else:
            copy, paste = _X11_COMMANDS
        logger.debug("Using %s for clipboard staging", copy[0])
        return cls(copy, paste, timeout=timeout)

    @property
    def tool(self) -> str:
        return self._copy_command[0]

    async def stage(self, text: str) -> None:
        """Place ``text`` on the clipboard.

        Raises:
            AutomationError: If the temp file cannot be written or the
                copy utility fails.
        """
        fd, name = tempfile.mkstemp(prefix="docpaste-", suffix=".txt")
        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(text.encode("utf-8"))
            with open(path, "rb") as stdin:
                await run_command(
                    self._copy_command, stdin=stdin, timeout=self._timeout, backend=self.tool
                )
            logger.info("Staged %d characters on the clipboard via %s", len(text), self.tool)
        except OSError as e:
            raise AutomationError(f"Failed to stage clipboard content: {e}", backend=self.tool) from e
        finally:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Failed to remove temp file %s: %s", path, e)

    async def read(self) -> str:
        """Return the current clipboard text."""
        return await run_command(
            self._paste_command, timeout=self._timeout, backend=self._paste_command[0]
        )

    async def verify(self, expected: str, prefix_length: int = 100, settle_delay: float = 0.0) -> bool:
        """Compare the clipboard's leading characters with ``expected``.

        Never raises; a failed read counts as unverified.
        """
        if settle_delay:
            await asyncio.sleep(settle_delay)
        try:
            current = await self.read()
        except AutomationError as e:
            logger.warning("Could not verify clipboard: %s", e)
            return False
        matches = current.strip()[:prefix_length] == expected.strip()[:prefix_length]
        if not matches:
            logger.warning("Clipboard content mismatch, continuing anyway")
        return matches
