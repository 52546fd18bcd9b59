"""Abstract base class for desktop document automation.

A DocumentAutomator drives the foreign editor through OS-level input:
bring the document to the front, select its content, paste the
clipboard over it. Platform adapters (AppleScript on macOS, xdotool on
X11) implement the three steps; the injector sequences them.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from abc import ABC, abstractmethod
from typing import IO

from docpaste.domain.errors import PipelineError

logger = logging.getLogger(__name__)


class DocumentAutomator(ABC):
    """Abstract interface for focusing and editing the target document.

    Example usage::

        automator = create_automator(settings.injection)
        await automator.focus_document()
        await automator.select_all()
        await automator.paste()
    """

    @property
    @abstractmethod
    def platform(self) -> str:
        """Short platform identifier, e.g. 'macos' or 'linux'."""
        ...

    @abstractmethod
    async def focus_document(self) -> None:
        """Bring the document window to the front with its editor focused.

        Raises:
            AutomationError: If no matching document window is found or
                the automation command fails.
        """
        ...

    @abstractmethod
    async def select_all(self) -> None:
        """Select the document's full content."""
        ...

    @abstractmethod
    async def paste(self) -> None:
        """Paste the clipboard over the current selection."""
        ...


class AutomationError(PipelineError):
    """Raised when an OS automation command fails."""

    code = "AUTOMATION_FAILED"

    def __init__(self, message: str, backend: str = "", code: str | None = None) -> None:
        super().__init__(message, code=code)
        self.backend = backend


async def run_command(
    argv: list[str],
    stdin: IO[bytes] | None = None,
    timeout: float = 10.0,
    backend: str = "",
) -> str:
    """Run an external utility without a shell and return its stdout.

    ``stdin`` is an open binary file handed to the child as-is, so
    content never passes through the argument list.

    Raises:
        AutomationError: If the binary is missing, exits non-zero, or
            does not finish within ``timeout`` seconds.
    """
    logger.debug("Running %s", argv[0])
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=stdin if stdin is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise AutomationError(f"{argv[0]} is not installed", backend=backend) from e
    except OSError as e:
        raise AutomationError(f"Failed to start {argv[0]}: {e}", backend=backend) from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        process.kill()
        await process.wait()
        raise AutomationError(
            f"{argv[0]} did not finish within {timeout:.1f}s", backend=backend
        ) from e

    if process.returncode != 0:
        detail = stderr.decode("utf-8", errors="replace").strip()
        raise AutomationError(
            f"{argv[0]} exited with status {process.returncode}: {detail}",
            backend=backend,
        )
    return stdout.decode("utf-8", errors="replace")


def detect_platform(requested: str = "auto") -> str:
    """Resolve 'auto' to 'macos' or 'linux' from the running interpreter."""
    if requested != "auto":
        return requested
    if sys.platform == "darwin":
        return "macos"
    if sys.platform.startswith("linux"):
        return "linux"
    raise AutomationError(f"Desktop automation is not supported on {sys.platform}")
