"""Linux (X11) automation through ``xdotool``.

The document window is located by title, since X11 exposes no tab URLs.
Wayland sessions are not supported: xdotool cannot inject input there.
"""

from __future__ import annotations

import asyncio
import logging

from docpaste.automation.base import AutomationError, DocumentAutomator, run_command

logger = logging.getLogger(__name__)


class XdotoolAutomator(DocumentAutomator):
    """Drives the browser window on X11 via ``xdotool``."""

    def __init__(
        self,
        window_title_pattern: str = "Google Docs",
        focus_delay: float = 0.4,
        command_timeout: float = 10.0,
    ) -> None:
        self._title_pattern = window_title_pattern
        self._focus_delay = focus_delay
        self._timeout = command_timeout

    @property
    def platform(self) -> str:
        return "linux"

    async def focus_document(self) -> None:
        try:
            output = await self._xdotool("search", "--onlyvisible", "--name", self._title_pattern)
        except AutomationError as e:
            # xdotool search exits 1 when nothing matches
            raise AutomationError(
                f"No window titled like {self._title_pattern!r} is open: {e}",
                backend="xdotool",
                code="DOCUMENT_NOT_FOUND",
            ) from e
        window_ids = output.split()
        if not window_ids:
            raise AutomationError(
                f"No window titled like {self._title_pattern!r} is open",
                backend="xdotool",
                code="DOCUMENT_NOT_FOUND",
            )
        await self._xdotool("windowactivate", "--sync", window_ids[0])
        await asyncio.sleep(self._focus_delay)
        logger.info("Focused window %s", window_ids[0])

    async def select_all(self) -> None:
        await self._xdotool("key", "--clearmodifiers", "ctrl+a")

    async def paste(self) -> None:
        await self._xdotool("key", "--clearmodifiers", "ctrl+v")
        await self._xdotool("key", "--clearmodifiers", "Escape")

    async def _xdotool(self, *args: str) -> str:
        return await run_command(["xdotool", *args], timeout=self._timeout, backend="xdotool")
