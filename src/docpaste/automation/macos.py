"""macOS automation through AppleScript.

Chrome's scripting dictionary is used to find and raise the tab holding
the document; keystrokes go through System Events, which requires the
host process to have the Accessibility permission.
"""

from __future__ import annotations

import asyncio
import logging

from docpaste.automation.base import AutomationError, DocumentAutomator, run_command

logger = logging.getLogger(__name__)

_FOCUS_TEMPLATE = """
on run argv
    set pattern to item 1 of argv
    tell application "{app}"
        activate
        repeat with w in every window
            set tabIndex to 0
            repeat with t in every tab of w
                set tabIndex to tabIndex + 1
                if (URL of t contains pattern) then
                    set active tab index of w to tabIndex
                    set index of w to 1
                    return "found"
                end if
            end repeat
        end repeat
    end tell
    return "missing"
end run
"""

_KEYSTROKE_TEMPLATE = """
tell application "System Events"
    tell process "{app}"
        set frontmost to true
        keystroke "{key}" using command down
    end tell
end tell
"""

_ESCAPE_TEMPLATE = """
tell application "System Events"
    tell process "{app}"
        key code 53
    end tell
end tell
"""


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class AppleScriptAutomator(DocumentAutomator):
    """Drives Google Chrome on macOS via ``osascript``."""

    def __init__(
        self,
        browser_app: str = "Google Chrome",
        document_url_pattern: str = "docs.google.com/document",
        focus_delay: float = 0.4,
        command_timeout: float = 10.0,
    ) -> None:
        self._app = _quote(browser_app)
        self._url_pattern = document_url_pattern
        self._focus_delay = focus_delay
        self._timeout = command_timeout

    @property
    def platform(self) -> str:
        return "macos"

    async def focus_document(self) -> None:
        script = _FOCUS_TEMPLATE.format(app=self._app)
        output = await self._osascript(script, self._url_pattern)
        if output.strip() != "found":
            raise AutomationError(
                f"No {self._app} tab matching {self._url_pattern} is open",
                backend="osascript",
                code="DOCUMENT_NOT_FOUND",
            )
        # Let the window come to the front before keystrokes are sent
        await asyncio.sleep(self._focus_delay)
        logger.info("Focused document tab in %s", self._app)

    async def select_all(self) -> None:
        await self._osascript(_KEYSTROKE_TEMPLATE.format(app=self._app, key="a"))

    async def paste(self) -> None:
        await self._osascript(_KEYSTROKE_TEMPLATE.format(app=self._app, key="v"))
        await self._osascript(_ESCAPE_TEMPLATE.format(app=self._app))

    async def _osascript(self, script: str, *args: str) -> str:
        return await run_command(
            ["osascript", "-e", script, *args], timeout=self._timeout, backend="osascript"
        )
