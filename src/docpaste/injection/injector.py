"""Replace the visible document's content with rewritten text.

Injection is two-phase. ``stage`` sanitizes the text and puts it on the
clipboard; ``apply`` focuses the document, selects everything and
pastes. Once staging succeeded the user can always paste by hand, so an
automation failure degrades to a clipboard fallback instead of an error.
"""

from __future__ import annotations

import asyncio
import enum
import logging

from docpaste.automation.base import AutomationError, DocumentAutomator
from docpaste.automation.clipboard import ClipboardStager
from docpaste.domain.errors import PipelineError
from docpaste.domain.models import InjectionOutcome
from docpaste.text.sanitizer import sanitize

logger = logging.getLogger(__name__)

FALLBACK_HINT = "The improved text is on your clipboard; paste it into the document manually."


class InjectionFailure(str, enum.Enum):
    EMPTY_CONTENT = "EMPTY_CONTENT"
    CLIPBOARD = "CLIPBOARD"
    AUTOMATION = "AUTOMATION"


class InjectionError(PipelineError):
    """Raised when the document content cannot be replaced."""

    def __init__(self, message: str, reason: InjectionFailure) -> None:
        super().__init__(message, code=reason.value)
        self.reason = reason


class DocumentInjector:
    """Stages text on the clipboard and pastes it over the document."""

    def __init__(
        self,
        stager: ClipboardStager,
        automator: DocumentAutomator,
        settle_delay: float = 0.5,
        select_delay: float = 0.4,
        paste_delay: float = 0.6,
        verify_clipboard: bool = True,
        verify_prefix_length: int = 100,
        min_content_length: int = 5,
    ) -> None:
        self._stager = stager
        self._automator = automator
        self._settle_delay = settle_delay
        self._select_delay = select_delay
        self._paste_delay = paste_delay
        self._verify_clipboard = verify_clipboard
        self._verify_prefix_length = verify_prefix_length
        self._min_content_length = min_content_length

    async def inject(self, text: str, automation_timeout: float | None = None) -> InjectionOutcome:
        """Replace the document content with ``text``.

        Raises:
            InjectionError: EMPTY_CONTENT or CLIPBOARD, before anything
                reached the clipboard. Failures after staging are
                reported as a fallback outcome instead.
        """
        await self.stage(text)
        try:
            if automation_timeout is None:
                await self.apply()
            else:
                await asyncio.wait_for(self.apply(), timeout=automation_timeout)
        except asyncio.TimeoutError:
            message = f"Automation timed out after {automation_timeout:.1f}s"
            logger.warning("%s, leaving text on the clipboard", message)
            return InjectionOutcome(
                success=False, error=message, fallback_used=True, clipboard_staged=True
            )
        except InjectionError as e:
            logger.warning("Automation failed, leaving text on the clipboard: %s", e)
            return InjectionOutcome(
                success=False, error=str(e), fallback_used=True, clipboard_staged=True
            )

        logger.info("Document content replaced")
        return InjectionOutcome(success=True, clipboard_staged=True)

    async def stage(self, text: str) -> str:
        """Sanitize ``text`` and put it on the clipboard. Returns what was staged."""
        content = sanitize(text)
        if len(content) < self._min_content_length:
            raise InjectionError(
                f"Improved text is too short or empty ({len(content)} characters)",
                InjectionFailure.EMPTY_CONTENT,
            )

        try:
            await self._stager.stage(content)
        except AutomationError as e:
            raise InjectionError(f"Failed to copy to clipboard: {e}", InjectionFailure.CLIPBOARD) from e

        if self._verify_clipboard:
            await self._stager.verify(
                content,
                prefix_length=self._verify_prefix_length,
                settle_delay=self._settle_delay,
            )
        elif self._settle_delay:
            await asyncio.sleep(self._settle_delay)
        return content

    async def apply(self) -> None:
        """Focus the document, select everything and paste the clipboard.

        Raises:
            InjectionError: AUTOMATION if any automation step fails.
        """
        try:
            await self._automator.focus_document()
            await self._automator.select_all()
            await asyncio.sleep(self._select_delay)
            await self._automator.paste()
            await asyncio.sleep(self._paste_delay)
        except AutomationError as e:
            raise InjectionError(f"Failed to replace text: {e}", InjectionFailure.AUTOMATION) from e
