"""Tests for DocumentInjector staging, automation and fallback."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from docpaste.automation.base import AutomationError
from docpaste.injection.injector import DocumentInjector, InjectionError, InjectionFailure


class TestDocumentInjector:
    @pytest.mark.asyncio
    async def test_inject_success(self, injector: DocumentInjector, fake_clipboard, mock_automator: AsyncMock) -> None:
        outcome = await injector.inject("The quick brown fox jumps over the lazy dog.")

        assert outcome.success
        assert not outcome.fallback_used
        assert outcome.clipboard_staged
        assert fake_clipboard.content == "The quick brown fox jumps over the lazy dog."
        mock_automator.focus_document.assert_awaited_once()
        mock_automator.select_all.assert_awaited_once()
        mock_automator.paste.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_text_sanitized_before_staging(self, injector: DocumentInjector, fake_clipboard) -> None:
        await injector.inject("“Smart” quotes — and dashes")
        assert fake_clipboard.content == "\"Smart\" quotes - and dashes"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "abc", "\u200b\u200bok"])
    async def test_short_content_fails_fast(
        self, injector: DocumentInjector, fake_clipboard, mock_automator: AsyncMock, text: str
    ) -> None:
        with pytest.raises(InjectionError) as exc_info:
            await injector.inject(text)
        assert exc_info.value.reason == InjectionFailure.EMPTY_CONTENT
        assert fake_clipboard.stage_calls == 0
        mock_automator.focus_document.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_clipboard_failure_is_fatal(self, clipboard_factory, mock_automator: AsyncMock) -> None:
        clipboard = clipboard_factory(fail=AutomationError("pbcopy is not installed"))
        injector = DocumentInjector(clipboard, mock_automator, settle_delay=0, select_delay=0, paste_delay=0)
        with pytest.raises(InjectionError) as exc_info:
            await injector.inject("Some improved text.")
        assert exc_info.value.code == "CLIPBOARD"
        mock_automator.focus_document.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_automation_failure_falls_back(
        self, injector: DocumentInjector, fake_clipboard, mock_automator: AsyncMock
    ) -> None:
        mock_automator.focus_document.side_effect = AutomationError("No tab", code="DOCUMENT_NOT_FOUND")

        outcome = await injector.inject("Some improved text.")

        assert not outcome.success
        assert outcome.fallback_used
        assert outcome.clipboard_staged
        assert "No tab" in outcome.error
        assert fake_clipboard.content == "Some improved text."
        mock_automator.paste.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_automation_timeout_falls_back(
        self, injector: DocumentInjector, fake_clipboard, mock_automator: AsyncMock
    ) -> None:
        async def hang() -> None:
            await asyncio.sleep(10)

        mock_automator.select_all.side_effect = hang

        outcome = await injector.inject("Some improved text.", automation_timeout=0.05)

        assert outcome.fallback_used
        assert "timed out" in outcome.error
        assert fake_clipboard.content == "Some improved text."

    @pytest.mark.asyncio
    async def test_apply_wraps_automation_error(self, injector: DocumentInjector, mock_automator: AsyncMock) -> None:
        mock_automator.paste.side_effect = AutomationError("osascript exited with status 1")
        with pytest.raises(InjectionError) as exc_info:
            await injector.apply()
        assert exc_info.value.reason == InjectionFailure.AUTOMATION
