"""The pipeline orchestrator that runs one document rewrite end to end.

Ties together OCR extraction, intent classification, text rewriting,
sanitization and document injection, and reports a single terminal
result per run.

Stages run strictly in order:
    capturing -> extracting -> classifying -> rewriting -> sanitizing -> injecting

Every run ends in exactly one of ``succeeded``, ``failed_with_fallback``
(text is on the clipboard but automation did not finish) or
``failed_fatal`` (nothing reached the clipboard).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable

from docpaste.domain.errors import ClassificationError, PipelineError, StageTimeoutError
from docpaste.domain.models import (
    CaptureFrame,
    ContextTab,
    EditCategory,
    EditRequest,
    PipelineResult,
    PipelineState,
    RewriteResult,
    Transcript,
)
from docpaste.injection.injector import DocumentInjector, InjectionError
from docpaste.intent.classifier import IntentClassifier
from docpaste.ocr.base import ExtractionError
from docpaste.ocr.extractor import OcrExtractor
from docpaste.rewrite.engine import RewriteEngine
from docpaste.text.sanitizer import sanitize

logger = logging.getLogger(__name__)

StateCallback = Callable[[PipelineState, PipelineState], None]


class PipelineOrchestrator:
    """Runs capture-to-paste document rewrites, one at a time."""

    def __init__(
        self,
        extractor: OcrExtractor,
        classifier: IntentClassifier,
        rewriter: RewriteEngine,
        injector: DocumentInjector,
        ocr_timeout: float = 30.0,
        rewrite_timeout: float = 60.0,
        automation_timeout: float = 15.0,
        min_transcript_length: int = 10,
        on_state_change: StateCallback | None = None,
    ) -> None:
        self._extractor = extractor
        self._classifier = classifier
        self._rewriter = rewriter
        self._injector = injector
        self._ocr_timeout = ocr_timeout
        self._rewrite_timeout = rewrite_timeout
        self._automation_timeout = automation_timeout
        self._min_transcript_length = min_transcript_length
        self._on_state_change = on_state_change
        self._lock = asyncio.Lock()
        self._state = PipelineState.IDLE

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    @property
    def classifier(self) -> IntentClassifier:
        return self._classifier

    async def run(
        self,
        frame: CaptureFrame,
        instruction: str,
        context_tabs: Iterable[ContextTab] | None = None,
        category: EditCategory | None = None,
    ) -> PipelineResult:
        """Execute one rewrite. Never raises for stage failures.

        Concurrent calls are serialized; a second run waits for the first
        to reach its terminal state.
        """
        async with self._lock:
            self._state = PipelineState.IDLE
            return await self._run_locked(frame, instruction, list(context_tabs or []), category)

    async def _run_locked(
        self,
        frame: CaptureFrame,
        instruction: str,
        context_tabs: list[ContextTab],
        category: EditCategory | None,
    ) -> PipelineResult:
        transcript: Transcript | None = None
        rewrite: RewriteResult | None = None
        clipboard_written = False

        try:
            self._transition(PipelineState.CAPTURING)
            if not frame.image_bytes:
                raise ExtractionError("No screen capture data available", code="NO_CAPTURE")

            self._transition(PipelineState.EXTRACTING)
            transcript = await self._extract(frame)

            self._transition(PipelineState.CLASSIFYING)
            request = self._resolve_request(instruction, context_tabs, category)
            category = request.category

            self._transition(PipelineState.REWRITING)
            rewrite = await self._rewrite(transcript, category, request.instruction)

            self._transition(PipelineState.SANITIZING)
            content = sanitize(rewrite.cleaned_text)

            self._transition(PipelineState.INJECTING)
            await self._injector.stage(content)
            clipboard_written = True

            try:
                await asyncio.wait_for(self._injector.apply(), timeout=self._automation_timeout)
            except asyncio.TimeoutError:
                error = StageTimeoutError("automation", self._automation_timeout)
                return self._finish_fallback(category, transcript, rewrite, error)
            except InjectionError as e:
                return self._finish_fallback(category, transcript, rewrite, e)

        except asyncio.CancelledError:
            if clipboard_written:
                self._transition(PipelineState.FAILED_WITH_FALLBACK)
            else:
                self._transition(PipelineState.FAILED_FATAL)
            raise
        except PipelineError as e:
            if clipboard_written:
                return self._finish_fallback(category, transcript, rewrite, e)
            return self._finish_fatal(category, transcript, e)
        except Exception as e:
            logger.exception("Unexpected pipeline failure")
            if clipboard_written:
                return self._finish_fallback(category, transcript, rewrite, e)
            return self._finish_fatal(category, transcript, e)

        self._transition(PipelineState.SUCCEEDED)
        logger.info(
            "Document rewrite succeeded (%s, %d -> %d characters)",
            category.value, transcript.filtered_length, rewrite.result_length,
        )
        return PipelineResult(
            success=True,
            final_state=PipelineState.SUCCEEDED,
            edit_type=category,
            original_length=transcript.filtered_length,
            improved_length=rewrite.result_length,
            clipboard_written=True,
        )

    async def _extract(self, frame: CaptureFrame) -> Transcript:
        try:
            transcript = await asyncio.wait_for(
                asyncio.to_thread(self._extractor.extract, frame),
                timeout=self._ocr_timeout,
            )
        except asyncio.TimeoutError as e:
            raise StageTimeoutError("ocr", self._ocr_timeout) from e

        if transcript.filtered_length < self._min_transcript_length:
            raise ExtractionError(
                "Could not extract sufficient text from the document. "
                "Please ensure the document is visible on screen.",
                code="INSUFFICIENT_TEXT",
            )
        return transcript

    def _resolve_request(
        self,
        instruction: str,
        context_tabs: list[ContextTab],
        category: EditCategory | None,
    ) -> EditRequest:
        if category is not None:
            request = EditRequest(instruction=instruction, category=category, context_tabs=context_tabs)
        else:
            request = self._classifier.build_request(instruction, context_tabs)
            if request is None:
                raise ClassificationError(f"Instruction is not an edit request: {instruction[:50]!r}")
        # Without tabs the caller picked the target itself
        if context_tabs and not self._classifier.should_edit(request):
            raise ClassificationError(
                "None of the attached tabs is a document to edit",
                code="NO_DOCUMENT_TARGET",
            )
        return request

    async def _rewrite(
        self, transcript: Transcript, category: EditCategory, instruction: str
    ) -> RewriteResult:
        try:
            return await asyncio.wait_for(
                self._rewriter.rewrite(transcript, category, instruction),
                timeout=self._rewrite_timeout,
            )
        except asyncio.TimeoutError as e:
            raise StageTimeoutError("rewrite", self._rewrite_timeout) from e

    def _finish_fatal(
        self,
        category: EditCategory | None,
        transcript: Transcript | None,
        error: Exception,
    ) -> PipelineResult:
        logger.error("Document rewrite failed in %s: %s", self._state.value, error)
        self._transition(PipelineState.FAILED_FATAL)
        return PipelineResult(
            success=False,
            final_state=PipelineState.FAILED_FATAL,
            edit_type=category,
            original_length=transcript.filtered_length if transcript else 0,
            error=str(error),
            error_kind=_error_kind(error),
        )

    def _finish_fallback(
        self,
        category: EditCategory,
        transcript: Transcript,
        rewrite: RewriteResult,
        error: Exception,
    ) -> PipelineResult:
        logger.warning("Automation did not finish, text left on the clipboard: %s", error)
        self._transition(PipelineState.FAILED_WITH_FALLBACK)
        return PipelineResult(
            success=False,
            final_state=PipelineState.FAILED_WITH_FALLBACK,
            edit_type=category,
            original_length=transcript.filtered_length,
            improved_length=rewrite.result_length,
            error=str(error),
            error_kind=_error_kind(error),
            fallback_used=True,
            clipboard_written=True,
        )

    def _transition(self, new_state: PipelineState) -> None:
        old_state = self._state
        self._state = new_state
        logger.debug("Pipeline state: %s -> %s", old_state.value, new_state.value)
        if self._on_state_change is None:
            return
        try:
            self._on_state_change(old_state, new_state)
        except Exception as e:
            logger.warning("State change callback failed: %s", e)


def _error_kind(error: Exception) -> str:
    if isinstance(error, PipelineError):
        return error.code
    return "INTERNAL_ERROR"
