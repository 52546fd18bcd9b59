"""FastAPI HTTP server the overlay UI talks to.

The overlay posts each user instruction together with a screenshot of
the document and the open browser tabs. Instructions that are not edit
requests are answered with ``handled: false`` so the UI can route them
to its regular chat flow.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from docpaste import __version__
from docpaste.config.settings import Settings, load_settings
from docpaste.domain.models import CaptureFrame, ContextTab, EditCategory, PipelineResult, PipelineState
from docpaste.injection.injector import FALLBACK_HINT
from docpaste.pipeline.orchestrator import PipelineOrchestrator

logger = logging.getLogger(__name__)

PROGRESS_PREFIX = "Analyzing your document and preparing improvements...\n\n"
APPLIED_SUFFIX = " Changes have been applied directly to your Google Doc."

SUCCESS_MESSAGES = {
    EditCategory.GRAMMAR: "Fixed all grammar and spelling errors in your document.",
    EditCategory.SYNTHESIS: "Synthesized your notes into well-written paragraphs.",
    EditCategory.POLISH: "Polished and improved your document.",
}


class EditPayload(BaseModel):
    image: str | None = Field(default=None, description="Screenshot as a PNG data URL")
    instruction: str = Field(description="The user's request")
    context_tabs: list[ContextTab] = Field(default_factory=list)
    timestamp: datetime | None = None


class EndpointStatus(BaseModel):
    status: str = "ok"
    version: str = __version__
    pipeline_state: str = PipelineState.IDLE.value
    busy: bool = False


def result_message(result: PipelineResult) -> str:
    """User-facing text for a finished run."""
    if result.success and result.edit_type is not None:
        return PROGRESS_PREFIX + SUCCESS_MESSAGES[result.edit_type] + APPLIED_SUFFIX
    if result.fallback_used:
        return f"{result.error}. {FALLBACK_HINT}"
    return result.error or "Failed to edit document"


def create_app(
    orchestrator: PipelineOrchestrator | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.orchestrator is None:
            from docpaste.pipeline.builder import build_orchestrator
            app.state.orchestrator = build_orchestrator(settings or load_settings())
        logger.info("Endpoint started")
        yield
        logger.info("Endpoint stopped")

    app = FastAPI(
        title="docpaste Endpoint",
        description="Document rewrite and auto-paste service for the overlay UI",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.orchestrator = orchestrator

    @app.get("/health")
    async def health_check() -> EndpointStatus:
        orch: PipelineOrchestrator | None = app.state.orchestrator
        if orch is None:
            return EndpointStatus(status="starting")
        return EndpointStatus(pipeline_state=orch.state.value, busy=orch.is_busy)

    @app.post("/edit")
    async def edit_document(request: EditPayload) -> dict[str, Any]:
        orch: PipelineOrchestrator | None = app.state.orchestrator
        if orch is None:
            raise HTTPException(status_code=503, detail="Pipeline is not ready")

        edit_request = orch.classifier.build_request(request.instruction, request.context_tabs)
        if edit_request is None:
            return {"handled": False}
        if not request.image:
            logger.warning("Edit request without a screen capture, not handling it")
            return {"handled": False, "reason": "No screen capture data available"}
        if not orch.classifier.should_edit(edit_request):
            logger.info("Edit request does not target a document, not handling it")
            return {"handled": False, "reason": "No document is attached to edit"}

        try:
            frame = CaptureFrame.from_data_url(
                request.image,
                timestamp=request.timestamp,
                source_id="overlay",
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        result = await orch.run(frame, request.instruction, request.context_tabs, category=edit_request.category)
        return {"handled": True, **result.to_payload(), "message": result_message(result)}

    return app

