"""Core domain models for the docpaste pipeline.

These models represent the data flowing through one rewrite run: the
captured screen frame, the OCR transcript, the user's edit request, the
rewrite produced by the text model, and the outcome of pasting it back
into the document.
"""

from __future__ import annotations

import base64
import binascii
import enum
import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(?:;[\w=.-]+)*;base64,(?P<data>.*)$", re.DOTALL)
_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class EditCategory(str, enum.Enum):
    """Kind of edit requested by the user."""

    GRAMMAR = "Grammar"  # Grammar, spelling and punctuation only
    SYNTHESIS = "Synthesis"  # Notes or bullets into flowing prose
    POLISH = "Polish"  # General improvement (default)


class PipelineState(str, enum.Enum):
    """States of a single pipeline run."""

    IDLE = "idle"
    CAPTURING = "capturing"
    EXTRACTING = "extracting"
    CLASSIFYING = "classifying"
    REWRITING = "rewriting"
    SANITIZING = "sanitizing"
    INJECTING = "injecting"
    SUCCEEDED = "succeeded"
    FAILED_WITH_FALLBACK = "failed_with_fallback"
    FAILED_FATAL = "failed_fatal"

    @property
    def is_terminal(self) -> bool:
        return self in (
            PipelineState.SUCCEEDED,
            PipelineState.FAILED_WITH_FALLBACK,
            PipelineState.FAILED_FATAL,
        )


# ---------------------------------------------------------------------------
# Capture / OCR Models
# ---------------------------------------------------------------------------


class CaptureFrame(BaseModel):
    """A single screen or region snapshot handed over by the capture layer."""

    model_config = ConfigDict(frozen=True)

    image_bytes: bytes = Field(description="Encoded raster image (PNG)")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the frame was captured")
    source_id: str = Field(default="screen", description="Opaque capture source identifier")
    display_id: str = Field(default="main", description="Opaque display identifier")

    @classmethod
    def from_data_url(
        cls,
        data_url: str,
        timestamp: datetime | None = None,
        source_id: str = "screen",
        display_id: str = "main",
    ) -> CaptureFrame:
        """Build a frame from a ``data:image/png;base64,...`` URL.

        A bare base64 payload without the ``data:`` prefix is accepted too.

        Raises:
            ValueError: If the payload is empty or not valid base64.
        """
        if not data_url or not data_url.strip():
            raise ValueError("Empty capture data")
        payload = data_url.strip()
        match = _DATA_URL_RE.match(payload)
        if match:
            mime = match.group("mime")
            if mime and not mime.startswith("image/"):
                raise ValueError(f"Unsupported capture media type: {mime}")
            payload = match.group("data")
        try:
            image_bytes = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Capture data is not valid base64: {e}") from e
        if not image_bytes:
            raise ValueError("Empty capture data")
        return cls(
            image_bytes=image_bytes,
            timestamp=timestamp or datetime.now(),
            source_id=source_id,
            display_id=display_id,
        )

    @property
    def is_png(self) -> bool:
        return self.image_bytes.startswith(_PNG_SIGNATURE)


class TranscriptLine(BaseModel):
    """One recognized line of text."""

    model_config = ConfigDict(frozen=True)

    text: str
    confidence: float | None = Field(default=None, ge=0.0, le=100.0)


class Transcript(BaseModel):
    """OCR output of one CaptureFrame."""

    model_config = ConfigDict(frozen=True)

    full_text: str = Field(description="Raw OCR text, all lines")
    filtered_text: str = Field(description="Text with UI chrome and noise removed")
    lines: list[TranscriptLine] = Field(default_factory=list, description="Surviving lines")
    frame_timestamp: datetime | None = Field(default=None)

    @property
    def filtered_length(self) -> int:
        return len(self.filtered_text)


# ---------------------------------------------------------------------------
# Request / Result Models
# ---------------------------------------------------------------------------


class ContextTab(BaseModel):
    """Browser tab metadata attached by the UI layer."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: str = ""


class EditRequest(BaseModel):
    """A user's edit instruction with its resolved category."""

    model_config = ConfigDict(frozen=True)

    instruction: str
    category: EditCategory
    context_tabs: list[ContextTab] = Field(default_factory=list)
    extra_context: str | None = None

    def targets_document(self, url_pattern: str = "docs.google.com") -> bool:
        """Whether any attached tab points at the document service."""
        return any(url_pattern in tab.url for tab in self.context_tabs)


class RewriteResult(BaseModel):
    """Output of the generative rewriting step."""

    model_config = ConfigDict(frozen=True)

    raw_text: str = Field(description="Model output before cleanup")
    cleaned_text: str = Field(description="Model output with conversational artifacts removed")
    source_length: int = Field(ge=0)
    result_length: int = Field(ge=0)
    category: EditCategory
    model: str = ""


class InjectionOutcome(BaseModel):
    """Result of replacing the document content."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None
    fallback_used: bool = False
    clipboard_staged: bool = False


class PipelineResult(BaseModel):
    """Terminal report of one pipeline run, surfaced to the UI layer."""

    success: bool
    final_state: PipelineState
    edit_type: EditCategory | None = None
    original_length: int = 0
    improved_length: int = 0
    error: str | None = None
    error_kind: str | None = None
    fallback_used: bool = False
    clipboard_written: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Caller-facing dict with the UI's camelCase keys."""
        payload: dict[str, Any] = {
            "success": self.success,
            "editType": self.edit_type.value if self.edit_type else None,
            "originalLength": self.original_length,
            "improvedLength": self.improved_length,
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.fallback_used:
            payload["fallbackUsed"] = True
        return payload
