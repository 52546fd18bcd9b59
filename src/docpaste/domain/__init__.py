"""Domain models for docpaste.

This package contains all core data structures and enumerations used
throughout the pipeline. All models use Pydantic v2 for validation and
serialization.
"""

from docpaste.domain.models import (
    CaptureFrame,
    ContextTab,
    EditCategory,
    EditRequest,
    InjectionOutcome,
    PipelineResult,
    PipelineState,
    RewriteResult,
    Transcript,
    TranscriptLine,
)

__all__ = [
    "CaptureFrame",
    "ContextTab",
    "EditCategory",
    "EditRequest",
    "InjectionOutcome",
    "PipelineResult",
    "PipelineState",
    "RewriteResult",
    "Transcript",
    "TranscriptLine",
]
