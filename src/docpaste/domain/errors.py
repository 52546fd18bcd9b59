"""Pipeline-wide error base classes.

Component-specific errors (ExtractionError, RewriteError, InjectionError,
AutomationError) live next to the component that raises them and derive
from PipelineError, so the orchestrator can map any stage failure to a
typed result.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for every error raised by a pipeline stage."""

    code: str = "PIPELINE_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class ClassificationError(PipelineError):
    """Raised when an instruction carries no edit intent."""

    code = "NOT_AN_EDIT"


class StageTimeoutError(PipelineError):
    """Raised when a stage exceeds its time budget."""

    code = "TIMEOUT"

    def __init__(self, stage: str, timeout: float) -> None:
        super().__init__(f"{stage} stage timed out after {timeout:.1f}s")
        self.stage = stage
        self.timeout = timeout
