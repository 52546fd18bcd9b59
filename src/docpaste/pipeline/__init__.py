"""Pipeline orchestration for docpaste.

Public API:
    PipelineOrchestrator -- Runs one rewrite from capture to paste
    build_orchestrator -- Wire an orchestrator from Settings
"""

from docpaste.pipeline.orchestrator import PipelineOrchestrator

__all__ = ["PipelineOrchestrator", "build_orchestrator"]


def __getattr__(name: str):
    """Lazy import for the builder, which pulls in the concrete backends."""
    if name == "build_orchestrator":
        from docpaste.pipeline.builder import build_orchestrator
        return build_orchestrator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
